"""
End-to-end tests for the hosted checkout journey.

Each test drives the HTTP endpoints with the real IngenicoAdapter; only
the SDK client is replaced, so request mapping, response parsing and the
validation chain all run together.
"""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from django.urls import reverse
from rest_framework import status

from orders.models import Order, OrderState
from payments.models import Payment
from payments.state_machines import PaymentState


def checkout_url(name, order, gateway):
    return reverse(
        f"payments:{name}",
        kwargs={"order_id": order.id, "gateway_code": gateway.code},
    )


def created_response(n):
    return SimpleNamespace(
        returnmac=f"MAC{n}",
        hosted_checkout_id=f"HC{n}",
        partial_redirect_url=f"pay1.secured-by-ingenico.com/checkout/HC{n}",
    )


def completed_response(payment_id="P1"):
    return SimpleNamespace(
        status="PAYMENT_CREATED",
        created_payment_output=SimpleNamespace(
            payment=SimpleNamespace(
                id=payment_id,
                status="CAPTURED",
                status_output=SimpleNamespace(
                    status_category="COMPLETED",
                    is_authorized=True,
                ),
            )
        ),
    )


@pytest.fixture
def hosted_checkouts_api():
    """Mock the SDK client; yields its hostedcheckouts() API."""
    client = MagicMock()
    client.__enter__.return_value = client
    api = client.merchant.return_value.hostedcheckouts.return_value
    api.create.side_effect = [created_response(1), created_response(2)]
    api.get.return_value = completed_response()

    with patch(
        "payments.adapters.ingenico_adapter.Factory.create_client_from_configuration",
        return_value=client,
    ):
        yield api


@pytest.mark.django_db
class TestHostedCheckoutJourney:
    """Full redirect and return journey."""

    def test_successful_checkout(self, api_client, order, gateway, hosted_checkouts_api):
        """
        Should take a $19.99 order from redirect to a completed payment.

        Checkout returns MAC1 / HC1, the shopper comes back with the same
        values and the processor reports P1 CAPTURED, COMPLETED, authorized.
        """
        response = api_client.get(checkout_url("checkout_redirect", order, gateway))

        assert response.status_code == status.HTTP_302_FOUND
        assert (
            response["Location"]
            == "https://payment.pay1.secured-by-ingenico.com/checkout/HC1"
        )

        request = hosted_checkouts_api.create.call_args.args[0]
        assert request.order.amount_of_money.amount == 1999
        assert request.order.amount_of_money.currency_code == "USD"

        response = api_client.get(
            checkout_url("checkout_return", order, gateway),
            {"RETURNMAC": "MAC1", "hostedCheckoutId": "HC1"},
        )

        assert response.status_code == status.HTTP_200_OK
        hosted_checkouts_api.get.assert_called_once_with("HC1")

        payment = Payment.objects.get(order=order)
        assert payment.state == PaymentState.COMPLETED
        assert payment.amount == Decimal("19.99")
        assert payment.currency == "USD"
        assert payment.remote_id == "P1"
        assert payment.remote_state == "CAPTURED"
        assert payment.gateway_id == gateway.code

        stored = Order.objects.get(pk=order.pk)
        assert stored.state == OrderState.COMPLETED
        assert stored.get_checkout_session() is None

    def test_replayed_return(self, api_client, order, gateway, hosted_checkouts_api):
        """Should reject the second delivery of the same return."""
        api_client.get(checkout_url("checkout_redirect", order, gateway))
        params = {"RETURNMAC": "MAC1", "hostedCheckoutId": "HC1"}

        first = api_client.get(checkout_url("checkout_return", order, gateway), params)
        second = api_client.get(checkout_url("checkout_return", order, gateway), params)

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_400_BAD_REQUEST
        assert Payment.objects.filter(order=order).count() == 1

    def test_restarted_checkout(self, api_client, order, gateway, hosted_checkouts_api):
        """Should only accept the return of the latest hosted checkout."""
        api_client.get(checkout_url("checkout_redirect", order, gateway))
        api_client.get(checkout_url("checkout_redirect", order, gateway))

        stale = api_client.get(
            checkout_url("checkout_return", order, gateway),
            {"RETURNMAC": "MAC1", "hostedCheckoutId": "HC1"},
        )
        current = api_client.get(
            checkout_url("checkout_return", order, gateway),
            {"RETURNMAC": "MAC2", "hostedCheckoutId": "HC2"},
        )

        assert stale.status_code == status.HTTP_400_BAD_REQUEST
        assert current.status_code == status.HTTP_200_OK
        hosted_checkouts_api.get.assert_called_once_with("HC2")

    def test_cancel_then_return(self, api_client, order, gateway, hosted_checkouts_api):
        """Should still accept the return after the shopper canceled once."""
        api_client.get(checkout_url("checkout_redirect", order, gateway))
        api_client.get(checkout_url("checkout_cancel", order, gateway))

        response = api_client.get(
            checkout_url("checkout_return", order, gateway),
            {"RETURNMAC": "MAC1", "hostedCheckoutId": "HC1"},
        )

        assert response.status_code == status.HTTP_200_OK
