"""
Tests for CheckoutInitiator.

Tests cover:
- Redirect URL construction
- Checkout session storage and replacement
- Request parameters sent to the processor
- Configuration and processor failures
"""

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.test import override_settings
from django.utils import translation

from orders.models import CheckoutSession, Order
from payments.adapters import HostedCheckoutResult
from payments.exceptions import (
    ConfigurationError,
    UpstreamError,
    UpstreamValidationError,
)
from payments.models import Payment
from payments.services import CheckoutInitiator, RedirectTarget, build_redirect_url
from payments.tests.factories import PaymentGatewayFactory
from payments.tests.fakes import FakeProcessor

RETURN_URL = "https://shop.example.com/return/"


# =============================================================================
# Helper Tests
# =============================================================================


class TestBuildRedirectUrl:
    """Tests for build_redirect_url."""

    def test_joins_subdomain_and_partial_url(self):
        """Should prefix the partial URL with https and the subdomain."""
        url = build_redirect_url("payment", "pay1.secured-by-ingenico.com/checkout/HC1")

        assert url == "https://payment.pay1.secured-by-ingenico.com/checkout/HC1"


# =============================================================================
# Initiate Tests
# =============================================================================


@pytest.mark.django_db
class TestInitiate:
    """Tests for CheckoutInitiator.initiate."""

    def test_returns_redirect_target(self, order, gateway):
        """Should build the hosted page URL from the processor response."""
        processor = FakeProcessor(
            create_results=[
                HostedCheckoutResult(
                    return_mac="MAC1",
                    hosted_checkout_id="HC1",
                    partial_redirect_url="pay1.secured-by-ingenico.com/checkout/HC1",
                )
            ]
        )

        target = CheckoutInitiator.initiate(
            order, gateway, RETURN_URL, processor=processor
        )

        assert target == RedirectTarget(
            url="https://payment.pay1.secured-by-ingenico.com/checkout/HC1",
            hosted_checkout_id="HC1",
        )

    def test_stores_checkout_session(self, order, gateway, fake_processor):
        """Should persist RETURNMAC and hosted checkout id on the order."""
        CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=fake_processor)

        stored = Order.objects.get(pk=order.pk)
        assert stored.get_checkout_session() == CheckoutSession(
            return_mac="MAC1", hosted_checkout_id="HC1"
        )

    def test_second_initiate_replaces_session(self, order, gateway, fake_processor):
        """Should keep only the latest session when started twice."""
        CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=fake_processor)
        CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=fake_processor)

        stored = Order.objects.get(pk=order.pk)
        assert stored.get_checkout_session() == CheckoutSession(
            return_mac="MAC2", hosted_checkout_id="HC2"
        )
        assert len(fake_processor.create_calls) == 2

    def test_does_not_create_payment(self, order, gateway, fake_processor):
        """Should leave payments to the return flow."""
        CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=fake_processor)

        assert Payment.objects.count() == 0

    def test_request_parameters(self, order, gateway, fake_processor):
        """Should send amount in minor units, currency, return URL and order number."""
        CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=fake_processor)

        params = fake_processor.create_calls[0]
        assert params.amount_minor == 1999
        assert params.currency == "USD"
        assert params.return_url == RETURN_URL
        assert params.merchant_customer_id == order.number
        assert params.show_result_page is False

    def test_amount_rounds_half_up(self, gateway, fake_processor):
        """Should round sub-cent totals half up."""
        from orders.tests.factories import OrderFactory

        order = OrderFactory(total_amount=Decimal("10.005"))

        CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=fake_processor)

        assert fake_processor.create_calls[0].amount_minor == 1001

    def test_locale_from_active_language(self, order, gateway, fake_processor):
        """Should convert the active language to a locale."""
        with translation.override("fr-be"):
            CheckoutInitiator.initiate(
                order, gateway, RETURN_URL, processor=fake_processor
            )

        assert fake_processor.create_calls[0].locale == "fr_BE"

    def test_explicit_locale(self, order, gateway, fake_processor):
        """Should pass an explicit locale through unchanged."""
        CheckoutInitiator.initiate(
            order, gateway, RETURN_URL, locale="nl_NL", processor=fake_processor
        )

        assert fake_processor.create_calls[0].locale == "nl_NL"

    @override_settings(HOSTED_CHECKOUT_DEFAULT_COUNTRY_CODE="BE")
    def test_billing_country_from_settings(self, order, gateway, fake_processor):
        """Should use the configured billing country."""
        CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=fake_processor)

        assert fake_processor.create_calls[0].country_code == "BE"

    def test_uses_ingenico_adapter_by_default(self, order, gateway, fake_processor):
        """Should build an IngenicoAdapter from the gateway when none is given."""
        with patch(
            "payments.services.checkout_initiator.IngenicoAdapter",
            return_value=fake_processor,
        ) as adapter_class:
            CheckoutInitiator.initiate(order, gateway, RETURN_URL)

        config = adapter_class.call_args.args[0]
        assert config.merchant_id == gateway.merchant_id
        assert len(fake_processor.create_calls) == 1


# =============================================================================
# Failure Tests
# =============================================================================


@pytest.mark.django_db
class TestInitiateFailures:
    """Tests for CheckoutInitiator.initiate error handling."""

    @pytest.mark.parametrize(
        "field_name,message",
        [
            ("api_key", "API Key not provided."),
            ("api_secret", "API Secret not provided."),
            ("integrator", "Integrator not provided."),
            ("merchant_id", "Merchant ID not provided."),
            ("subdomain", "Subdomain not provided."),
        ],
    )
    def test_missing_credential(self, order, fake_processor, field_name, message):
        """Should raise ConfigurationError before calling the processor."""
        gateway = PaymentGatewayFactory(**{field_name: ""})

        with pytest.raises(ConfigurationError, match=message):
            CheckoutInitiator.initiate(
                order, gateway, RETURN_URL, processor=fake_processor
            )

        assert fake_processor.create_calls == []
        assert Order.objects.get(pk=order.pk).get_checkout_session() is None

    def test_processor_rejection(self, order, gateway):
        """Should propagate UpstreamValidationError and store no session."""
        processor = FakeProcessor(
            create_error=UpstreamValidationError("Invalid currency code", status_code=400)
        )

        with pytest.raises(UpstreamValidationError, match="Invalid currency code"):
            CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=processor)

        assert Order.objects.get(pk=order.pk).get_checkout_session() is None

    def test_failure_keeps_previous_session(self, order_with_session, gateway):
        """Should leave an earlier session in place when a restart fails."""
        processor = FakeProcessor(create_error=UpstreamError("timeout"))

        with pytest.raises(UpstreamError):
            CheckoutInitiator.initiate(
                order_with_session, gateway, RETURN_URL, processor=processor
            )

        stored = Order.objects.get(pk=order_with_session.pk)
        assert stored.get_checkout_session() == CheckoutSession("MAC1", "HC1")

    def test_response_without_tokens(self, order, gateway):
        """Should reject a processor response missing correlation tokens."""
        processor = FakeProcessor(
            create_results=[
                HostedCheckoutResult(
                    return_mac="",
                    hosted_checkout_id="HC1",
                    partial_redirect_url="pay1.secured-by-ingenico.com/checkout/HC1",
                )
            ]
        )

        with pytest.raises(UpstreamError) as exc_info:
            CheckoutInitiator.initiate(order, gateway, RETURN_URL, processor=processor)

        assert exc_info.value.error_code == "UPSTREAM_INVALID_RESPONSE"
        assert Order.objects.get(pk=order.pk).get_checkout_session() is None
