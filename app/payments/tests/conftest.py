"""
Pytest fixtures for payment tests.

This module provides fixtures for creating payment-related test data:
gateways, orders with and without a stored checkout session, and an
in-memory processor.

Usage:
    def test_return(order_with_session, gateway, fake_processor):
        payment = ReturnValidator.validate(
            order_with_session,
            gateway,
            ReturnParams("MAC1", "HC1"),
            processor=fake_processor,
        )
"""

import pytest

from orders.models import CheckoutSession
from orders.tests.factories import OrderFactory
from payments.tests.factories import PaymentGatewayFactory
from payments.tests.fakes import FakeProcessor


# =============================================================================
# Gateway Fixtures
# =============================================================================


@pytest.fixture
def gateway(db):
    """Create an enabled sandbox gateway with complete credentials."""
    return PaymentGatewayFactory()


@pytest.fixture
def disabled_gateway(db):
    """Create a gateway that cannot be used."""
    return PaymentGatewayFactory(is_enabled=False)


# =============================================================================
# Order Fixtures
# =============================================================================


@pytest.fixture
def order(db):
    """Create a $19.99 draft order without a checkout session."""
    return OrderFactory()


@pytest.fixture
def order_with_session(order):
    """Order with stored session MAC1 / HC1."""
    order.set_checkout_session(
        CheckoutSession(return_mac="MAC1", hosted_checkout_id="HC1")
    )
    return order


# =============================================================================
# Processor Fixtures
# =============================================================================


@pytest.fixture
def fake_processor():
    """In-memory processor returning MAC1 / HC1 and a completed payment."""
    return FakeProcessor()


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Anonymous DRF test client (shoppers are not logged in)."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def patch_processor(fake_processor):
    """Route both services to the in-memory processor instead of the SDK."""
    from unittest.mock import patch

    with patch(
        "payments.services.checkout_initiator.IngenicoAdapter",
        return_value=fake_processor,
    ), patch(
        "payments.services.return_validator.IngenicoAdapter",
        return_value=fake_processor,
    ):
        yield fake_processor
