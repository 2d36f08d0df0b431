"""
Pytest fixtures for Ingenico adapter tests.

This module provides fixtures for testing the Ingenico adapter, including
a mocked SDK client, processor responses and SDK exceptions.

Sections:
    - Test Data Fixtures
    - Mock Processor Response Fixtures
    - Mock SDK Error Fixtures
    - Mock SDK Client Fixtures
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from ingenico.connect.sdk.api_exception import ApiException
from ingenico.connect.sdk.authorization_exception import AuthorizationException
from ingenico.connect.sdk.communication_exception import CommunicationException
from ingenico.connect.sdk.validation_exception import ValidationException

from payments.adapters import CreateHostedCheckoutParams, HostedCheckoutConfig


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def hosted_checkout_config():
    """Complete sandbox credentials."""
    return HostedCheckoutConfig(
        api_key="key_test",
        api_secret="secret_test",
        integrator="Example Shop",
        merchant_id="M1",
        subdomain="payment",
        mode="test",
    )


@pytest.fixture
def create_params():
    """Parameters for a $19.99 hosted checkout."""
    return CreateHostedCheckoutParams(
        amount_minor=1999,
        currency="USD",
        locale="en_US",
        return_url="https://shop.example.com/return/",
        merchant_customer_id="1001",
    )


# =============================================================================
# Mock Processor Response Fixtures
# =============================================================================


@pytest.fixture
def mock_create_response():
    """Create a mock CreateHostedCheckoutResponse."""

    def _create(
        returnmac: str = "MAC1",
        hosted_checkout_id: str = "HC1",
        partial_redirect_url: str = "pay1.secured-by-ingenico.com/checkout/HC1",
    ) -> SimpleNamespace:
        return SimpleNamespace(
            returnmac=returnmac,
            hosted_checkout_id=hosted_checkout_id,
            partial_redirect_url=partial_redirect_url,
        )

    return _create


@pytest.fixture
def mock_get_response():
    """Create a mock GetHostedCheckoutResponse."""

    def _create(
        status: str = "PAYMENT_CREATED",
        payment_id: str | None = "P1",
        payment_status: str = "CAPTURED",
        status_category: str = "COMPLETED",
        is_authorized: bool = True,
    ) -> MagicMock:
        response = MagicMock()
        response.status = status
        response.to_dictionary.return_value = {"status": status}
        if payment_id is None:
            response.created_payment_output = None
        else:
            response.created_payment_output = SimpleNamespace(
                payment=SimpleNamespace(
                    id=payment_id,
                    status=payment_status,
                    status_output=SimpleNamespace(
                        status_category=status_category,
                        is_authorized=is_authorized,
                    ),
                )
            )
        return response

    return _create


# =============================================================================
# Mock SDK Error Fixtures
# =============================================================================


@pytest.fixture
def validation_exception():
    """Create an SDK ValidationException (HTTP 400)."""
    return ValidationException(
        400,
        "{}",
        "err-400",
        [SimpleNamespace(message="Invalid currency code")],
    )


@pytest.fixture
def authorization_exception():
    """Create an SDK AuthorizationException (HTTP 403)."""
    return AuthorizationException(
        403,
        "{}",
        "err-403",
        [SimpleNamespace(message="Access denied")],
    )


@pytest.fixture
def api_exception():
    """Create a generic SDK ApiException (HTTP 500)."""
    return ApiException(
        500,
        "{}",
        "err-500",
        [SimpleNamespace(message="Internal processor error")],
    )


@pytest.fixture
def communication_exception():
    """Create an SDK CommunicationException."""
    return CommunicationException(ConnectionError("connection refused"))


# =============================================================================
# Mock SDK Client Fixtures
# =============================================================================


@pytest.fixture
def mock_sdk_client():
    """
    Mock the SDK client factory.

    Yields the client; the hosted checkouts API is available as
    client.merchant.return_value.hostedcheckouts.return_value.
    """
    client = MagicMock()
    client.__enter__.return_value = client
    with patch(
        "payments.adapters.ingenico_adapter.Factory.create_client_from_configuration",
        return_value=client,
    ) as factory:
        client.factory = factory
        yield client


@pytest.fixture
def hosted_checkouts_api(mock_sdk_client):
    """The mocked hostedcheckouts() API of the mocked client."""
    return mock_sdk_client.merchant.return_value.hostedcheckouts.return_value
