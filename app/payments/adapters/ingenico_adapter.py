"""
Ingenico Connect adapter for hosted checkout operations.

This module provides the IngenicoAdapter class which encapsulates all
processor API interactions. Every hosted checkout call goes through this
adapter to get consistent error handling, timeouts and logging.

Features:
- Endpoint selection from the gateway mode (sandbox vs production)
- Configurable timeouts on all API calls
- Automatic error translation to domain exceptions
- Structured logging with timing metrics

Configuration:
- Per gateway: HostedCheckoutConfig (built from a PaymentGateway row)
- Via settings:
  - INGENICO_CONNECT_TIMEOUT_SECONDS: Connect timeout (default: 5)
  - INGENICO_SOCKET_TIMEOUT_SECONDS: Socket timeout (default: 30)
  - INGENICO_MAX_CONNECTIONS: Connection pool size (default: 10)

Usage:
    from payments.adapters import (
        CreateHostedCheckoutParams,
        HostedCheckoutConfig,
        IngenicoAdapter,
    )

    config = HostedCheckoutConfig.from_gateway(gateway)
    adapter = IngenicoAdapter(config)

    result = adapter.create_hosted_checkout(
        CreateHostedCheckoutParams(
            amount_minor=1999,
            currency="USD",
            locale="en_US",
            return_url="https://shop.example.com/checkout/return/",
        )
    )

    status = adapter.get_hosted_checkout(result.hosted_checkout_id)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from django.conf import settings
from ingenico.connect.sdk.api_exception import ApiException
from ingenico.connect.sdk.authorization_exception import AuthorizationException
from ingenico.connect.sdk.communication_exception import CommunicationException
from ingenico.connect.sdk.communicator_configuration import CommunicatorConfiguration
from ingenico.connect.sdk.defaultimpl.authorization_type import AuthorizationType
from ingenico.connect.sdk.domain.definitions.address import Address
from ingenico.connect.sdk.domain.definitions.amount_of_money import AmountOfMoney
from ingenico.connect.sdk.domain.hostedcheckout.create_hosted_checkout_request import (
    CreateHostedCheckoutRequest,
)
from ingenico.connect.sdk.domain.hostedcheckout.definitions.hosted_checkout_specific_input import (
    HostedCheckoutSpecificInput,
)
from ingenico.connect.sdk.domain.payment.definitions.customer import Customer
from ingenico.connect.sdk.domain.payment.definitions.order import Order
from ingenico.connect.sdk.factory import Factory
from ingenico.connect.sdk.validation_exception import ValidationException

from payments.exceptions import (
    ConfigurationError,
    UpstreamError,
    UpstreamValidationError,
)
from payments.state_machines import GatewayMode

if TYPE_CHECKING:
    from ingenico.connect.sdk.client import Client

    from payments.models import PaymentGateway


SANDBOX_API_ENDPOINT = "https://eu.sandbox.api-ingenico.com"
PRODUCTION_API_ENDPOINT = "https://world.api-ingenico.com"

# Hosted checkout status once the shopper has produced a payment
PAYMENT_CREATED = "PAYMENT_CREATED"

# Payment status category for a finished payment
STATUS_CATEGORY_COMPLETED = "COMPLETED"


def get_api_endpoint(mode: str) -> str:
    """
    Return the processor API endpoint for a gateway mode.

    Only "test" selects the sandbox; every other value is production.
    """
    if mode == GatewayMode.TEST:
        return SANDBOX_API_ENDPOINT
    return PRODUCTION_API_ENDPOINT


def to_minor_units(amount: Decimal) -> int:
    """
    Convert a major-unit amount to minor units (e.g., 19.99 -> 1999).

    Rounds half up, so 10.005 -> 1001.
    """
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# =============================================================================
# Data Types
# =============================================================================


# (attribute, message) in the order they are checked
REQUIRED_CREDENTIALS: tuple[tuple[str, str], ...] = (
    ("api_key", "API Key not provided."),
    ("api_secret", "API Secret not provided."),
    ("integrator", "Integrator not provided."),
    ("merchant_id", "Merchant ID not provided."),
    ("subdomain", "Subdomain not provided."),
)


@dataclass(frozen=True)
class HostedCheckoutConfig:
    """
    Validated processor credentials for one merchant account.

    Construction fails with ConfigurationError when any of the five
    required fields is empty, so holding an instance means the gateway
    is usable.

    Attributes:
        api_key: API key id
        api_secret: Secret API key
        integrator: Integrator name sent with every request
        merchant_id: Processor merchant id
        subdomain: Hosted page subdomain
        mode: "test" for the sandbox, anything else for production
    """

    api_key: str
    api_secret: str
    integrator: str
    merchant_id: str
    subdomain: str
    mode: str = GatewayMode.TEST

    def __post_init__(self) -> None:
        """Validate required credentials after initialization."""
        for attribute, message in REQUIRED_CREDENTIALS:
            value = getattr(self, attribute)
            if not value or not str(value).strip():
                raise ConfigurationError(message, details={"field": attribute})

    @classmethod
    def from_gateway(cls, gateway: PaymentGateway) -> HostedCheckoutConfig:
        """
        Build a config from a PaymentGateway row.

        Raises:
            ConfigurationError: A required credential is empty
        """
        return cls(
            api_key=gateway.api_key,
            api_secret=gateway.api_secret,
            integrator=gateway.integrator,
            merchant_id=gateway.merchant_id,
            subdomain=gateway.subdomain,
            mode=gateway.mode,
        )

    @property
    def api_endpoint(self) -> str:
        return get_api_endpoint(self.mode)

    def __repr__(self) -> str:
        # Keep credentials out of logs and tracebacks
        return (
            f"HostedCheckoutConfig(merchant_id={self.merchant_id!r}, "
            f"subdomain={self.subdomain!r}, mode={self.mode!r})"
        )


@dataclass
class CreateHostedCheckoutParams:
    """
    Parameters for creating a hosted checkout.

    Attributes:
        amount_minor: Amount in smallest currency unit (e.g., cents)
        currency: ISO 4217 currency code
        locale: Hosted page locale (e.g., "en_US")
        return_url: Where the processor redirects the shopper afterwards
        merchant_customer_id: Merchant-side customer reference (order number)
        country_code: Billing address country code
        show_result_page: Whether the processor shows its own result page
    """

    amount_minor: int
    currency: str
    locale: str
    return_url: str
    merchant_customer_id: str | None = None
    country_code: str = "US"
    show_result_page: bool = False

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if not self.currency:
            raise ValueError("currency is required")
        if not self.return_url:
            raise ValueError("return_url is required")


@dataclass
class HostedCheckoutResult:
    """
    Result of creating a hosted checkout.

    Attributes:
        return_mac: RETURNMAC the processor echoes on the return redirect
        hosted_checkout_id: Processor id of the hosted checkout
        partial_redirect_url: Hosted page URL without scheme and subdomain
    """

    return_mac: str
    hosted_checkout_id: str
    partial_redirect_url: str


@dataclass
class HostedCheckoutStatus:
    """
    Authoritative hosted checkout status fetched from the processor.

    Attributes:
        status: Hosted checkout status (PAYMENT_CREATED, IN_PROGRESS, ...)
        payment_id: Processor payment id (None until a payment exists)
        payment_status: Processor payment status (e.g., CAPTURED)
        status_category: Payment status category (e.g., COMPLETED)
        is_authorized: Whether the payment is authorized
        raw_response: Processor response dict (for debugging)
    """

    status: str
    payment_id: str | None = None
    payment_status: str | None = None
    status_category: str | None = None
    is_authorized: bool = False
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def payment_created(self) -> bool:
        return self.status == PAYMENT_CREATED

    @property
    def is_completed(self) -> bool:
        return self.status_category == STATUS_CATEGORY_COMPLETED


@runtime_checkable
class HostedCheckoutGateway(Protocol):
    """
    The two processor operations the checkout flow depends on.

    IngenicoAdapter implements it against the real API; tests supply
    an in-memory double.
    """

    def create_hosted_checkout(
        self, params: CreateHostedCheckoutParams
    ) -> HostedCheckoutResult: ...

    def get_hosted_checkout(self, hosted_checkout_id: str) -> HostedCheckoutStatus: ...


# =============================================================================
# Ingenico Adapter
# =============================================================================


class IngenicoAdapter:
    """
    Adapter for Ingenico Connect hosted checkout operations.

    One instance per merchant account. A fresh SDK client is opened and
    closed for every call; no state is shared between requests.

    Usage:
        adapter = IngenicoAdapter(HostedCheckoutConfig.from_gateway(gateway))
        result = adapter.create_hosted_checkout(params)
        status = adapter.get_hosted_checkout(result.hosted_checkout_id)
    """

    def __init__(self, config: HostedCheckoutConfig):
        self.config = config

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Configuration
    # =========================================================================

    def _create_client(self) -> Client:
        """Create an SDK client for this merchant account."""
        communicator_configuration = CommunicatorConfiguration(
            api_endpoint=self.config.api_endpoint,
            api_key_id=self.config.api_key,
            secret_api_key=self.config.api_secret,
            authorization_type=AuthorizationType.V1HMAC,
            connect_timeout=getattr(settings, "INGENICO_CONNECT_TIMEOUT_SECONDS", 5),
            socket_timeout=getattr(settings, "INGENICO_SOCKET_TIMEOUT_SECONDS", 30),
            max_connections=getattr(settings, "INGENICO_MAX_CONNECTIONS", 10),
            integrator=self.config.integrator,
        )
        # The constructor leaves these unset when no value is passed, and the
        # factory reads both
        communicator_configuration.proxy_configuration = None
        communicator_configuration.shopping_cart_extension = None
        return Factory.create_client_from_configuration(communicator_configuration)

    # =========================================================================
    # Core Operations
    # =========================================================================

    def create_hosted_checkout(
        self, params: CreateHostedCheckoutParams
    ) -> HostedCheckoutResult:
        """
        Create a hosted checkout.

        Args:
            params: Amount, currency, locale and return URL

        Returns:
            HostedCheckoutResult with RETURNMAC, hosted checkout id and
            the partial redirect URL

        Raises:
            UpstreamValidationError: The processor rejected the payload
            UpstreamError: Any other API or network failure
        """
        logger = self.get_logger()

        log_context = {
            "operation": "create_hosted_checkout",
            "merchant_id": self.config.merchant_id,
            "amount_minor": params.amount_minor,
            "currency": params.currency,
            "merchant_customer_id": params.merchant_customer_id,
        }

        start_time = time.time()
        logger.info("Starting processor operation", extra=log_context)

        try:
            request = self._build_create_request(params)
            with self._create_client() as client:
                response = (
                    client.merchant(self.config.merchant_id)
                    .hostedcheckouts()
                    .create(request)
                )

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Processor operation completed",
                extra={
                    **log_context,
                    "hosted_checkout_id": response.hosted_checkout_id,
                    "duration_ms": duration_ms,
                },
            )

            return HostedCheckoutResult(
                return_mac=response.returnmac,
                hosted_checkout_id=response.hosted_checkout_id,
                partial_redirect_url=response.partial_redirect_url,
            )

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_sdk_error(e, log_context, duration_ms)
            raise  # Never reached, but satisfies type checker

    def get_hosted_checkout(self, hosted_checkout_id: str) -> HostedCheckoutStatus:
        """
        Fetch the current status of a hosted checkout.

        Args:
            hosted_checkout_id: Processor id returned at creation

        Returns:
            HostedCheckoutStatus; payment fields are None while the
            shopper has not produced a payment

        Raises:
            UpstreamError: Any API or network failure
        """
        logger = self.get_logger()

        log_context = {
            "operation": "get_hosted_checkout",
            "merchant_id": self.config.merchant_id,
            "hosted_checkout_id": hosted_checkout_id,
        }

        start_time = time.time()
        logger.info("Starting processor operation", extra=log_context)

        try:
            with self._create_client() as client:
                response = (
                    client.merchant(self.config.merchant_id)
                    .hostedcheckouts()
                    .get(hosted_checkout_id)
                )

            result = self._parse_status(response)

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Processor operation completed",
                extra={
                    **log_context,
                    "status": result.status,
                    "payment_id": result.payment_id,
                    "status_category": result.status_category,
                    "duration_ms": duration_ms,
                },
            )

            return result

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_sdk_error(e, log_context, duration_ms)
            raise  # Never reached, but satisfies type checker

    # =========================================================================
    # Request / Response Mapping
    # =========================================================================

    @staticmethod
    def _build_create_request(
        params: CreateHostedCheckoutParams,
    ) -> CreateHostedCheckoutRequest:
        """Map params onto the SDK request object."""
        amount_of_money = AmountOfMoney()
        amount_of_money.amount = params.amount_minor
        amount_of_money.currency_code = params.currency

        billing_address = Address()
        billing_address.country_code = params.country_code

        customer = Customer()
        customer.billing_address = billing_address
        customer.merchant_customer_id = params.merchant_customer_id

        order = Order()
        order.amount_of_money = amount_of_money
        order.customer = customer

        specific_input = HostedCheckoutSpecificInput()
        specific_input.locale = params.locale
        specific_input.show_result_page = params.show_result_page
        specific_input.return_url = params.return_url

        request = CreateHostedCheckoutRequest()
        request.hosted_checkout_specific_input = specific_input
        request.order = order
        return request

    @staticmethod
    def _parse_status(response: Any) -> HostedCheckoutStatus:
        """Flatten a GetHostedCheckoutResponse into HostedCheckoutStatus."""
        created_payment_output = getattr(response, "created_payment_output", None)
        payment = getattr(created_payment_output, "payment", None)
        status_output = getattr(payment, "status_output", None)

        raw_response: dict[str, Any] = {}
        if hasattr(response, "to_dictionary"):
            raw_response = response.to_dictionary()

        return HostedCheckoutStatus(
            status=response.status,
            payment_id=getattr(payment, "id", None),
            payment_status=getattr(payment, "status", None),
            status_category=getattr(status_output, "status_category", None),
            is_authorized=bool(getattr(status_output, "is_authorized", False)),
            raw_response=raw_response,
        )

    # =========================================================================
    # Error Translation
    # =========================================================================

    @staticmethod
    def _processor_message(error: ApiException) -> str:
        """Join the processor's error messages, falling back to the exception text."""
        messages = [
            api_error.message
            for api_error in (getattr(error, "errors", None) or [])
            if getattr(api_error, "message", None)
        ]
        return "; ".join(messages) or str(error)

    @classmethod
    def _handle_sdk_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate SDK exceptions to domain exceptions.

        Args:
            error: The SDK exception
            log_context: Logging context dict
            duration_ms: Operation duration for logging

        Raises:
            UpstreamValidationError: Request rejected by the processor
            UpstreamError: Authorization, API, network or unknown failure
        """
        logger = cls.get_logger()

        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, ValidationException):
            message = cls._processor_message(error)
            logger.warning(
                "Processor rejected request",
                extra={**log_context, "error_id": error.error_id},
            )
            raise UpstreamValidationError(
                message,
                status_code=error.status_code,
            )

        elif isinstance(error, AuthorizationException):
            logger.critical(
                "Processor authorization failed - check API key and secret",
                extra={**log_context, "error_id": error.error_id},
            )
            raise UpstreamError(
                cls._processor_message(error),
                error_code="UPSTREAM_AUTHORIZATION_ERROR",
                status_code=error.status_code,
            )

        elif isinstance(error, ApiException):
            logger.error(
                "Processor API error",
                extra={
                    **log_context,
                    "error_id": error.error_id,
                    "status_code": error.status_code,
                },
            )
            raise UpstreamError(
                cls._processor_message(error),
                status_code=error.status_code,
            )

        elif isinstance(error, CommunicationException):
            logger.error(
                "Connection error to processor",
                extra=log_context,
                exc_info=True,
            )
            raise UpstreamError(
                "Could not connect to the payment processor.",
                error_code="UPSTREAM_UNAVAILABLE",
            )

        else:
            logger.error(
                f"Unexpected error from processor: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise UpstreamError(f"Unexpected processor error: {error}")
