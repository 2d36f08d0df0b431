"""
Payment-specific exceptions for hosted checkout operations.

Every error raised while starting a hosted checkout or validating the
shopper's return is terminal for the current request: nothing is retried
automatically and no Payment is created.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── ConfigurationError - Gateway credential missing
    ├── IntegrityError - Correlation token mismatch (possible tampering)
    ├── UpstreamError - Processor API or network failure (also ExternalServiceError)
    │   └── UpstreamValidationError - Processor rejected the request payload
    ├── NotCompletedError - Processor reports the payment is not completed
    └── NotAuthorizedError - Processor reports the payment is not authorized

Usage:
    from payments.exceptions import IntegrityError, PaymentError

    if params.return_mac != session.return_mac:
        raise IntegrityError(
            "RETURNMAC is invalid",
            details={"order_id": str(order.id)},
        )

    try:
        ReturnValidator.validate(order, gateway, params)
    except PaymentError as e:
        return Response(e.to_dict(), status=400)

Note:
    IntegrityError here is a checkout-domain error and is unrelated to
    django.db.IntegrityError. Import it from payments.exceptions explicitly.
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError, ExternalServiceError


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all payment operations.

    All payment-specific exceptions inherit from this class,
    which itself inherits from BaseApplicationError for
    consistent API error responses.
    """

    default_error_code: str = "PAYMENT_ERROR"


class ConfigurationError(PaymentError):
    """
    Raised when a gateway is missing a required credential.

    Raised before any processor call is attempted.

    Example:
        raise ConfigurationError(
            "API Key not provided.",
            details={"field": "api_key"},
        )
    """

    default_error_code: str = "CONFIGURATION_ERROR"


class IntegrityError(PaymentError):
    """
    Raised when a return request does not match the stored checkout session.

    The redirect back from the hosted page passes through the shopper's
    browser. A mismatched RETURNMAC or hosted checkout id is treated as
    potential tampering and must never be retried automatically.
    """

    default_error_code: str = "CHECKOUT_INTEGRITY_ERROR"


class UpstreamError(PaymentError, ExternalServiceError):
    """
    Raised when the processor API call fails.

    Wraps SDK API errors and communication failures. The processor's
    message is passed through in ``message``; the HTTP status reported by
    the processor (if any) is kept in ``status_code``.
    """

    default_error_code: str = "UPSTREAM_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, error_code=error_code, details=details)
        self.status_code = status_code


class UpstreamValidationError(UpstreamError):
    """
    Raised when the processor rejects a request payload.

    The processor's validation message is surfaced verbatim.
    """

    default_error_code: str = "UPSTREAM_VALIDATION_ERROR"


class NotCompletedError(PaymentError):
    """
    Raised when the processor reports that the payment has not completed.

    Covers both a hosted checkout that never created a payment and a
    payment whose status category is not COMPLETED.
    """

    default_error_code: str = "PAYMENT_NOT_COMPLETED"


class NotAuthorizedError(PaymentError):
    """
    Raised when a completed payment is reported as not authorized.
    """

    default_error_code: str = "PAYMENT_NOT_AUTHORIZED"
