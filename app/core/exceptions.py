"""
Base exception classes for application-wide error handling.

Every domain error carries a human message, a machine-readable code and
optional details, and renders itself for API responses with to_dict().

Exception Hierarchy:
    BaseApplicationError (base)
    └── ExternalServiceError - Third-party service failures

Usage:
    from core.exceptions import BaseApplicationError, ExternalServiceError

    raise ExternalServiceError(
        "Payment processor unavailable",
        error_code="PROCESSOR_DOWN",
        details={"service": "ingenico"},
    )

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    DRF still handles API-layer errors (parsing, authentication, 404).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field names, processor status, etc.)

    Example:
        try:
            payment = ReturnValidator.validate(order, gateway, params)
        except BaseApplicationError as e:
            logger.warning(f"Checkout return rejected: {e.error_code}")
            return Response(e.to_dict(), status=400)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Render the error for an API response.

        Example:
            {
                "error": "RETURNMAC is invalid",
                "error_code": "CHECKOUT_INTEGRITY_ERROR",
                "details": {"order_id": "..."}
            }

        ``details`` is omitted when empty.
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ExternalServiceError(BaseApplicationError):
    """
    Raised when a call to a third-party service fails.

    Covers API errors, network failures and malformed responses. Views
    usually answer these with 502 Bad Gateway.

    Example:
        try:
            client.merchant(merchant_id).hostedcheckouts().get(checkout_id)
        except CommunicationException as e:
            raise ExternalServiceError(
                "Payment service unavailable",
                error_code="PROCESSOR_UNAVAILABLE",
                details={"service": "ingenico"},
            ) from e
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
