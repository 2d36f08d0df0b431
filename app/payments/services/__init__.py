"""
Payment services for hosted checkout operations.

This module provides:
- CheckoutInitiator: Creates a hosted checkout and returns the redirect
- ReturnValidator: Validates the shopper's return and records the Payment
- CheckoutCallbacks: Notification and cancellation handlers

Usage:
    from payments.services import CheckoutInitiator, ReturnParams, ReturnValidator

    # Send the shopper to the hosted payment page
    target = CheckoutInitiator.initiate(order, gateway, return_url)

    # Validate the return redirect
    payment = ReturnValidator.validate(
        order,
        gateway,
        ReturnParams.from_query(request.query_params),
    )
"""

from payments.services.checkout_callbacks import CheckoutCallbacks
from payments.services.checkout_initiator import (
    CheckoutInitiator,
    RedirectTarget,
    build_redirect_url,
    get_request_locale,
)
from payments.services.return_validator import ReturnParams, ReturnValidator

__all__ = [
    "CheckoutCallbacks",
    "CheckoutInitiator",
    "RedirectTarget",
    "ReturnParams",
    "ReturnValidator",
    "build_redirect_url",
    "get_request_locale",
]
