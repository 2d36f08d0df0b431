"""
Payment domain models.

This module contains all payment-related models:
- PaymentGateway: Hosted checkout merchant account and credentials
- Payment: Completed payment recorded after a validated checkout return
"""

from payments.models.payment import Payment
from payments.models.payment_gateway import PaymentGateway

__all__ = [
    "Payment",
    "PaymentGateway",
]
