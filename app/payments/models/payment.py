"""
Payment model recording a validated hosted checkout.

A Payment is created only by ReturnValidator, after every check against
the processor has passed. After that its lifecycle belongs to the host.

Usage:
    from payments.models import Payment

    order.payments.filter(state=PaymentState.COMPLETED)
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin

from payments.state_machines import PaymentState


class Payment(UUIDPrimaryKeyMixin, BaseModel):
    """
    Completed payment against an order.

    Fields:
        order: Order the payment was taken for
        gateway: PaymentGateway that processed it
        state: Always COMPLETED when created by the return flow
        amount / currency: Order balance at validation time
        remote_id: Processor payment id
        remote_state: Processor payment status (e.g., CAPTURED)
        completed_at: When the return was validated
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="payments",
        help_text="Order this payment was taken for",
    )

    gateway = models.ForeignKey(
        "payments.PaymentGateway",
        on_delete=models.PROTECT,
        related_name="payments",
        help_text="Gateway that processed this payment",
    )

    state = models.CharField(
        max_length=20,
        choices=PaymentState.choices,
        default=PaymentState.COMPLETED,
        db_index=True,
        help_text="Payment state",
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Amount paid in major currency units",
    )

    currency = models.CharField(
        max_length=3,
        help_text="ISO 4217 currency code (upper-case)",
    )

    remote_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Processor payment id",
    )

    remote_state = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Processor payment status at validation time",
    )

    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the payment was validated",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(fields=["order", "state"], name="payment_order_state_idx"),
        ]

    def __str__(self) -> str:
        return f"Payment({self.id}, {self.state}, {self.amount} {self.currency})"
