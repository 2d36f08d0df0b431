"""
Order model and checkout session storage.

Order is the host entity a hosted checkout is run against. The payments
app only reads it (total, currency, balance) and attaches or clears the
CheckoutSession correlation tokens.

Usage:
    from orders.models import CheckoutSession, Order, OrderState

    order = Order.objects.create(
        number="1001",
        total_amount=Decimal("19.99"),
        currency="USD",
    )

    order.set_checkout_session(
        CheckoutSession(return_mac="MAC1", hosted_checkout_id="HC1")
    )
    order.get_checkout_session()  # CheckoutSession(...)
    order.clear_checkout_session()
    order.get_checkout_session()  # None

    # State transitions using django-fsm
    order.place()  # draft -> completed
    order.save()
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.db import models
from django.db.models import Sum
from django.utils import timezone
from django_fsm import FSMField, transition

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin


class OrderState(models.TextChoices):
    """
    States for the Order lifecycle.

    State Flow:
        DRAFT -> COMPLETED (fully paid after a hosted checkout return)
        DRAFT -> CANCELED
    """

    DRAFT = "draft", "Draft"
    COMPLETED = "completed", "Completed"
    CANCELED = "canceled", "Canceled"


@dataclass(frozen=True)
class CheckoutSession:
    """
    Correlation tokens returned by the processor when a hosted checkout
    is created.

    Attributes:
        return_mac: Tamper-evidence token echoed back as RETURNMAC
        hosted_checkout_id: Opaque id used to re-query the processor
    """

    return_mac: str
    hosted_checkout_id: str


class Order(UUIDPrimaryKeyMixin, BaseModel):
    """
    A shopper's order awaiting payment.

    Fields:
        number: Human-readable order number (sent as merchant customer id)
        email: Shopper email
        total_amount: Order total in major currency units
        currency: ISO 4217 currency code (upper-case)
        state: Current FSM state
        checkout_return_mac / checkout_hosted_checkout_id: Stored
            CheckoutSession, both null when no checkout is in flight
        placed_at: When the order was completed

    Note:
        Use get_checkout_session() / set_checkout_session() rather than
        touching the checkout_* columns directly.
    """

    number = models.CharField(
        max_length=32,
        unique=True,
        help_text="Human-readable order number",
    )

    email = models.EmailField(
        blank=True,
        default="",
        help_text="Shopper email address",
    )

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Order total in major currency units (e.g., 19.99)",
    )

    currency = models.CharField(
        max_length=3,
        default="USD",
        help_text="ISO 4217 currency code (upper-case)",
    )

    state = FSMField(
        default=OrderState.DRAFT,
        choices=OrderState.choices,
        db_index=True,
        protected=True,  # Prevent direct assignment outside transitions
        help_text="Current state of the order (managed by FSM)",
    )

    # ==========================================================================
    # Checkout Session
    # ==========================================================================

    checkout_return_mac = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="RETURNMAC of the current hosted checkout",
    )

    checkout_hosted_checkout_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        db_index=True,
        help_text="Processor id of the current hosted checkout",
    )

    placed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the order was completed",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="order_total_amount_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Order({self.number}, {self.state}, {self.total_amount} {self.currency})"

    # ==========================================================================
    # Balance
    # ==========================================================================

    @property
    def paid_amount(self) -> Decimal:
        """Sum of completed payments recorded against this order."""
        from payments.state_machines import PaymentState

        total = self.payments.filter(state=PaymentState.COMPLETED).aggregate(
            total=Sum("amount")
        )["total"]
        return total or Decimal("0")

    @property
    def balance(self) -> Decimal:
        """Amount still owed on this order."""
        return self.total_amount - self.paid_amount

    # ==========================================================================
    # Checkout Session Accessors
    # ==========================================================================

    def get_checkout_session(self) -> CheckoutSession | None:
        """
        Return the stored checkout session.

        Returns:
            CheckoutSession, or None when no checkout has been started
            (or the last one was consumed by a successful return).
        """
        if not self.checkout_return_mac or not self.checkout_hosted_checkout_id:
            return None
        return CheckoutSession(
            return_mac=self.checkout_return_mac,
            hosted_checkout_id=self.checkout_hosted_checkout_id,
        )

    def set_checkout_session(self, session: CheckoutSession) -> None:
        """Store a checkout session, replacing any previous one, and save."""
        self.checkout_return_mac = session.return_mac
        self.checkout_hosted_checkout_id = session.hosted_checkout_id
        self.save(
            update_fields=[
                "checkout_return_mac",
                "checkout_hosted_checkout_id",
                "updated_at",
            ]
        )

    def clear_checkout_session(self) -> None:
        """Discard the stored checkout session and save."""
        self.checkout_return_mac = None
        self.checkout_hosted_checkout_id = None
        self.save(
            update_fields=[
                "checkout_return_mac",
                "checkout_hosted_checkout_id",
                "updated_at",
            ]
        )

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=state,
        source=OrderState.DRAFT,
        target=OrderState.COMPLETED,
    )
    def place(self):
        """
        Complete the order once it is fully paid.

        Transition: DRAFT -> COMPLETED
        """
        self.placed_at = timezone.now()

    @transition(
        field=state,
        source=OrderState.DRAFT,
        target=OrderState.CANCELED,
    )
    def cancel(self):
        """
        Cancel the order.

        Transition: DRAFT -> CANCELED
        """
        pass
