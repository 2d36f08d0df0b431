"""
Processor callbacks outside the return flow.

The processor can notify the merchant server-to-server, and the shopper
can abandon the hosted pages through the cancel URL. Neither changes any
payment state: only a validated return records a Payment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.services import BaseService

if TYPE_CHECKING:
    from typing import Any

    from orders.models import Order
    from payments.models import PaymentGateway


class CheckoutCallbacks(BaseService):
    """Handlers for processor notifications and shopper cancellations."""

    @classmethod
    def on_notify(cls, gateway: PaymentGateway, payload: Any) -> None:
        """
        Acknowledge a server-to-server notification.

        Notifications are logged and otherwise ignored.
        """
        cls.get_logger().info(
            "Processor notification received",
            extra={
                "gateway": gateway.code,
                "payload_type": type(payload).__name__,
            },
        )

    @classmethod
    def on_cancel(cls, order: Order, gateway: PaymentGateway) -> None:
        """
        Record that the shopper left the hosted pages without paying.

        The checkout session is left in place so the shopper can retry
        the same hosted checkout until a new one replaces it.
        """
        cls.get_logger().info(
            "Hosted checkout canceled by shopper",
            extra={
                "order_id": str(order.id),
                "gateway": gateway.code,
                "hosted_checkout_id": order.checkout_hosted_checkout_id,
            },
        )
