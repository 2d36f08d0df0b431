"""
Return validator service for hosted checkout returns.

When the processor redirects the shopper back, the query string carries
RETURNMAC and hostedCheckoutId. Those values come from the browser, so
they are only used to match the request to the session this server
created; the payment status itself is fetched from the processor.

Validation Chain (first failure aborts):
    1. RETURNMAC matches the stored session          -> IntegrityError
    2. hostedCheckoutId matches the stored session   -> IntegrityError
    3. Gateway credentials are complete              -> ConfigurationError
    4. Processor status lookup succeeds              -> UpstreamError
    5. Hosted checkout status is PAYMENT_CREATED     -> NotCompletedError
    6. Payment status category is COMPLETED          -> NotCompletedError
    7. Payment is authorized                         -> NotAuthorizedError

Only when every step passes is a completed Payment created. The session
is re-read under a row lock and cleared in the same transaction, so two
concurrent returns with the same tokens record a single payment.

Usage:
    from payments.services import ReturnParams, ReturnValidator

    payment = ReturnValidator.validate(
        order,
        gateway,
        ReturnParams.from_query(request.query_params),
    )
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.utils import timezone

from core.services import BaseService

from orders.models import Order
from payments.adapters import HostedCheckoutConfig, IngenicoAdapter
from payments.exceptions import (
    IntegrityError,
    NotAuthorizedError,
    NotCompletedError,
    UpstreamError,
)
from payments.models import Payment
from payments.state_machines import PaymentState

if TYPE_CHECKING:
    from collections.abc import Mapping

    from payments.adapters import HostedCheckoutGateway
    from payments.models import PaymentGateway


@dataclass(frozen=True)
class ReturnParams:
    """
    Correlation tokens read from the return redirect.

    Attributes:
        return_mac: RETURNMAC query parameter
        hosted_checkout_id: hostedCheckoutId query parameter
    """

    return_mac: str | None
    hosted_checkout_id: str | None

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> ReturnParams:
        return cls(
            return_mac=query.get("RETURNMAC"),
            hosted_checkout_id=query.get("hostedCheckoutId"),
        )


def tokens_match(expected: str | None, received: str | None) -> bool:
    """Constant-time comparison of a stored token with a returned one."""
    if expected is None or received is None:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))


class ReturnValidator(BaseService):
    """
    Validates a hosted checkout return and records the payment.

    No step is skipped and nothing is retried. A missing session (no
    checkout started, or already consumed) fails the RETURNMAC check.
    """

    @classmethod
    def validate(
        cls,
        order: Order,
        gateway: PaymentGateway,
        params: ReturnParams,
        processor: HostedCheckoutGateway | None = None,
    ) -> Payment:
        """
        Run the validation chain and create the Payment.

        Args:
            order: Order the shopper returned for
            gateway: Gateway the checkout was started with
            params: RETURNMAC and hostedCheckoutId from the redirect
            processor: Processor client (defaults to IngenicoAdapter)

        Returns:
            The created Payment (state=completed, amount=order balance)

        Raises:
            IntegrityError: Token mismatch or no stored session
            ConfigurationError: A required credential is empty
            UpstreamError: The processor lookup failed
            NotCompletedError: The payment is not completed
            NotAuthorizedError: The payment is not authorized
        """
        logger = cls.get_logger()
        log_context = {"order_id": str(order.id), "gateway": gateway.code}

        session = order.get_checkout_session()

        if session is None or not tokens_match(session.return_mac, params.return_mac):
            logger.warning("Checkout return rejected: RETURNMAC mismatch", extra=log_context)
            raise IntegrityError("RETURNMAC is invalid", details={"order_id": str(order.id)})

        if not tokens_match(session.hosted_checkout_id, params.hosted_checkout_id):
            logger.warning(
                "Checkout return rejected: hosted checkout id mismatch", extra=log_context
            )
            raise IntegrityError(
                "hosted checkout id is invalid", details={"order_id": str(order.id)}
            )

        config = HostedCheckoutConfig.from_gateway(gateway)
        processor = processor or IngenicoAdapter(config)

        log_context["hosted_checkout_id"] = session.hosted_checkout_id

        try:
            status = processor.get_hosted_checkout(session.hosted_checkout_id)
        except UpstreamError:
            raise
        except Exception as e:
            logger.error(
                f"Processor lookup failed: {type(e).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise UpstreamError(str(e)) from e

        if not status.payment_created:
            logger.info(
                "Checkout return rejected: no payment created",
                extra={**log_context, "status": status.status},
            )
            raise NotCompletedError(
                "payment has not completed on the hosted pages",
                details={"status": status.status},
            )

        if not status.is_completed:
            logger.info(
                "Checkout return rejected: payment not completed",
                extra={**log_context, "status_category": status.status_category},
            )
            raise NotCompletedError(
                "payment has not been completed",
                details={"status_category": status.status_category},
            )

        if not status.is_authorized:
            logger.warning(
                "Checkout return rejected: payment not authorized",
                extra={**log_context, "payment_id": status.payment_id},
            )
            raise NotAuthorizedError(
                "payment has not been authorized",
                details={"payment_id": status.payment_id},
            )

        with cls.atomic():
            # Re-read the session under a row lock; a concurrent return with
            # the same tokens may have consumed it during the processor lookup
            locked = Order.objects.select_for_update().get(pk=order.pk)
            if locked.get_checkout_session() != session:
                logger.warning(
                    "Checkout return rejected: session consumed concurrently",
                    extra=log_context,
                )
                raise IntegrityError(
                    "RETURNMAC is invalid", details={"order_id": str(order.id)}
                )

            payment = Payment.objects.create(
                order=order,
                gateway=gateway,
                state=PaymentState.COMPLETED,
                amount=locked.balance,
                currency=order.currency,
                remote_id=status.payment_id,
                remote_state=status.payment_status or "",
                completed_at=timezone.now(),
            )
            order.clear_checkout_session()

        logger.info(
            "Checkout return validated, payment recorded",
            extra={
                **log_context,
                "payment_id": str(payment.id),
                "remote_id": payment.remote_id,
                "remote_state": payment.remote_state,
            },
        )

        return payment
