"""
Checkout initiator service for starting hosted checkouts.

The initiator builds the hosted checkout request for an order, sends it
to the processor, stores the returned correlation tokens on the order,
and returns the URL of the processor's hosted payment page.

Usage:
    from payments.services import CheckoutInitiator

    target = CheckoutInitiator.initiate(
        order,
        gateway,
        return_url=request.build_absolute_uri(return_path),
    )
    return HttpResponseRedirect(target.url)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings
from django.utils import translation

from core.services import BaseService

from orders.models import CheckoutSession
from payments.adapters import (
    CreateHostedCheckoutParams,
    HostedCheckoutConfig,
    IngenicoAdapter,
    to_minor_units,
)
from payments.exceptions import UpstreamError

if TYPE_CHECKING:
    from orders.models import Order
    from payments.adapters import HostedCheckoutGateway
    from payments.models import PaymentGateway


@dataclass(frozen=True)
class RedirectTarget:
    """
    Where the host should send the shopper.

    Attributes:
        url: Absolute URL of the hosted payment page
        hosted_checkout_id: Processor id of the checkout just created
    """

    url: str
    hosted_checkout_id: str


def build_redirect_url(subdomain: str, partial_redirect_url: str) -> str:
    """Join the gateway subdomain and the processor's partial redirect URL."""
    return f"https://{subdomain}.{partial_redirect_url}"


def get_request_locale() -> str:
    """Locale of the active request language, e.g. "en-us" -> "en_US"."""
    return translation.to_locale(translation.get_language() or settings.LANGUAGE_CODE)


class CheckoutInitiator(BaseService):
    """
    Starts a hosted checkout for an order.

    Side effects: one processor call and one order update (the checkout
    session). No Payment is created here.
    """

    @classmethod
    def initiate(
        cls,
        order: Order,
        gateway: PaymentGateway,
        return_url: str,
        locale: str | None = None,
        processor: HostedCheckoutGateway | None = None,
    ) -> RedirectTarget:
        """
        Create a hosted checkout and return the redirect target.

        Steps:
            1. Validate the gateway credentials
            2. Build the request (amount in minor units, currency, locale,
               return URL, no processor result page)
            3. Call the processor
            4. Store RETURNMAC and hosted checkout id on the order,
               replacing any earlier session
            5. Build https://{subdomain}.{partialRedirectUrl}

        Args:
            order: Order to pay for
            gateway: Gateway whose merchant account is used
            return_url: Absolute URL the processor redirects back to
            locale: Hosted page locale (defaults to the active language)
            processor: Processor client (defaults to IngenicoAdapter)

        Returns:
            RedirectTarget for the host to redirect to

        Raises:
            ConfigurationError: A required credential is empty
            UpstreamValidationError: The processor rejected the request
            UpstreamError: Any other processor failure
        """
        config = HostedCheckoutConfig.from_gateway(gateway)
        processor = processor or IngenicoAdapter(config)

        params = CreateHostedCheckoutParams(
            amount_minor=to_minor_units(order.total_amount),
            currency=order.currency,
            locale=locale or get_request_locale(),
            return_url=return_url,
            merchant_customer_id=order.number,
            country_code=getattr(settings, "HOSTED_CHECKOUT_DEFAULT_COUNTRY_CODE", "US"),
        )

        cls.get_logger().info(
            "Initiating hosted checkout",
            extra={
                "order_id": str(order.id),
                "gateway": gateway.code,
                "amount_minor": params.amount_minor,
                "currency": params.currency,
                "locale": params.locale,
            },
        )

        result = processor.create_hosted_checkout(params)

        if not result.return_mac or not result.hosted_checkout_id:
            cls.get_logger().error(
                "Processor response missing correlation tokens",
                extra={"order_id": str(order.id), "gateway": gateway.code},
            )
            raise UpstreamError(
                "Processor response is missing RETURNMAC or hostedCheckoutId",
                error_code="UPSTREAM_INVALID_RESPONSE",
            )

        # Must be stored before the redirect; the return leg validates against it
        order.set_checkout_session(
            CheckoutSession(
                return_mac=result.return_mac,
                hosted_checkout_id=result.hosted_checkout_id,
            )
        )

        target = RedirectTarget(
            url=build_redirect_url(config.subdomain, result.partial_redirect_url),
            hosted_checkout_id=result.hosted_checkout_id,
        )

        cls.get_logger().info(
            "Hosted checkout created",
            extra={
                "order_id": str(order.id),
                "gateway": gateway.code,
                "hosted_checkout_id": result.hosted_checkout_id,
            },
        )

        return target
