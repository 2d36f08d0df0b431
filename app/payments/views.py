"""
API views for hosted checkout.

This module provides API views for:
- Redirecting the shopper to the hosted payment page
- Validating the shopper's return from the hosted payment page
- Shopper cancellation
- Processor notifications

Related files:
    - services/: CheckoutInitiator, ReturnValidator, CheckoutCallbacks
    - serializers.py: Payment response serializer
    - urls.py: URL routing

Endpoints:
    GET /api/v1/payments/orders/{order_id}/checkout/{gateway_code}/ - Start checkout
    GET /api/v1/payments/orders/{order_id}/checkout/{gateway_code}/return/ - Validate return
    GET /api/v1/payments/orders/{order_id}/checkout/{gateway_code}/cancel/ - Shopper canceled
    POST /api/v1/payments/notify/{gateway_code}/ - Processor notification

Security:
    - The shopper is anonymous; the order id in the URL is the capability
    - Return parameters are checked against the stored session and the
      payment status is always re-read from the processor
    - Notify is CSRF exempt and does not change any state
"""

from __future__ import annotations

import json
import logging

from django.http import HttpRequest, HttpResponse, HttpResponseRedirect
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import Order, OrderState
from payments.exceptions import (
    ConfigurationError,
    IntegrityError,
    NotAuthorizedError,
    NotCompletedError,
    PaymentError,
    UpstreamError,
)
from payments.models import PaymentGateway
from payments.serializers import CheckoutReturnSerializer
from payments.services import (
    CheckoutCallbacks,
    CheckoutInitiator,
    ReturnParams,
    ReturnValidator,
)

logger = logging.getLogger(__name__)


# Checked in order; the first matching class wins
ERROR_STATUS_CODES: tuple[tuple[type[PaymentError], int], ...] = (
    (IntegrityError, status.HTTP_400_BAD_REQUEST),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (UpstreamError, status.HTTP_502_BAD_GATEWAY),
    (NotCompletedError, status.HTTP_402_PAYMENT_REQUIRED),
    (NotAuthorizedError, status.HTTP_402_PAYMENT_REQUIRED),
)


def get_error_status(error: PaymentError) -> int:
    """Map a payment error to its HTTP status code."""
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def payment_error_response(error: PaymentError) -> Response:
    """Build the JSON error response for a payment error."""
    return Response(error.to_dict(), status=get_error_status(error))


def get_order_and_gateway(order_id, gateway_code: str) -> tuple[Order, PaymentGateway]:
    """Look up the order and an enabled gateway, raising Http404 if absent."""
    order = get_object_or_404(Order, pk=order_id)
    gateway = get_object_or_404(PaymentGateway, code=gateway_code, is_enabled=True)
    return order, gateway


CHECKOUT_PATH_PARAMETERS = [
    OpenApiParameter("order_id", OpenApiTypes.UUID, OpenApiParameter.PATH),
    OpenApiParameter("gateway_code", OpenApiTypes.STR, OpenApiParameter.PATH),
]


class CheckoutRedirectView(APIView):
    """
    Start a hosted checkout for an order.

    GET /api/v1/payments/orders/{order_id}/checkout/{gateway_code}/

    Response:
        302 Found: Redirect to the hosted payment page
        404 Not Found: Unknown order or gateway, or gateway disabled
        500 Internal Server Error: Gateway credentials incomplete
        502 Bad Gateway: Processor rejected or failed the request
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="start_hosted_checkout",
        summary="Start hosted checkout",
        description=(
            "Create a hosted checkout for the order and redirect the shopper "
            "to the processor's payment page. Starting again replaces the "
            "stored checkout session."
        ),
        parameters=CHECKOUT_PATH_PARAMETERS,
        responses={
            302: OpenApiResponse(description="Redirect to hosted payment page"),
            404: OpenApiResponse(description="Order or gateway not found"),
            500: OpenApiResponse(description="Gateway configuration incomplete"),
            502: OpenApiResponse(description="Processor error"),
        },
        tags=["Payments - Hosted Checkout"],
    )
    def get(self, request, order_id, gateway_code):
        """Create the hosted checkout and redirect."""
        order, gateway = get_order_and_gateway(order_id, gateway_code)

        if order.state != OrderState.DRAFT:
            return Response(
                {"error": "Order is not awaiting payment"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return_url = request.build_absolute_uri(
            reverse(
                "payments:checkout_return",
                kwargs={"order_id": order.id, "gateway_code": gateway.code},
            )
        )

        try:
            target = CheckoutInitiator.initiate(order, gateway, return_url=return_url)
        except PaymentError as e:
            logger.warning(
                "Hosted checkout could not be started",
                extra={"order_id": str(order.id), "error_code": e.error_code},
            )
            return payment_error_response(e)

        return HttpResponseRedirect(target.url)


class CheckoutReturnView(APIView):
    """
    Validate the shopper's return from the hosted payment page.

    GET /api/v1/payments/orders/{order_id}/checkout/{gateway_code}/return/
        ?RETURNMAC=...&hostedCheckoutId=...

    Response:
        200 OK: Payment recorded (order placed when fully paid)
        400 Bad Request: Return does not match the stored session
        402 Payment Required: Payment not completed or not authorized
        404 Not Found: Unknown order or gateway, or gateway disabled
        500 Internal Server Error: Gateway credentials incomplete
        502 Bad Gateway: Processor status lookup failed
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="validate_hosted_checkout_return",
        summary="Validate hosted checkout return",
        description=(
            "Check RETURNMAC and hostedCheckoutId against the stored session, "
            "re-read the payment status from the processor and record a "
            "completed payment. The order is placed when its balance reaches zero."
        ),
        parameters=[
            *CHECKOUT_PATH_PARAMETERS,
            OpenApiParameter("RETURNMAC", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("hostedCheckoutId", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={
            200: OpenApiResponse(
                response=CheckoutReturnSerializer,
                description="Payment recorded",
            ),
            400: OpenApiResponse(description="Checkout integrity check failed"),
            402: OpenApiResponse(description="Payment not completed or not authorized"),
            404: OpenApiResponse(description="Order or gateway not found"),
            500: OpenApiResponse(description="Gateway configuration incomplete"),
            502: OpenApiResponse(description="Processor error"),
        },
        tags=["Payments - Hosted Checkout"],
    )
    def get(self, request, order_id, gateway_code):
        """Validate the return and record the payment."""
        order, gateway = get_order_and_gateway(order_id, gateway_code)

        try:
            payment = ReturnValidator.validate(
                order,
                gateway,
                ReturnParams.from_query(request.query_params),
            )
        except PaymentError as e:
            return payment_error_response(e)

        if order.state == OrderState.DRAFT and order.balance <= 0:
            order.place()
            order.save()
            logger.info(
                "Order placed after hosted checkout",
                extra={"order_id": str(order.id), "payment_id": str(payment.id)},
            )

        serializer = CheckoutReturnSerializer({"payment": payment, "order": order})
        return Response(serializer.data)


class CheckoutCancelView(APIView):
    """
    Shopper canceled on the hosted payment page.

    GET /api/v1/payments/orders/{order_id}/checkout/{gateway_code}/cancel/

    Response:
        200 OK: Cancellation acknowledged
        404 Not Found: Unknown order or gateway, or gateway disabled
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="cancel_hosted_checkout",
        summary="Cancel hosted checkout",
        description="Acknowledge that the shopper left the hosted payment page.",
        parameters=CHECKOUT_PATH_PARAMETERS,
        responses={
            200: OpenApiResponse(description="Cancellation acknowledged"),
            404: OpenApiResponse(description="Order or gateway not found"),
        },
        tags=["Payments - Hosted Checkout"],
    )
    def get(self, request, order_id, gateway_code):
        """Acknowledge the cancellation."""
        order, gateway = get_order_and_gateway(order_id, gateway_code)
        CheckoutCallbacks.on_cancel(order, gateway)
        return Response({"detail": "Checkout canceled"})


@csrf_exempt
@require_POST
def checkout_notify(request: HttpRequest, gateway_code: str) -> HttpResponse:
    """
    Receive a server-to-server notification from the processor.

    The body is decoded as JSON when possible and passed to
    CheckoutCallbacks.on_notify. Payment state is never changed here.

    Returns:
        HttpResponse with status:
        - 200: Notification accepted
        - 404: Unknown or disabled gateway
    """
    gateway = get_object_or_404(PaymentGateway, code=gateway_code, is_enabled=True)

    try:
        payload = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        logger.warning(
            "Processor notification body is not JSON",
            extra={"gateway": gateway.code},
        )
        payload = request.body

    CheckoutCallbacks.on_notify(gateway, payload)

    return HttpResponse("Accepted", status=200)
