"""
URL configuration for the payments app.

Routes:
    - GET orders/<order_id>/checkout/<gateway_code>/ - Start hosted checkout
    - GET orders/<order_id>/checkout/<gateway_code>/return/ - Validate return
    - GET orders/<order_id>/checkout/<gateway_code>/cancel/ - Shopper canceled
    - POST notify/<gateway_code>/ - Processor notification

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.

Usage:
    # In config/urls.py
    api_v1_patterns = [
        path("payments/", include("payments.urls")),
    ]
"""

from django.urls import path

from payments.views import (
    CheckoutCancelView,
    CheckoutRedirectView,
    CheckoutReturnView,
    checkout_notify,
)

app_name = "payments"

urlpatterns = [
    # Hosted checkout
    path(
        "orders/<uuid:order_id>/checkout/<slug:gateway_code>/",
        CheckoutRedirectView.as_view(),
        name="checkout_redirect",
    ),
    path(
        "orders/<uuid:order_id>/checkout/<slug:gateway_code>/return/",
        CheckoutReturnView.as_view(),
        name="checkout_return",
    ),
    path(
        "orders/<uuid:order_id>/checkout/<slug:gateway_code>/cancel/",
        CheckoutCancelView.as_view(),
        name="checkout_cancel",
    ),
    # Processor notifications
    path("notify/<slug:gateway_code>/", checkout_notify, name="checkout_notify"),
]
