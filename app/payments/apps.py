"""
Payments app configuration.

This app provides hosted checkout payment processing:
- Ingenico Connect adapter
- Checkout initiation and return validation services
- Redirect, return, cancel and notify endpoints
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
