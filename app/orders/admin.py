"""
Order admin configuration.
"""

from django.contrib import admin

from orders.models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for Order.

    The checkout session columns are shown read-only; they are written
    by the hosted checkout flow only.
    """

    list_display = [
        "number",
        "email",
        "total_amount",
        "currency",
        "state",
        "created_at",
    ]
    list_filter = ["state", "currency", "created_at"]
    search_fields = ["id", "number", "email", "checkout_hosted_checkout_id"]
    readonly_fields = [
        "id",
        "state",
        "checkout_return_mac",
        "checkout_hosted_checkout_id",
        "placed_at",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
