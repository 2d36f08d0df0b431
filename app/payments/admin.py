"""
Payment admin configuration.

Gateways are configured here: credentials, mode and the enabled flag.
Payments are read-only; they are only created by a validated return.
"""

from django.contrib import admin

from payments.models import Payment, PaymentGateway

__all__ = [
    "PaymentAdmin",
    "PaymentGatewayAdmin",
]


@admin.register(PaymentGateway)
class PaymentGatewayAdmin(admin.ModelAdmin):
    """
    Admin configuration for PaymentGateway.

    The API secret is never shown in list views.
    """

    list_display = [
        "code",
        "label",
        "mode",
        "merchant_id",
        "subdomain",
        "is_enabled",
        "updated_at",
    ]
    list_filter = ["mode", "is_enabled"]
    search_fields = ["code", "label", "merchant_id"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["code"]

    fieldsets = (
        (None, {"fields": ("code", "label", "is_enabled")}),
        (
            "Processor",
            {"fields": ("mode", "merchant_id", "subdomain", "integrator")},
        ),
        ("Credentials", {"fields": ("api_key", "api_secret")}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin configuration for Payment.

    Read-only audit view of payments recorded by hosted checkout returns.
    """

    list_display = [
        "id",
        "order",
        "gateway",
        "state",
        "amount",
        "currency",
        "remote_id",
        "remote_state",
        "completed_at",
    ]
    list_filter = ["state", "gateway", "currency"]
    search_fields = ["id", "remote_id", "order__number"]
    readonly_fields = [
        "id",
        "order",
        "gateway",
        "state",
        "amount",
        "currency",
        "remote_id",
        "remote_state",
        "completed_at",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    def has_add_permission(self, request):
        return False
