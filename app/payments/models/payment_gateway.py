"""
PaymentGateway model holding hosted checkout credentials.

Each row is one configured merchant account on the processor. The
``code`` is the gateway id recorded on every Payment it creates.

Usage:
    from payments.models import PaymentGateway

    gateway = PaymentGateway.objects.create(
        code="ingenico_hosted",
        label="Ingenico (hosted checkout)",
        mode=GatewayMode.TEST,
        api_key="...",
        api_secret="...",
        integrator="Example Shop",
        merchant_id="1234",
    )
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel

from payments.state_machines import GatewayMode


class PaymentGateway(BaseModel):
    """
    Configured hosted checkout merchant account.

    Fields:
        code: Machine name and primary key (the gateway id)
        label: Display label
        mode: test (sandbox) or live (production)
        api_key / api_secret: Processor API key id and secret
        integrator: Integrator name sent with every request
        merchant_id: Processor merchant id
        subdomain: Hosted page subdomain (redirect is
            https://{subdomain}.{partialRedirectUrl})
        is_enabled: Disabled gateways cannot start or finish checkouts

    Note:
        Credentials are validated when a HostedCheckoutConfig is built
        from the gateway, not on save, so a half-configured gateway can
        exist in admin but cannot be used.
    """

    code = models.SlugField(
        max_length=64,
        primary_key=True,
        help_text="Machine name of the gateway (recorded on payments)",
    )

    label = models.CharField(
        max_length=255,
        help_text="Display label",
    )

    mode = models.CharField(
        max_length=10,
        choices=GatewayMode.choices,
        default=GatewayMode.TEST,
        help_text="Processor environment (test uses the sandbox)",
    )

    # ==========================================================================
    # Processor Credentials
    # ==========================================================================

    api_key = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="API key id",
    )

    api_secret = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Secret API key",
    )

    integrator = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Integrator name sent with API requests",
    )

    merchant_id = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Processor merchant id",
    )

    subdomain = models.CharField(
        max_length=63,
        blank=True,
        default="payment",
        help_text="Subdomain of the hosted payment pages",
    )

    is_enabled = models.BooleanField(
        default=True,
        help_text="Whether checkouts may use this gateway",
    )

    class Meta:
        ordering = ["code"]
        verbose_name = "Payment Gateway"
        verbose_name_plural = "Payment Gateways"

    def __str__(self) -> str:
        return f"{self.label} ({self.code}, {self.mode})"
