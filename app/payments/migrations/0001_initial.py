"""
Create the PaymentGateway and Payment tables.
"""

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentGateway",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "code",
                    models.SlugField(
                        help_text="Machine name of the gateway (recorded on payments)",
                        max_length=64,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "label",
                    models.CharField(help_text="Display label", max_length=255),
                ),
                (
                    "mode",
                    models.CharField(
                        choices=[("test", "Test"), ("live", "Live")],
                        default="test",
                        help_text="Processor environment (test uses the sandbox)",
                        max_length=10,
                    ),
                ),
                (
                    "api_key",
                    models.CharField(
                        blank=True, default="", help_text="API key id", max_length=255
                    ),
                ),
                (
                    "api_secret",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Secret API key",
                        max_length=255,
                    ),
                ),
                (
                    "integrator",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Integrator name sent with API requests",
                        max_length=255,
                    ),
                ),
                (
                    "merchant_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Processor merchant id",
                        max_length=64,
                    ),
                ),
                (
                    "subdomain",
                    models.CharField(
                        blank=True,
                        default="payment",
                        help_text="Subdomain of the hosted payment pages",
                        max_length=63,
                    ),
                ),
                (
                    "is_enabled",
                    models.BooleanField(
                        default=True,
                        help_text="Whether checkouts may use this gateway",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment Gateway",
                "verbose_name_plural": "Payment Gateways",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "state",
                    models.CharField(
                        choices=[("completed", "Completed")],
                        db_index=True,
                        default="completed",
                        help_text="Payment state",
                        max_length=20,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount paid in major currency units",
                        max_digits=12,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        help_text="ISO 4217 currency code (upper-case)",
                        max_length=3,
                    ),
                ),
                (
                    "remote_id",
                    models.CharField(
                        db_index=True,
                        help_text="Processor payment id",
                        max_length=255,
                    ),
                ),
                (
                    "remote_state",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Processor payment status at validation time",
                        max_length=64,
                    ),
                ),
                (
                    "completed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the payment was validated",
                        null=True,
                    ),
                ),
                (
                    "gateway",
                    models.ForeignKey(
                        help_text="Gateway that processed this payment",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="payments.paymentgateway",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        help_text="Order this payment was taken for",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["order", "state"], name="payment_order_state_idx"
                    )
                ],
            },
        ),
    ]
