"""
Create the Order table with checkout session columns.
"""

import uuid

import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
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
                    "number",
                    models.CharField(
                        help_text="Human-readable order number",
                        max_length=32,
                        unique=True,
                    ),
                ),
                (
                    "email",
                    models.EmailField(
                        blank=True,
                        default="",
                        help_text="Shopper email address",
                        max_length=254,
                    ),
                ),
                (
                    "total_amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Order total in major currency units (e.g., 19.99)",
                        max_digits=12,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        default="USD",
                        help_text="ISO 4217 currency code (upper-case)",
                        max_length=3,
                    ),
                ),
                (
                    "state",
                    django_fsm.FSMField(
                        choices=[
                            ("draft", "Draft"),
                            ("completed", "Completed"),
                            ("canceled", "Canceled"),
                        ],
                        db_index=True,
                        default="draft",
                        help_text="Current state of the order (managed by FSM)",
                        max_length=50,
                        protected=True,
                    ),
                ),
                (
                    "checkout_return_mac",
                    models.CharField(
                        blank=True,
                        help_text="RETURNMAC of the current hosted checkout",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "checkout_hosted_checkout_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Processor id of the current hosted checkout",
                        max_length=255,
                        null=True,
                    ),
                ),
                (
                    "placed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the order was completed",
                        null=True,
                    ),
                ),
            ],
            options={
                "verbose_name": "Order",
                "verbose_name_plural": "Orders",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("total_amount__gte", 0)),
                        name="order_total_amount_non_negative",
                    )
                ],
            },
        ),
    ]
