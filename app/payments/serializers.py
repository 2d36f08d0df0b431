"""
DRF serializers for payments app.

This module provides serializers for:
- Payment display
- Hosted checkout return responses

Related files:
    - models/: Payment
    - views.py: Hosted checkout views

Usage:
    serializer = PaymentSerializer(payment)
    data = serializer.data
"""

from __future__ import annotations

from rest_framework import serializers

from payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    """
    Payment serializer for API responses.

    Fields:
        id: Payment ID
        order: Order ID
        gateway: Gateway code
        state: Payment state (always completed)
        amount: Amount in major units, as a string
        currency: ISO 4217 code
        remote_id: Processor payment id
        remote_state: Processor payment status
        completed_at: When the return was validated
    """

    class Meta:
        model = Payment
        fields = [
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
        read_only_fields = fields


class CheckoutReturnSerializer(serializers.Serializer):
    """Response body of a validated hosted checkout return."""

    payment = PaymentSerializer(read_only=True)
    order_state = serializers.CharField(source="order.state", read_only=True)
    order_balance = serializers.DecimalField(
        source="order.balance",
        max_digits=12,
        decimal_places=2,
        read_only=True,
    )
