"""
Factory Boy factories for order test data.

Usage:
    from orders.tests.factories import OrderFactory

    order = OrderFactory()
    order = OrderFactory(total_amount=Decimal("19.99"), currency="USD")
"""

from decimal import Decimal

import factory

from orders.models import Order


class OrderFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating Order instances.

    Default creates a draft USD order without a checkout session.
    """

    class Meta:
        model = Order
        skip_postgeneration_save = True

    number = factory.Sequence(lambda n: f"{1000 + n}")
    email = factory.Sequence(lambda n: f"shopper{n}@example.com")
    total_amount = Decimal("19.99")
    currency = "USD"
