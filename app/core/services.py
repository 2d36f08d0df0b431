"""
Base service layer patterns for business logic encapsulation.

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.
    Expected failures are raised as domain exceptions (see core.exceptions)
    and translated to HTTP responses by the views.

Usage:
    from core.services import BaseService

    class ReturnValidator(BaseService):
        @classmethod
        def validate(cls, order, gateway, params):
            with cls.atomic():
                payment = Payment.objects.create(...)
                order.clear_checkout_session()

            cls.get_logger().info(f"Created payment {payment.id}")
            return payment
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services should be stateless
        - Raise domain exceptions for expected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.

        Example:
            with cls.atomic():
                payment = Payment.objects.create(...)
                order.clear_checkout_session()
                # If clearing fails, the payment is also rolled back
        """
        with transaction.atomic():
            yield
