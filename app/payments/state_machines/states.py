"""
State and mode enums for payment models.

These are Django TextChoices for database storage and admin integration.

Payment States:
    completed (created only after a hosted checkout return is fully validated)

Gateway Modes:
    test -> processor sandbox
    live -> processor production
"""

from django.db import models


class PaymentState(models.TextChoices):
    """
    States for the Payment model.

    A hosted checkout return either validates completely or creates
    nothing, so payments are only ever recorded as COMPLETED.
    """

    COMPLETED = "completed", "Completed"


class GatewayMode(models.TextChoices):
    """
    Processor environment a PaymentGateway talks to.

    TEST selects the sandbox endpoint; any other value selects production.
    """

    TEST = "test", "Test"
    LIVE = "live", "Live"
