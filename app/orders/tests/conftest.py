"""
Pytest fixtures for order tests.
"""

import pytest

from orders.tests.factories import OrderFactory


@pytest.fixture
def order(db):
    """Create a draft order."""
    return OrderFactory()
