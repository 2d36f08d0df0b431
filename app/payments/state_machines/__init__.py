"""
State and mode enums for payment models.
"""

from payments.state_machines.states import GatewayMode, PaymentState

__all__ = [
    "GatewayMode",
    "PaymentState",
]
