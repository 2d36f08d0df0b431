"""
Payment adapters for external services.

This module provides the adapter for the hosted checkout processor.
All processor API calls go through it to get consistent error handling,
timeouts and observability.

Usage:
    from payments.adapters import HostedCheckoutConfig, IngenicoAdapter

    adapter = IngenicoAdapter(HostedCheckoutConfig.from_gateway(gateway))
    status = adapter.get_hosted_checkout("hc_123")
"""

from payments.adapters.ingenico_adapter import (
    PAYMENT_CREATED,
    PRODUCTION_API_ENDPOINT,
    SANDBOX_API_ENDPOINT,
    STATUS_CATEGORY_COMPLETED,
    CreateHostedCheckoutParams,
    HostedCheckoutConfig,
    HostedCheckoutGateway,
    HostedCheckoutResult,
    HostedCheckoutStatus,
    IngenicoAdapter,
    get_api_endpoint,
    to_minor_units,
)

__all__ = [
    "PAYMENT_CREATED",
    "PRODUCTION_API_ENDPOINT",
    "SANDBOX_API_ENDPOINT",
    "STATUS_CATEGORY_COMPLETED",
    "CreateHostedCheckoutParams",
    "HostedCheckoutConfig",
    "HostedCheckoutGateway",
    "HostedCheckoutResult",
    "HostedCheckoutStatus",
    "IngenicoAdapter",
    "get_api_endpoint",
    "to_minor_units",
]
