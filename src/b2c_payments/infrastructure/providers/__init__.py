"""Mobile-money provider adapters."""

from b2c_payments.infrastructure.providers.mock_provider import MockMobileMoneyProvider

__all__ = [
    "MockMobileMoneyProvider",
]
