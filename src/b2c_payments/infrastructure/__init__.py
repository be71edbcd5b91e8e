"""Infrastructure layer - Concrete implementations of ports.

This layer contains:
- Persistence: In-memory transaction store
- Providers: Mobile-money provider adapters
- Notifications: Thread-pool dispatcher and SMS gateway
- Time Provider: Clock abstraction for testability
- Locking: Per-transaction locks
- Logging: structlog configuration

Infrastructure adapters implement the ports defined in the application layer.
"""

from b2c_payments.infrastructure.lock_provider import InMemoryLockProvider, NoOpLockProvider
from b2c_payments.infrastructure.notification_dispatcher import ThreadPoolNotificationDispatcher
from b2c_payments.infrastructure.providers import MockMobileMoneyProvider
from b2c_payments.infrastructure.sms_gateway import LoggingSmsGateway
from b2c_payments.infrastructure.time_provider import FixedTimeProvider, SystemTimeProvider
from b2c_payments.infrastructure.transaction_repository import InMemoryTransactionRepository

__all__ = [
    "FixedTimeProvider",
    "InMemoryLockProvider",
    "InMemoryTransactionRepository",
    "LoggingSmsGateway",
    "MockMobileMoneyProvider",
    "NoOpLockProvider",
    "SystemTimeProvider",
    "ThreadPoolNotificationDispatcher",
]
