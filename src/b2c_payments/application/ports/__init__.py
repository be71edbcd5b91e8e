"""Ports - Abstract interfaces for external dependencies.

Ports define the contracts that infrastructure adapters must implement.
This allows the application layer to remain decoupled from concrete implementations.
"""

from b2c_payments.application.ports.lock_provider import LockProvider
from b2c_payments.application.ports.mobile_money_provider import MobileMoneyProvider
from b2c_payments.application.ports.notification_scheduler import NotificationScheduler
from b2c_payments.application.ports.sms_gateway import SmsGateway
from b2c_payments.application.ports.time_provider import TimeProvider
from b2c_payments.application.ports.transaction_repository import TransactionRepository

__all__ = [
    "LockProvider",
    "MobileMoneyProvider",
    "NotificationScheduler",
    "SmsGateway",
    "TimeProvider",
    "TransactionRepository",
]
