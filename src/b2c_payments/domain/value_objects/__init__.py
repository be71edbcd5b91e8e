"""Value objects - Immutable objects defined by their attributes."""

from b2c_payments.domain.value_objects.phone_number import PhoneNumber
from b2c_payments.domain.value_objects.transaction_id import TransactionId

__all__ = [
    "PhoneNumber",
    "TransactionId",
]
