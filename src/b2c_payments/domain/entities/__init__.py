"""Domain entities - Objects with identity and lifecycle."""

from b2c_payments.domain.entities.transaction import Transaction, TransactionStatus

__all__ = [
    "Transaction",
    "TransactionStatus",
]
