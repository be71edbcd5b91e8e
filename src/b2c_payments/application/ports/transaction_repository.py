from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from b2c_payments.domain.entities import Transaction
    from b2c_payments.domain.value_objects import TransactionId


class TransactionRepository(ABC):
    """Port for transaction persistence (the Transaction Store).

    Contract:
    - get() and get_by_provider_transaction_id() return None when absent
    - create() inserts; an existing ID is an invariant violation
    - update() replaces; a missing ID is an invariant violation
    - Returned entities are copies; mutations never leak into stored state
    - Records are never deleted by the application

    The store is the only shared mutable resource. Callers serialize
    read-modify-write sequences per transaction through LockProvider.
    """

    @abstractmethod
    def create(self, transaction: Transaction) -> None:
        """Persist a new transaction.

        Raises:
            DuplicateTransactionError: If transaction.id already exists.
        """

    @abstractmethod
    def update(self, transaction: Transaction) -> None:
        """Overwrite an existing transaction.

        Raises:
            TransactionNotFoundError: If transaction.id was never created.
        """

    @abstractmethod
    def get(self, transaction_id: TransactionId) -> Transaction | None:
        """Retrieve a transaction by its primary ID."""

    @abstractmethod
    def get_by_provider_transaction_id(
        self,
        provider_transaction_id: str,
    ) -> Transaction | None:
        """Retrieve a transaction by the ID its provider assigned."""
