from __future__ import annotations

import copy
from threading import Lock
from typing import TYPE_CHECKING

from b2c_payments.application.ports import TransactionRepository
from b2c_payments.domain.exceptions import DuplicateTransactionError, TransactionNotFoundError

if TYPE_CHECKING:
    from b2c_payments.domain.entities import Transaction
    from b2c_payments.domain.value_objects import TransactionId


class InMemoryTransactionRepository(TransactionRepository):
    """In-memory transaction store for tests and single-process deployments.

    Implementation notes:
    - Primary index keyed by TransactionId (frozen dataclass, hashable)
    - Secondary index provider_transaction_id -> TransactionId, maintained on
      every write and dropped if a record's provider ID changes
    - Stores and returns deep copies to mimic database detachment
    - A store-level lock keeps each call atomic, because notification workers
      read while request threads write. Read-modify-write sequences are
      still serialized by the caller through LockProvider.
    """

    def __init__(self) -> None:
        self._transactions: dict[TransactionId, Transaction] = {}
        self._by_provider_id: dict[str, TransactionId] = {}
        self._lock = Lock()

    def create(self, transaction: Transaction) -> None:
        with self._lock:
            if transaction.id in self._transactions:
                raise DuplicateTransactionError(f"Transaction already exists: {transaction.id}")
            self._store(transaction)

    def update(self, transaction: Transaction) -> None:
        with self._lock:
            previous = self._transactions.get(transaction.id)
            if previous is None:
                raise TransactionNotFoundError(f"Transaction not found: {transaction.id}")
            if (
                previous.provider_transaction_id is not None
                and previous.provider_transaction_id != transaction.provider_transaction_id
            ):
                del self._by_provider_id[previous.provider_transaction_id]
            self._store(transaction)

    def get(self, transaction_id: TransactionId) -> Transaction | None:
        with self._lock:
            transaction = self._transactions.get(transaction_id)
            if transaction is None:
                return None
            return copy.deepcopy(transaction)

    def get_by_provider_transaction_id(
        self,
        provider_transaction_id: str,
    ) -> Transaction | None:
        with self._lock:
            transaction_id = self._by_provider_id.get(provider_transaction_id)
            if transaction_id is None:
                return None
            return copy.deepcopy(self._transactions[transaction_id])

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)

    def _store(self, transaction: Transaction) -> None:
        self._transactions[transaction.id] = copy.deepcopy(transaction)
        if transaction.provider_transaction_id is not None:
            self._by_provider_id[transaction.provider_transaction_id] = transaction.id
