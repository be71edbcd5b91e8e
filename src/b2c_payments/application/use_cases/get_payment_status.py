from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from b2c_payments.domain.value_objects import TransactionId

if TYPE_CHECKING:
    from b2c_payments.application.ports import TransactionRepository
    from b2c_payments.domain.entities import Transaction

logger = structlog.get_logger(__name__)


class GetPaymentStatusUseCase:
    """Looks up a transaction by its primary ID.

    Absence is a normal outcome, not an error: unknown and blank IDs
    both return None.
    """

    def __init__(self, transaction_repository: TransactionRepository) -> None:
        self._transaction_repo = transaction_repository

    def execute(self, transaction_id: str) -> Transaction | None:
        if not transaction_id or not transaction_id.strip():
            return None

        transaction = self._transaction_repo.get(TransactionId(value=transaction_id))
        if transaction is None:
            logger.warning("payment_transaction_not_found", transaction_id=transaction_id)
            return None

        logger.info(
            "payment_status_fetched",
            transaction_id=transaction_id,
            status=transaction.status.value,
        )
        return transaction
