from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from b2c_payments.application.notifications import NotificationJob

if TYPE_CHECKING:
    from b2c_payments.application.dtos import ProviderStatusUpdate
    from b2c_payments.application.ports import (
        LockProvider,
        NotificationScheduler,
        TimeProvider,
        TransactionRepository,
    )
    from b2c_payments.domain.entities import Transaction

logger = structlog.get_logger(__name__)


class ApplyProviderStatusUpdateUseCase:
    """Applies an out-of-band status change reported by a provider.

    The update is matched by provider transaction ID because that is the
    only ID the provider knows. An unknown ID is a stale or re-delivered
    callback: it is logged as a warning, nothing is written and nothing
    is raised.

    The read-modify-write runs under the per-transaction lock, re-reading
    the record by primary ID inside the lock so a concurrent writer's
    change is never overwritten with stale data.
    """

    def __init__(
        self,
        lock_provider: LockProvider,
        time_provider: TimeProvider,
        transaction_repository: TransactionRepository,
        notification_scheduler: NotificationScheduler,
    ) -> None:
        self._lock_provider = lock_provider
        self._time_provider = time_provider
        self._transaction_repo = transaction_repository
        self._notifications = notification_scheduler

    def execute(self, update: ProviderStatusUpdate) -> Transaction | None:
        """Apply the update.

        Returns:
            The updated transaction, or None if no local transaction
            matches the provider transaction ID.
        """
        log = logger.bind(
            provider_transaction_id=update.provider_transaction_id,
            new_status=update.status.value,
        )
        log.info("provider_status_update_received")

        match = self._transaction_repo.get_by_provider_transaction_id(
            update.provider_transaction_id
        )
        if match is None:
            log.warning("provider_status_update_unmatched")
            return None

        with self._lock_provider.acquire(str(match.id)):
            current = self._transaction_repo.get(match.id)
            if current is None:
                log.warning("provider_status_update_unmatched")
                return None

            updated = current.apply_provider_status(
                update.status, update.failure_reason, self._time_provider.now()
            )
            self._transaction_repo.update(updated)

        log.info(
            "provider_status_update_applied",
            transaction_id=str(updated.id),
            previous_status=current.status.value,
        )
        self._notifications.schedule(NotificationJob(updated.id, updated.status))
        return updated
