from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from b2c_payments.application.dtos import ProviderStatusUpdate

if TYPE_CHECKING:
    from b2c_payments.application.provider_registry import ProviderRegistry
    from b2c_payments.application.use_cases.apply_provider_status_update import (
        ApplyProviderStatusUpdateUseCase,
    )
    from b2c_payments.application.use_cases.get_payment_status import GetPaymentStatusUseCase
    from b2c_payments.domain.entities import Transaction

logger = structlog.get_logger(__name__)


class RefreshPaymentStatusUseCase:
    """Reconciles a transaction with its provider's view of the payment.

    Polls the adapter's check_status() and, when the provider reports a
    different status, applies it through ApplyProviderStatusUpdateUseCase
    (same locking, persistence and notification path as a callback).

    This recovers callbacks that arrived before initiation persisted the
    provider transaction ID and were therefore unmatched.
    """

    def __init__(
        self,
        provider_registry: ProviderRegistry,
        get_payment_status: GetPaymentStatusUseCase,
        apply_status_update: ApplyProviderStatusUpdateUseCase,
    ) -> None:
        self._providers = provider_registry
        self._get_status = get_payment_status
        self._apply_update = apply_status_update

    def execute(self, transaction_id: str) -> Transaction | None:
        """Refresh one transaction.

        Returns:
            None for an unknown ID; otherwise the (possibly updated) record.

        Raises:
            UnsupportedProviderError: The record's provider is no longer registered.
            ExternalServiceError: check_status() failed; nothing was changed.
        """
        transaction = self._get_status.execute(transaction_id)
        if transaction is None:
            return None

        if transaction.provider_transaction_id is None:
            logger.info(
                "payment_refresh_skipped",
                transaction_id=str(transaction.id),
                status=transaction.status.value,
            )
            return transaction

        provider = self._providers.resolve(transaction.provider)
        reported = provider.check_status(transaction.provider_transaction_id)
        if reported == transaction.status:
            return transaction

        logger.info(
            "payment_refresh_status_changed",
            transaction_id=str(transaction.id),
            previous_status=transaction.status.value,
            reported_status=reported.value,
        )
        updated = self._apply_update.execute(
            ProviderStatusUpdate(
                provider_transaction_id=transaction.provider_transaction_id,
                status=reported,
            )
        )
        return updated or transaction
