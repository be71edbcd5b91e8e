from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from b2c_payments.application.notifications import NotificationJob
from b2c_payments.domain.entities import Transaction
from b2c_payments.domain.entities.transaction import validate_amount
from b2c_payments.domain.exceptions import ExternalServiceError, PaymentError
from b2c_payments.domain.value_objects import PhoneNumber, TransactionId

if TYPE_CHECKING:
    from b2c_payments.application.dtos import InitiatePaymentRequest
    from b2c_payments.application.ports import (
        LockProvider,
        MobileMoneyProvider,
        NotificationScheduler,
        TimeProvider,
        TransactionRepository,
    )
    from b2c_payments.application.provider_registry import ProviderRegistry

logger = structlog.get_logger(__name__)


class InitiatePaymentUseCase:
    """Orchestrates a B2C payment from request to provider acceptance.

    Responsibilities:
    - Validate the request and resolve the provider adapter (no side effects)
    - Persist the PENDING record before any external call
    - Call the provider and persist the outcome (IN_PROGRESS or FAILED)
    - Schedule a recipient notification in every terminal branch

    Exactly two store writes happen once validation passes: create, then
    update. Both run while holding the per-transaction lock.
    """

    def __init__(
        self,
        lock_provider: LockProvider,
        time_provider: TimeProvider,
        transaction_repository: TransactionRepository,
        provider_registry: ProviderRegistry,
        notification_scheduler: NotificationScheduler,
    ) -> None:
        self._lock_provider = lock_provider
        self._time_provider = time_provider
        self._transaction_repo = transaction_repository
        self._providers = provider_registry
        self._notifications = notification_scheduler

    def execute(self, request: InitiatePaymentRequest) -> Transaction:
        """Execute the payment initiation workflow.

        Args:
            request: Recipient, amount, currency, provider tag and description.

        Returns:
            The persisted transaction in IN_PROGRESS state.

        Raises:
            ValidationError: Invalid request or unsupported provider. Nothing
                was persisted and the provider was not called.
            PaymentError: The provider call (or the follow-up write) failed.
                A FAILED record has been persisted; see its transaction_id.
        """
        # Step 1: Validate before any side effect
        validate_amount(request.amount)
        recipient = PhoneNumber(value=request.recipient_phone_number)
        log = logger.bind(recipient=recipient.masked(), provider=request.provider)
        log.info("payment_initiation_requested")

        # Step 2: Resolve the adapter (case-insensitive tag)
        provider = self._providers.resolve(request.provider)

        # Step 3: Build the PENDING record under a fresh ID
        transaction = Transaction.create(
            recipient_phone_number=recipient.value,
            amount=request.amount,
            currency=request.currency,
            provider=provider.provider_type.upper(),
            description=request.description,
            now=self._time_provider.now(),
            transaction_id=TransactionId.generate(),
        )

        with self._lock_provider.acquire(str(transaction.id)):
            return self._execute_within_lock(transaction, provider)

    def _execute_within_lock(
        self,
        transaction: Transaction,
        provider: MobileMoneyProvider,
    ) -> Transaction:
        log = logger.bind(transaction_id=str(transaction.id), provider=transaction.provider)

        # First durable write: must complete before the external call
        self._transaction_repo.create(transaction)
        log.info("payment_transaction_created", status=transaction.status.value)

        in_flight = transaction
        try:
            provider_transaction_id = provider.initiate(transaction)
            in_flight = transaction.mark_in_progress(
                provider_transaction_id, self._time_provider.now()
            )
            self._transaction_repo.update(in_flight)
        except ExternalServiceError as e:
            log.error("payment_provider_error", error=str(e))
            self._fail(in_flight, f"External API error: {e}")
            raise PaymentError(
                "Failed to initiate payment with mobile money provider.",
                transaction_id=str(transaction.id),
            ) from e
        except Exception as e:
            log.exception("payment_initiation_unexpected_error")
            self._fail(in_flight, f"An unexpected error occurred: {e}")
            raise PaymentError(
                "An unexpected error occurred during payment initiation.",
                transaction_id=str(transaction.id),
            ) from e

        log.info(
            "payment_initiated",
            provider_transaction_id=in_flight.provider_transaction_id,
            status=in_flight.status.value,
        )
        self._notifications.schedule(NotificationJob(in_flight.id, in_flight.status))
        return in_flight

    def _fail(self, transaction: Transaction, reason: str) -> None:
        """Persist the FAILED outcome and notify the recipient.

        A failure to persist is logged; the caller still raises PaymentError
        chained to the original cause.
        """
        failed = transaction.mark_failed(reason, self._time_provider.now())
        try:
            self._transaction_repo.update(failed)
        except Exception:
            logger.exception(
                "payment_failure_not_persisted",
                transaction_id=str(failed.id),
                failure_reason=reason,
            )
            return
        self._notifications.schedule(NotificationJob(failed.id, failed.status))
