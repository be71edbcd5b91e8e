"""Recipient notifications: job definition, message templates and delivery.

Delivery runs on a worker thread (see ThreadPoolNotificationDispatcher). It
re-reads the transaction at dispatch time, so the message reflects the latest
persisted state rather than a snapshot captured when the job was scheduled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from b2c_payments.domain.entities import TransactionStatus
from b2c_payments.domain.exceptions import ExternalServiceError

if TYPE_CHECKING:
    from b2c_payments.application.ports import SmsGateway, TransactionRepository
    from b2c_payments.domain.entities import Transaction
    from b2c_payments.domain.value_objects import TransactionId

logger = structlog.get_logger(__name__)

_TEMPLATES: dict[TransactionStatus, str] = {
    TransactionStatus.SUCCESS: (
        "Your payment of {amount} {currency} has been successfully processed. "
        "Transaction ID: {id}"
    ),
    TransactionStatus.FAILED: (
        "Your payment of {amount} {currency} failed. Transaction ID: {id}. Reason: {reason}"
    ),
    TransactionStatus.PENDING: "Your payment of {amount} {currency} is pending. Transaction ID: {id}",
    TransactionStatus.IN_PROGRESS: (
        "Your payment of {amount} {currency} is being processed. Transaction ID: {id}"
    ),
    TransactionStatus.CANCELLED: (
        "Your payment of {amount} {currency} has been cancelled. Transaction ID: {id}"
    ),
}

_FALLBACK_TEMPLATE = (
    "Update on your payment of {amount} {currency}. Transaction ID: {id}. Status: {status}"
)


@dataclass(frozen=True, slots=True)
class NotificationJob:
    """A self-contained unit of notification work.

    status is the status resolved when the job was scheduled; it is kept for
    logging. The message itself is rendered from the record re-read at
    dispatch time.
    """

    transaction_id: TransactionId
    status: TransactionStatus


def render_status_message(transaction: Transaction) -> str:
    """Render the recipient message for the transaction's current status.

    Deterministic in amount, currency, id, status and (for FAILED) the
    failure reason. Statuses without a template get a generic update.
    """
    template = _TEMPLATES.get(transaction.status, _FALLBACK_TEMPLATE)
    return template.format(
        amount=transaction.amount,
        currency=transaction.currency,
        id=transaction.id,
        status=transaction.status.value,
        reason=transaction.failure_reason or "Unknown",
    )


class RecipientNotifier:
    """Delivers status messages to the transaction's recipient.

    notify() never raises: delivery failures are logged and swallowed, and
    nothing is retried. Transaction state is never touched here.
    """

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        sms_gateway: SmsGateway,
    ) -> None:
        self._transaction_repo = transaction_repository
        self._sms_gateway = sms_gateway

    def notify(self, job: NotificationJob) -> None:
        log = logger.bind(
            transaction_id=str(job.transaction_id),
            scheduled_status=job.status.value,
        )
        try:
            transaction = self._transaction_repo.get(job.transaction_id)
            if transaction is None:
                log.warning("notification_transaction_missing")
                return

            message = render_status_message(transaction)
            self._sms_gateway.send(transaction.recipient.value, message)
            log.info(
                "notification_sent",
                status=transaction.status.value,
                recipient=transaction.recipient.masked(),
            )
        except ExternalServiceError as e:
            log.error("notification_delivery_failed", error=str(e))
        except Exception:
            log.exception("notification_unexpected_error")
