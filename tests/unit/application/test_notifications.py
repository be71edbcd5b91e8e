"""Tests for recipient notification rendering and delivery.

Tests cover:
- Message templates per status, including the failure reason
- Messages rendered from the record as persisted at dispatch time
- Delivery failures logged and swallowed
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest
from structlog.testing import capture_logs

from b2c_payments.application.notifications import (
    NotificationJob,
    RecipientNotifier,
    render_status_message,
)
from b2c_payments.domain.entities import Transaction, TransactionStatus
from b2c_payments.domain.exceptions import ExternalServiceError
from b2c_payments.domain.value_objects import TransactionId
from conftest import RecordingSmsGateway

if TYPE_CHECKING:
    from collections.abc import Callable

    from conftest import CountingTransactionRepository

# =============================================================================
# Rendering
# =============================================================================


class TestRenderStatusMessage:
    def test_success_message(
        self, make_transaction: Callable[..., Transaction], fixed_time: datetime
    ) -> None:
        transaction = make_transaction().apply_provider_status(
            TransactionStatus.SUCCESS, None, fixed_time
        )

        assert render_status_message(transaction) == (
            "Your payment of 500.00 KES has been successfully processed. "
            f"Transaction ID: {transaction.id}"
        )

    def test_failed_message_includes_reason(
        self, make_transaction: Callable[..., Transaction], fixed_time: datetime
    ) -> None:
        transaction = make_transaction().mark_failed("External API error: boom", fixed_time)

        assert render_status_message(transaction) == (
            f"Your payment of 500.00 KES failed. Transaction ID: {transaction.id}. "
            "Reason: External API error: boom"
        )

    def test_in_progress_message(
        self, make_transaction: Callable[..., Transaction], fixed_time: datetime
    ) -> None:
        transaction = make_transaction().mark_in_progress("MOCK_1", fixed_time)

        assert render_status_message(transaction) == (
            f"Your payment of 500.00 KES is being processed. Transaction ID: {transaction.id}"
        )

    @pytest.mark.parametrize(
        ("status", "phrase"),
        [
            (TransactionStatus.PENDING, "is pending"),
            (TransactionStatus.CANCELLED, "has been cancelled"),
        ],
    )
    def test_other_status_messages(
        self,
        make_transaction: Callable[..., Transaction],
        fixed_time: datetime,
        status: TransactionStatus,
        phrase: str,
    ) -> None:
        transaction = make_transaction().apply_provider_status(status, None, fixed_time)

        message = render_status_message(transaction)

        assert phrase in message
        assert str(transaction.id) in message

    def test_rendering_is_deterministic(
        self, make_transaction: Callable[..., Transaction]
    ) -> None:
        transaction = make_transaction()

        assert render_status_message(transaction) == render_status_message(transaction)


# =============================================================================
# Delivery
# =============================================================================


@pytest.fixture
def notifier(
    repository: CountingTransactionRepository, sms_gateway: RecordingSmsGateway
) -> RecipientNotifier:
    return RecipientNotifier(repository, sms_gateway)


class TestRecipientNotifier:
    def test_sends_message_to_recipient(
        self,
        notifier: RecipientNotifier,
        repository: CountingTransactionRepository,
        sms_gateway: RecordingSmsGateway,
        make_transaction: Callable[..., Transaction],
    ) -> None:
        transaction = make_transaction()
        repository.create(transaction)

        notifier.notify(NotificationJob(transaction.id, transaction.status))

        assert sms_gateway.sent == [("+254712345678", render_status_message(transaction))]

    def test_message_reflects_state_at_dispatch_time(
        self,
        notifier: RecipientNotifier,
        repository: CountingTransactionRepository,
        sms_gateway: RecordingSmsGateway,
        make_transaction: Callable[..., Transaction],
        fixed_time: datetime,
    ) -> None:
        transaction = make_transaction()
        repository.create(transaction)
        job = NotificationJob(transaction.id, TransactionStatus.PENDING)
        succeeded = transaction.apply_provider_status(TransactionStatus.SUCCESS, None, fixed_time)
        repository.update(succeeded)

        notifier.notify(job)

        assert len(sms_gateway.sent) == 1
        assert "successfully processed" in sms_gateway.sent[0][1]

    def test_missing_transaction_is_logged_and_skipped(
        self,
        notifier: RecipientNotifier,
        sms_gateway: RecordingSmsGateway,
    ) -> None:
        job = NotificationJob(TransactionId(value="gone"), TransactionStatus.SUCCESS)

        with capture_logs() as logs:
            notifier.notify(job)

        assert sms_gateway.sent == []
        assert any(
            entry["event"] == "notification_transaction_missing" and entry["log_level"] == "warning"
            for entry in logs
        )

    def test_gateway_failure_is_logged_and_swallowed(
        self,
        repository: CountingTransactionRepository,
        make_transaction: Callable[..., Transaction],
    ) -> None:
        transaction = make_transaction()
        repository.create(transaction)
        notifier = RecipientNotifier(
            repository, RecordingSmsGateway(error=ExternalServiceError("SMS down"))
        )

        with capture_logs() as logs:
            notifier.notify(NotificationJob(transaction.id, transaction.status))

        failures = [e for e in logs if e["event"] == "notification_delivery_failed"]
        assert len(failures) == 1
        assert failures[0]["error"] == "SMS down"
        assert failures[0]["log_level"] == "error"

    def test_unexpected_failure_is_logged_and_swallowed(
        self,
        repository: CountingTransactionRepository,
        make_transaction: Callable[..., Transaction],
    ) -> None:
        transaction = make_transaction()
        repository.create(transaction)
        notifier = RecipientNotifier(repository, RecordingSmsGateway(error=KeyError("bug")))

        with capture_logs() as logs:
            notifier.notify(NotificationJob(transaction.id, transaction.status))

        assert any(e["event"] == "notification_unexpected_error" for e in logs)

    def test_notification_never_changes_transaction(
        self,
        notifier: RecipientNotifier,
        repository: CountingTransactionRepository,
        make_transaction: Callable[..., Transaction],
    ) -> None:
        transaction = make_transaction()
        repository.create(transaction)

        notifier.notify(NotificationJob(transaction.id, transaction.status))

        assert repository.writes == [("create", transaction)]
        assert repository.get(transaction.id) == transaction
