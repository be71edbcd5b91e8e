"""Tests for ThreadPoolNotificationDispatcher.

Tests cover:
- Explicit start/shutdown lifecycle and draining on shutdown
- Jobs scheduled outside the running window are dropped, never raised
- Delivery failures never reach the caller of schedule()
- Outstanding jobs are capped; request-bound log context reaches the workers
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import pytest
import structlog
from structlog.testing import capture_logs

from b2c_payments.application.notifications import NotificationJob, RecipientNotifier
from b2c_payments.application.ports import NotificationScheduler, SmsGateway
from b2c_payments.domain.exceptions import ConfigurationError, ExternalServiceError
from b2c_payments.infrastructure.notification_dispatcher import ThreadPoolNotificationDispatcher
from conftest import RecordingSmsGateway

if TYPE_CHECKING:
    from collections.abc import Callable

    from b2c_payments.domain.entities import Transaction
    from conftest import CountingTransactionRepository


@pytest.fixture
def stored_transaction(
    repository: CountingTransactionRepository,
    make_transaction: Callable[..., Transaction],
) -> Transaction:
    transaction = make_transaction()
    repository.create(transaction)
    return transaction


@pytest.fixture
def dispatcher(
    repository: CountingTransactionRepository, sms_gateway: RecordingSmsGateway
) -> ThreadPoolNotificationDispatcher:
    return ThreadPoolNotificationDispatcher(
        RecipientNotifier(repository, sms_gateway), max_workers=2
    )


class TestDispatcherLifecycle:
    def test_implements_scheduler_port(self, dispatcher: ThreadPoolNotificationDispatcher) -> None:
        assert isinstance(dispatcher, NotificationScheduler)

    def test_not_running_until_started(self, dispatcher: ThreadPoolNotificationDispatcher) -> None:
        assert dispatcher.is_running is False

        dispatcher.start()
        try:
            assert dispatcher.is_running is True
        finally:
            dispatcher.shutdown()

        assert dispatcher.is_running is False

    def test_start_is_idempotent(self, dispatcher: ThreadPoolNotificationDispatcher) -> None:
        dispatcher.start()
        executor = dispatcher._executor
        dispatcher.start()

        assert dispatcher._executor is executor
        dispatcher.shutdown()

    def test_shutdown_without_start_is_a_no_op(
        self, dispatcher: ThreadPoolNotificationDispatcher
    ) -> None:
        dispatcher.shutdown()

        assert dispatcher.is_running is False

    @pytest.mark.parametrize("max_workers", [0, -1])
    def test_rejects_non_positive_worker_count(
        self,
        repository: CountingTransactionRepository,
        sms_gateway: RecordingSmsGateway,
        max_workers: int,
    ) -> None:
        with pytest.raises(ConfigurationError, match="max_workers"):
            ThreadPoolNotificationDispatcher(
                RecipientNotifier(repository, sms_gateway), max_workers=max_workers
            )

    def test_rejects_backlog_smaller_than_pool(
        self,
        repository: CountingTransactionRepository,
        sms_gateway: RecordingSmsGateway,
    ) -> None:
        with pytest.raises(ConfigurationError, match="max_pending"):
            ThreadPoolNotificationDispatcher(
                RecipientNotifier(repository, sms_gateway), max_workers=4, max_pending=2
            )


class TestDispatcherDelivery:
    def test_shutdown_drains_scheduled_jobs(
        self,
        dispatcher: ThreadPoolNotificationDispatcher,
        sms_gateway: RecordingSmsGateway,
        stored_transaction: Transaction,
    ) -> None:
        dispatcher.start()
        for _ in range(5):
            dispatcher.schedule(NotificationJob(stored_transaction.id, stored_transaction.status))

        dispatcher.shutdown(wait=True)

        assert len(sms_gateway.sent) == 5
        assert all(phone == "+254712345678" for phone, _ in sms_gateway.sent)

    def test_delivery_runs_off_the_calling_thread(
        self,
        repository: CountingTransactionRepository,
        stored_transaction: Transaction,
    ) -> None:
        threads: list[str] = []

        class ThreadRecordingGateway(SmsGateway):
            def send(self, phone_number: str, message: str) -> None:
                threads.append(threading.current_thread().name)

        with ThreadPoolNotificationDispatcher(
            RecipientNotifier(repository, ThreadRecordingGateway())
        ) as dispatcher:
            dispatcher.schedule(NotificationJob(stored_transaction.id, stored_transaction.status))

        assert len(threads) == 1
        assert threads[0].startswith("notification")
        assert threads[0] != threading.current_thread().name

    def test_schedule_returns_before_delivery_completes(
        self,
        repository: CountingTransactionRepository,
        stored_transaction: Transaction,
    ) -> None:
        release = threading.Event()
        delivered = threading.Event()

        class BlockingGateway(SmsGateway):
            def send(self, phone_number: str, message: str) -> None:
                release.wait(timeout=5)
                delivered.set()

        dispatcher = ThreadPoolNotificationDispatcher(
            RecipientNotifier(repository, BlockingGateway())
        )
        dispatcher.start()

        dispatcher.schedule(NotificationJob(stored_transaction.id, stored_transaction.status))

        assert not delivered.is_set()
        release.set()
        dispatcher.shutdown(wait=True)
        assert delivered.is_set()

    def test_gateway_failure_does_not_reach_scheduler(
        self,
        repository: CountingTransactionRepository,
        stored_transaction: Transaction,
    ) -> None:
        gateway = RecordingSmsGateway(error=ExternalServiceError("SMS down"))
        dispatcher = ThreadPoolNotificationDispatcher(RecipientNotifier(repository, gateway))

        with capture_logs() as logs:
            dispatcher.start()
            dispatcher.schedule(NotificationJob(stored_transaction.id, stored_transaction.status))
            dispatcher.shutdown(wait=True)

        assert any(e["event"] == "notification_delivery_failed" for e in logs)


class TestDispatcherDroppedJobs:
    def test_job_before_start_is_dropped(
        self,
        dispatcher: ThreadPoolNotificationDispatcher,
        sms_gateway: RecordingSmsGateway,
        stored_transaction: Transaction,
    ) -> None:
        with capture_logs() as logs:
            dispatcher.schedule(NotificationJob(stored_transaction.id, stored_transaction.status))

        assert sms_gateway.sent == []
        dropped = [e for e in logs if e["event"] == "notification_dropped"]
        assert len(dropped) == 1
        assert dropped[0]["reason"] == "dispatcher_not_running"
        assert dropped[0]["transaction_id"] == str(stored_transaction.id)

    def test_job_after_shutdown_is_dropped(
        self,
        dispatcher: ThreadPoolNotificationDispatcher,
        sms_gateway: RecordingSmsGateway,
        stored_transaction: Transaction,
    ) -> None:
        dispatcher.start()
        dispatcher.shutdown()

        with capture_logs() as logs:
            dispatcher.schedule(NotificationJob(stored_transaction.id, stored_transaction.status))

        assert sms_gateway.sent == []
        assert [e["event"] for e in logs] == ["notification_dropped"]

    def test_job_beyond_backlog_limit_is_dropped(
        self,
        repository: CountingTransactionRepository,
        stored_transaction: Transaction,
    ) -> None:
        release = threading.Event()
        sent: list[str] = []

        class BlockingGateway(SmsGateway):
            def send(self, phone_number: str, message: str) -> None:
                release.wait(timeout=5)
                sent.append(message)

        dispatcher = ThreadPoolNotificationDispatcher(
            RecipientNotifier(repository, BlockingGateway()), max_workers=1, max_pending=2
        )
        job = NotificationJob(stored_transaction.id, stored_transaction.status)
        dispatcher.start()

        with capture_logs() as logs:
            for _ in range(3):
                dispatcher.schedule(job)

        release.set()
        dispatcher.shutdown(wait=True)
        dropped = [e for e in logs if e["event"] == "notification_dropped"]
        assert [e["reason"] for e in dropped] == ["backlog_full"]
        assert len(sent) == 2

    def test_completed_jobs_free_backlog_slots(
        self,
        repository: CountingTransactionRepository,
        sms_gateway: RecordingSmsGateway,
        stored_transaction: Transaction,
    ) -> None:
        dispatcher = ThreadPoolNotificationDispatcher(
            RecipientNotifier(repository, sms_gateway), max_workers=1, max_pending=1
        )
        job = NotificationJob(stored_transaction.id, stored_transaction.status)

        for _ in range(3):
            dispatcher.start()
            dispatcher.schedule(job)
            dispatcher.shutdown(wait=True)

        assert len(sms_gateway.sent) == 3


class TestDispatcherLogContext:
    def test_request_context_reaches_worker(
        self,
        repository: CountingTransactionRepository,
        stored_transaction: Transaction,
    ) -> None:
        seen: list[dict[str, object]] = []

        class ContextRecordingGateway(SmsGateway):
            def send(self, phone_number: str, message: str) -> None:
                seen.append(structlog.contextvars.get_contextvars())

        dispatcher = ThreadPoolNotificationDispatcher(
            RecipientNotifier(repository, ContextRecordingGateway())
        )
        dispatcher.start()
        structlog.contextvars.bind_contextvars(request_id="req-42")

        dispatcher.schedule(NotificationJob(stored_transaction.id, stored_transaction.status))

        structlog.contextvars.clear_contextvars()
        dispatcher.shutdown(wait=True)
        assert seen == [{"request_id": "req-42"}]
