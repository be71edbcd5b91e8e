from __future__ import annotations

import contextvars
from concurrent.futures import ThreadPoolExecutor
from threading import BoundedSemaphore, Lock
from typing import TYPE_CHECKING

import structlog

from b2c_payments.application.ports import NotificationScheduler
from b2c_payments.domain.exceptions import ConfigurationError

if TYPE_CHECKING:
    from concurrent.futures import Future
    from types import TracebackType

    from b2c_payments.application.notifications import NotificationJob, RecipientNotifier

logger = structlog.get_logger(__name__)


class ThreadPoolNotificationDispatcher(NotificationScheduler):
    """Fire-and-forget notification delivery on a bounded worker pool.

    Lifecycle is explicit and process-scoped:
        dispatcher.start()      # at process start (FastAPI lifespan)
        dispatcher.schedule(job)
        dispatcher.shutdown()   # at process exit; drains outstanding jobs

    schedule() never raises. Jobs are dropped with a warning when scheduled
    before start() or after shutdown(), or when max_pending jobs are already
    queued or running. Workers run RecipientNotifier.notify(), which
    swallows delivery errors itself, inside a copy of the scheduling
    thread's context so request-bound log fields reach the worker logs.
    """

    def __init__(
        self,
        notifier: RecipientNotifier,
        max_workers: int = 5,
        max_pending: int = 1000,
    ) -> None:
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")
        if max_pending < max_workers:
            raise ConfigurationError(
                f"max_pending must be at least max_workers ({max_workers}), got {max_pending}"
            )
        self._notifier = notifier
        self._max_workers = max_workers
        self._max_pending = max_pending
        self._slots = BoundedSemaphore(max_pending)
        self._executor: ThreadPoolExecutor | None = None
        self._state_lock = Lock()

    @property
    def is_running(self) -> bool:
        return self._executor is not None

    def start(self) -> None:
        with self._state_lock:
            if self._executor is not None:
                return
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="notification",
            )
        logger.info(
            "notification_dispatcher_started",
            max_workers=self._max_workers,
            max_pending=self._max_pending,
        )

    def schedule(self, job: NotificationJob) -> None:
        with self._state_lock:
            executor = self._executor
            if executor is None:
                self._drop(job, "dispatcher_not_running")
                return
            if not self._slots.acquire(blocking=False):
                self._drop(job, "backlog_full")
                return
            context = contextvars.copy_context()
            try:
                future = executor.submit(context.run, self._notifier.notify, job)
            except RuntimeError:
                # Interpreter shutdown closed the executor underneath us
                self._slots.release()
                self._drop(job, "executor_shut_down")
                return
        future.add_done_callback(self._release_slot)
        logger.debug(
            "notification_scheduled",
            transaction_id=str(job.transaction_id),
            status=job.status.value,
        )

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting jobs; optionally wait for or abandon outstanding ones."""
        with self._state_lock:
            executor, self._executor = self._executor, None
        if executor is None:
            return
        executor.shutdown(wait=wait, cancel_futures=cancel_pending)
        logger.info(
            "notification_dispatcher_stopped",
            drained=wait,
            cancelled_pending=cancel_pending,
        )

    def _release_slot(self, future: Future[None]) -> None:
        self._slots.release()

    @staticmethod
    def _drop(job: NotificationJob, reason: str) -> None:
        logger.warning(
            "notification_dropped",
            transaction_id=str(job.transaction_id),
            reason=reason,
        )

    def __enter__(self) -> ThreadPoolNotificationDispatcher:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()
