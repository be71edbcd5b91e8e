from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import TYPE_CHECKING

from b2c_payments.application.ports import LockProvider

if TYPE_CHECKING:
    from collections.abc import Iterator


class InMemoryLockProvider(LockProvider):
    """Per-transaction locks for a single process.

    Two-phase locking:
    1. A registry lock guards lookup/creation of the per-transaction lock
    2. The per-transaction lock serializes writers of that transaction

    Limitations:
    - Single-process only; multiple instances need a shared lock service
    - Locks are never evicted (one small Lock per transaction ever seen)
    """

    def __init__(self) -> None:
        self._locks: dict[str, Lock] = {}
        self._registry_lock = Lock()

    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:
        with self._registry_lock:
            lock = self._locks.setdefault(resource_id, Lock())

        with lock:
            yield


class NoOpLockProvider(LockProvider):
    """Lock provider that performs no locking.

    For single-threaded unit tests only. Never use it where a provider
    callback can race an in-flight initiation.
    """

    @contextmanager
    def acquire(self, resource_id: str) -> Iterator[None]:  # noqa: ARG002
        yield
