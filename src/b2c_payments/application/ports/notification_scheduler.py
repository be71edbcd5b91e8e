from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from b2c_payments.application.notifications import NotificationJob


class NotificationScheduler(ABC):
    """Port for fire-and-forget recipient notifications.

    Contract:
    - schedule() returns immediately; delivery happens off the caller's thread
    - schedule() MUST NOT raise, and delivery failures never reach the caller
    - No result is returned or awaited
    """

    @abstractmethod
    def schedule(self, job: NotificationJob) -> None:
        """Hand a notification job off for asynchronous delivery."""
