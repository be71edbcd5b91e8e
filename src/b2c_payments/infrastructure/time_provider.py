from datetime import UTC, datetime, timedelta

from b2c_payments.application.ports import TimeProvider


class SystemTimeProvider(TimeProvider):
    """Wall-clock time provider used in production wiring."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedTimeProvider(TimeProvider):
    """Controllable clock for tests.

    Not thread-safe; set_time() is meant to be called from the test thread
    between operations.
    """

    def __init__(self, fixed_time: datetime) -> None:
        self._require_utc(fixed_time)
        self._current = fixed_time

    def now(self) -> datetime:
        return self._current

    def set_time(self, new_time: datetime) -> None:
        self._require_utc(new_time)
        self._current = new_time

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward by timedelta(**delta) and return the new time."""
        self._current = self._current + timedelta(**delta)
        return self._current

    @staticmethod
    def _require_utc(dt: datetime) -> None:
        if dt.tzinfo is not UTC:
            raise ValueError(f"datetime must have tzinfo=UTC, got tzinfo={dt.tzinfo}")
