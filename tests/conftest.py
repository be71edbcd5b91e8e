"""Shared pytest fixtures for the test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from decimal import Decimal

import pytest
import structlog

from b2c_payments.application.dtos import InitiatePaymentRequest
from b2c_payments.application.notifications import NotificationJob
from b2c_payments.application.ports import MobileMoneyProvider, NotificationScheduler, SmsGateway
from b2c_payments.application.provider_registry import ProviderRegistry
from b2c_payments.domain.entities import Transaction, TransactionStatus
from b2c_payments.infrastructure.lock_provider import InMemoryLockProvider
from b2c_payments.infrastructure.time_provider import FixedTimeProvider
from b2c_payments.infrastructure.transaction_repository import InMemoryTransactionRepository

# =============================================================================
# Test doubles
# =============================================================================


class StubProvider(MobileMoneyProvider):
    """Provider adapter with scripted responses that records its calls."""

    def __init__(
        self,
        provider_type: str = "MOCK",
        provider_transaction_id: str = "provider-tx-id",
        error: Exception | None = None,
        reported_status: TransactionStatus = TransactionStatus.SUCCESS,
    ) -> None:
        self._provider_type = provider_type
        self.provider_transaction_id = provider_transaction_id
        self.error = error
        self.reported_status = reported_status
        self.initiated: list[Transaction] = []
        self.status_checks: list[str] = []

    @property
    def provider_type(self) -> str:
        return self._provider_type

    def initiate(self, transaction: Transaction) -> str:
        self.initiated.append(transaction)
        if self.error is not None:
            raise self.error
        return self.provider_transaction_id

    def check_status(self, provider_transaction_id: str) -> TransactionStatus:
        self.status_checks.append(provider_transaction_id)
        if self.error is not None:
            raise self.error
        return self.reported_status


class RecordingScheduler(NotificationScheduler):
    """Collects scheduled jobs instead of delivering them."""

    def __init__(self) -> None:
        self.jobs: list[NotificationJob] = []

    def schedule(self, job: NotificationJob) -> None:
        self.jobs.append(job)


class RecordingSmsGateway(SmsGateway):
    """Records sent messages; raises `error` instead when it is set."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[tuple[str, str]] = []

    def send(self, phone_number: str, message: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((phone_number, message))


class CountingTransactionRepository(InMemoryTransactionRepository):
    """In-memory store that records every write, in order."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: list[tuple[str, Transaction]] = []

    def create(self, transaction: Transaction) -> None:
        super().create(transaction)
        self.writes.append(("create", transaction))

    def update(self, transaction: Transaction) -> None:
        super().update(transaction)
        self.writes.append(("update", transaction))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def fixed_time() -> datetime:
    """A fixed timestamp for deterministic testing."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def time_provider(fixed_time: datetime) -> FixedTimeProvider:
    return FixedTimeProvider(fixed_time)


@pytest.fixture
def lock_provider() -> InMemoryLockProvider:
    return InMemoryLockProvider()


@pytest.fixture
def repository() -> CountingTransactionRepository:
    return CountingTransactionRepository()


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def registry(provider: StubProvider) -> ProviderRegistry:
    return ProviderRegistry([provider])


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def sms_gateway() -> RecordingSmsGateway:
    return RecordingSmsGateway()


@pytest.fixture
def payment_request() -> InitiatePaymentRequest:
    return InitiatePaymentRequest(
        recipient_phone_number="+254712345678",
        amount=Decimal("500.00"),
        currency="KES",
        provider="MOCK",
        description="Test payment",
    )


@pytest.fixture
def make_transaction(fixed_time: datetime) -> Callable[..., Transaction]:
    """Factory for PENDING transactions with overridable request attributes."""

    def factory(**overrides: object) -> Transaction:
        attributes: dict[str, object] = {
            "recipient_phone_number": "+254712345678",
            "amount": Decimal("500.00"),
            "currency": "KES",
            "provider": "MOCK",
            "description": "Test payment",
            "now": fixed_time,
        }
        attributes.update(overrides)
        return Transaction.create(**attributes)  # type: ignore[arg-type]

    return factory
