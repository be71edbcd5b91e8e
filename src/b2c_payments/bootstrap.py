"""Composition root: wires ports to adapters for one process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from b2c_payments.application.notifications import RecipientNotifier
from b2c_payments.application.provider_registry import ProviderRegistry
from b2c_payments.application.use_cases import (
    ApplyProviderStatusUpdateUseCase,
    GetPaymentStatusUseCase,
    InitiatePaymentUseCase,
    RefreshPaymentStatusUseCase,
)
from b2c_payments.infrastructure import (
    InMemoryLockProvider,
    InMemoryTransactionRepository,
    LoggingSmsGateway,
    MockMobileMoneyProvider,
    SystemTimeProvider,
    ThreadPoolNotificationDispatcher,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from b2c_payments.application.ports import (
        MobileMoneyProvider,
        SmsGateway,
        TimeProvider,
        TransactionRepository,
    )
    from b2c_payments.config import Settings


@dataclass(frozen=True, slots=True)
class PaymentsApplication:
    """Process-scoped container of use cases and long-lived resources.

    The notification dispatcher is created here but not started; the
    owner of the process (the FastAPI lifespan, or a test) calls
    dispatcher.start() at startup and dispatcher.shutdown() at exit.
    """

    initiate_payment: InitiatePaymentUseCase
    get_payment_status: GetPaymentStatusUseCase
    apply_provider_status_update: ApplyProviderStatusUpdateUseCase
    refresh_payment_status: RefreshPaymentStatusUseCase
    dispatcher: ThreadPoolNotificationDispatcher
    transaction_repository: TransactionRepository
    provider_registry: ProviderRegistry


def build_application(
    settings: Settings,
    providers: Iterable[MobileMoneyProvider] | None = None,
    sms_gateway: SmsGateway | None = None,
    transaction_repository: TransactionRepository | None = None,
    time_provider: TimeProvider | None = None,
) -> PaymentsApplication:
    """Build the application graph.

    Any collaborator left as None gets its default adapter: the MOCK
    provider, the logging SMS gateway, the in-memory store and the
    system clock.

    Raises:
        DuplicateProviderError: Two providers share a tag.
    """
    if providers is None:
        providers = [
            MockMobileMoneyProvider(
                latency_seconds=settings.mock_provider_latency_seconds,
                failure_message=settings.mock_provider_failure_message,
            )
        ]
    registry = ProviderRegistry(providers)
    repository = transaction_repository or InMemoryTransactionRepository()
    clock = time_provider or SystemTimeProvider()
    lock_provider = InMemoryLockProvider()

    notifier = RecipientNotifier(
        transaction_repository=repository,
        sms_gateway=sms_gateway or LoggingSmsGateway(settings.mock_sms_latency_seconds),
    )
    dispatcher = ThreadPoolNotificationDispatcher(
        notifier,
        max_workers=settings.notification_workers,
        max_pending=settings.notification_max_pending,
    )

    get_status = GetPaymentStatusUseCase(repository)
    apply_update = ApplyProviderStatusUpdateUseCase(
        lock_provider=lock_provider,
        time_provider=clock,
        transaction_repository=repository,
        notification_scheduler=dispatcher,
    )

    return PaymentsApplication(
        initiate_payment=InitiatePaymentUseCase(
            lock_provider=lock_provider,
            time_provider=clock,
            transaction_repository=repository,
            provider_registry=registry,
            notification_scheduler=dispatcher,
        ),
        get_payment_status=get_status,
        apply_provider_status_update=apply_update,
        refresh_payment_status=RefreshPaymentStatusUseCase(
            provider_registry=registry,
            get_payment_status=get_status,
            apply_status_update=apply_update,
        ),
        dispatcher=dispatcher,
        transaction_repository=repository,
        provider_registry=registry,
    )
