"""Use cases - Payment orchestration entry points."""

from b2c_payments.application.use_cases.apply_provider_status_update import (
    ApplyProviderStatusUpdateUseCase,
)
from b2c_payments.application.use_cases.get_payment_status import GetPaymentStatusUseCase
from b2c_payments.application.use_cases.initiate_payment import InitiatePaymentUseCase
from b2c_payments.application.use_cases.refresh_payment_status import (
    RefreshPaymentStatusUseCase,
)

__all__ = [
    "ApplyProviderStatusUpdateUseCase",
    "GetPaymentStatusUseCase",
    "InitiatePaymentUseCase",
    "RefreshPaymentStatusUseCase",
]
