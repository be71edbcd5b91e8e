"""Data Transfer Objects for use case input."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from b2c_payments.domain.entities import TransactionStatus


@dataclass(frozen=True, slots=True)
class InitiatePaymentRequest:
    """Input DTO for the InitiatePayment use case."""

    recipient_phone_number: str
    amount: Decimal
    currency: str
    provider: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ProviderStatusUpdate:
    """Input DTO for a provider status callback."""

    provider_transaction_id: str
    status: TransactionStatus
    failure_reason: str | None = None
