"""Pydantic request/response models for the payments API.

JSON uses camelCase keys; Python attributes stay snake_case. Amounts are
serialized as decimal strings ("500.00") so the stored value round-trips
exactly; requests may send a decimal string or a JSON number.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from b2c_payments.domain.entities import Transaction, TransactionStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InitiatePaymentBody(CamelModel):
    """Request body for POST /payments/initiate.

    Only types are checked here; business validation (E.164 format,
    positive amount, known provider) happens in the use case so that
    there is one source of truth for what a valid payment is.
    """

    recipient_phone_number: str = Field(..., description="E.164 phone number, e.g. +254712345678")
    amount: Decimal = Field(..., description="Amount to pay out, greater than zero; send a decimal string for exact values")
    currency: str = Field(..., description="Currency code, e.g. KES")
    provider: str = Field(..., description="Mobile money provider tag, e.g. MPESA")
    description: str | None = Field(default=None, description="Optional free text")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "recipientPhoneNumber": "+254712345678",
                    "amount": "500.00",
                    "currency": "KES",
                    "provider": "MOCK",
                    "description": "Salary advance",
                }
            ]
        }
    )


class ProviderStatusCallbackBody(CamelModel):
    """Request body for a provider status callback."""

    provider_transaction_id: str = Field(..., min_length=1)
    new_status: TransactionStatus
    failure_reason: str | None = None


class TransactionResponse(CamelModel):
    """A transaction as returned by the API."""

    id: str
    recipient_phone_number: str
    amount: Decimal
    currency: str
    provider: str
    description: str | None
    status: TransactionStatus
    provider_transaction_id: str | None
    failure_reason: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> TransactionResponse:
        return cls(
            id=str(transaction.id),
            recipient_phone_number=transaction.recipient.value,
            amount=transaction.amount,
            currency=transaction.currency,
            provider=transaction.provider,
            description=transaction.description,
            status=transaction.status,
            provider_transaction_id=transaction.provider_transaction_id,
            failure_reason=transaction.failure_reason,
            created_at=transaction.created_at,
            updated_at=transaction.updated_at,
        )


class ErrorResponse(CamelModel):
    detail: str
    transaction_id: str | None = None
