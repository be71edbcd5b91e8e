"""Transaction entity with state machine behavior.

A Transaction tracks one B2C mobile-money payment attempt from creation to
terminal status.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from b2c_payments.domain.exceptions import (
    InvalidAmountError,
    InvalidFieldError,
    InvalidStateTransitionError,
)
from b2c_payments.domain.value_objects import PhoneNumber, TransactionId

if TYPE_CHECKING:
    from datetime import datetime

DEFAULT_PROVIDER_FAILURE_REASON = "Failure reported by provider"


class TransactionStatus(Enum):
    """Transaction lifecycle states.

    PENDING and IN_PROGRESS are transient. SUCCESS, FAILED and CANCELLED are
    terminal for the initiation flow, but a provider status update may still
    move a transaction out of them.
    """

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True, slots=True)
class Transaction:
    """Transaction entity with state machine behavior.

    Transaction is immutable (frozen dataclass). All state-changing methods
    return a new Transaction instance with updated_at set to the given time.

    Invariants:
        - provider_transaction_id is set iff the provider accepted initiation
        - failure_reason is set iff status is FAILED

    State machine:
        - pending → in_progress (mark_in_progress)
        - pending | in_progress → failed (mark_failed)
        - any → any (apply_provider_status, out-of-band provider update)
    """

    id: TransactionId
    recipient: PhoneNumber
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
    def create(
        cls,
        recipient_phone_number: str,
        amount: Decimal,
        currency: str,
        provider: str,
        description: str | None,
        now: datetime,
        transaction_id: TransactionId | None = None,
    ) -> Transaction:
        """Factory method to create a PENDING Transaction with validation.

        Args:
            recipient_phone_number: E.164 phone number of the recipient.
            amount: Amount to pay out; must be finite and greater than 0.
            currency: Currency code (e.g. KES); normalized to upper case.
            provider: Canonical provider tag of the resolved adapter.
            description: Optional free-text description.
            now: Creation timestamp (UTC).
            transaction_id: Pre-allocated ID; generated when omitted.

        Returns:
            A new Transaction in PENDING state.

        Raises:
            InvalidPhoneNumberError: If the phone number is not E.164.
            InvalidAmountError: If amount is not a positive finite decimal.
            InvalidFieldError: If currency or provider is blank.
        """
        amount = validate_amount(amount)
        recipient = PhoneNumber(value=recipient_phone_number)
        currency = _require_text(currency, "Currency").upper()
        provider = _require_text(provider, "Mobile money provider")

        if description is not None:
            description = description.strip() or None

        return cls(
            id=transaction_id or TransactionId.generate(),
            recipient=recipient,
            amount=amount,
            currency=currency,
            provider=provider,
            description=description,
            status=TransactionStatus.PENDING,
            provider_transaction_id=None,
            failure_reason=None,
            created_at=now,
            updated_at=now,
        )

    def mark_in_progress(self, provider_transaction_id: str, now: datetime) -> Transaction:
        """Record that the provider accepted the payment.

        Raises:
            InvalidStateTransitionError: If not in PENDING state.
            InvalidFieldError: If provider_transaction_id is blank.
        """
        if self.status != TransactionStatus.PENDING:
            raise InvalidStateTransitionError(
                f"Cannot mark transaction in progress in state {self.status.value}; "
                f"must be in {TransactionStatus.PENDING.value} state"
            )
        provider_transaction_id = _require_text(
            provider_transaction_id, "Provider transaction ID"
        )

        return replace(
            self,
            status=TransactionStatus.IN_PROGRESS,
            provider_transaction_id=provider_transaction_id,
            updated_at=now,
        )

    def mark_failed(self, reason: str, now: datetime) -> Transaction:
        """Mark the transaction as failed during initiation.

        Raises:
            InvalidStateTransitionError: If not PENDING or IN_PROGRESS.
            InvalidFieldError: If reason is blank.
        """
        if self.status not in (TransactionStatus.PENDING, TransactionStatus.IN_PROGRESS):
            raise InvalidStateTransitionError(
                f"Cannot fail transaction in state {self.status.value}; "
                f"must be in {TransactionStatus.PENDING.value} or "
                f"{TransactionStatus.IN_PROGRESS.value} state"
            )
        reason = _require_text(reason, "Failure reason")

        return replace(
            self,
            status=TransactionStatus.FAILED,
            failure_reason=reason,
            updated_at=now,
        )

    def apply_provider_status(
        self,
        status: TransactionStatus,
        failure_reason: str | None,
        now: datetime,
    ) -> Transaction:
        """Apply an out-of-band status reported by the provider.

        No state is terminal against provider updates. The failure reason is
        kept only for FAILED; a FAILED update without a reason gets a default
        one, any other status clears it.
        """
        if status == TransactionStatus.FAILED:
            reason = (failure_reason or "").strip() or DEFAULT_PROVIDER_FAILURE_REASON
        else:
            reason = None

        return replace(self, status=status, failure_reason=reason, updated_at=now)


def validate_amount(amount: Decimal) -> Decimal:
    """Return amount as a Decimal, or raise InvalidAmountError.

    Floats are rejected to avoid binary rounding of monetary values.
    """
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
        raise InvalidAmountError(f"Amount must be a decimal, got {type(amount).__name__}")

    amount = Decimal(amount)
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError(f"Amount must be greater than zero, got {amount}")
    return amount


def _require_text(value: str | None, field_name: str) -> str:
    normalized = (value or "").strip()
    if not normalized:
        raise InvalidFieldError(f"{field_name} is required")
    return normalized
