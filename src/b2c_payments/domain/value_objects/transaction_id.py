from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4

from b2c_payments.domain.exceptions import InvalidTransactionIdError


@dataclass(frozen=True, slots=True)
class TransactionId:
    """Value object for transaction identifiers.

    IDs are opaque strings. New IDs are UUID4 strings generated before any
    external call; IDs received from callers are only checked for blankness
    so that an unknown ID resolves to "not found" rather than an error.
    """

    value: str

    def __post_init__(self) -> None:
        normalized = self.value.strip()

        if normalized != self.value:
            object.__setattr__(self, "value", normalized)

        if not normalized:
            raise InvalidTransactionIdError("Transaction ID cannot be empty")

    @classmethod
    def generate(cls) -> TransactionId:
        """Generate a new unique TransactionId."""
        return cls(value=str(uuid4()))

    def __str__(self) -> str:
        return self.value
