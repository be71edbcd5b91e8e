from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from b2c_payments.domain.entities import Transaction, TransactionStatus


class MobileMoneyProvider(ABC):
    """Port for a mobile-money provider adapter.

    Each adapter wraps one provider's B2C payout API. Wire protocols are
    opaque to the application; adapters translate every provider failure
    into ExternalServiceError.

    Contract:
    - provider_type is a stable, non-blank tag (matched case-insensitively)
    - initiate() returns the provider-assigned transaction ID
    - check_status() reports the provider's view of a payment
    - Adapters own their network timeouts
    """

    @property
    @abstractmethod
    def provider_type(self) -> str:
        """Provider tag, e.g. 'MPESA' or 'MOCK'."""

    @abstractmethod
    def initiate(self, transaction: Transaction) -> str:
        """Submit the payout to the provider.

        Args:
            transaction: The persisted PENDING transaction.

        Returns:
            The provider transaction ID.

        Raises:
            ExternalServiceError: If the provider rejects or cannot be reached.
        """

    @abstractmethod
    def check_status(self, provider_transaction_id: str) -> TransactionStatus:
        """Query the provider for the current status of a payout.

        Raises:
            ExternalServiceError: If the provider cannot be reached.
        """
