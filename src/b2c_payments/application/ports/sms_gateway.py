from __future__ import annotations

from abc import ABC, abstractmethod


class SmsGateway(ABC):
    """Port for the recipient notification channel."""

    @abstractmethod
    def send(self, phone_number: str, message: str) -> None:
        """Send a text message to an E.164 phone number.

        Raises:
            ExternalServiceError: If the message could not be delivered.
        """
