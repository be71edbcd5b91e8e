from __future__ import annotations

import re
from dataclasses import dataclass

from b2c_payments.domain.exceptions import InvalidPhoneNumberError

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")


@dataclass(frozen=True, slots=True)
class PhoneNumber:
    """Recipient phone number in E.164 format.

      - Leading/trailing whitespace is trimmed (normalization)
      - Must start with '+' followed by 2-15 digits, first digit non-zero
    """

    value: str

    def __post_init__(self) -> None:
        normalized = self.value.strip()

        if normalized != self.value:
            object.__setattr__(self, "value", normalized)

        if not normalized:
            raise InvalidPhoneNumberError("Recipient phone number is required")

        if not E164_PATTERN.match(normalized):
            raise InvalidPhoneNumberError(f"Invalid phone number format: {normalized!r}")

    def masked(self) -> str:
        """Return the number with the middle digits hidden, for logs.

        Example: +254712345678 -> +254*****5678
        """
        if len(self.value) <= 8:
            return "*" * len(self.value)
        hidden = len(self.value) - 8
        return f"{self.value[:4]}{'*' * hidden}{self.value[-4:]}"

    def __str__(self) -> str:
        return self.value
