"""Domain exceptions for b2c-payments.

Exception hierarchy:
    DomainException (base)
    ├── Validation Errors (no side effects, HTTP 400)
    │   ├── ValidationError
    │   ├── InvalidAmountError
    │   ├── InvalidPhoneNumberError
    │   ├── InvalidFieldError
    │   ├── InvalidTransactionIdError
    │   └── UnsupportedProviderError
    ├── External & Pipeline Errors
    │   ├── ExternalServiceError
    │   └── PaymentError
    ├── State & Transition Errors
    │   └── InvalidStateTransitionError
    ├── Configuration Errors
    │   ├── ConfigurationError
    │   └── DuplicateProviderError
    └── Persistence Invariant Errors
        ├── DuplicateTransactionError
        └── TransactionNotFoundError

Looking up a transaction that does not exist is NOT an error: use cases
return None for absence. TransactionNotFoundError only signals an update
against a record the store has never seen.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base exception for all domain-level errors.

    All domain exceptions inherit from this class to enable
    catching domain errors distinctly from infrastructure errors.
    """


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(DomainException):
    """Raised when a request is rejected before any side effect.

    Validation happens before persistence and before any provider call,
    so no transaction record exists when this is raised.
    """


class InvalidAmountError(ValidationError):
    """Raised when a payment amount is not a finite, strictly positive decimal."""


class InvalidPhoneNumberError(ValidationError):
    """Raised when a recipient phone number is not E.164 formatted."""


class InvalidFieldError(ValidationError):
    """Raised when a required string field is missing or blank."""


class InvalidTransactionIdError(ValidationError):
    """Raised when a transaction ID is blank."""


class UnsupportedProviderError(ValidationError):
    """Raised when a provider tag does not resolve to a registered adapter."""


# =============================================================================
# External & Pipeline Errors
# =============================================================================


class ExternalServiceError(DomainException):
    """Raised by provider adapters and notification channels on failure.

    During initiation this error is recovered into a persisted FAILED
    transaction and re-signalled to the caller as PaymentError.
    """


class PaymentError(DomainException):
    """Raised when initiation fails after persistence side effects occurred.

    A FAILED transaction record already exists when this is raised, so the
    caller must not retry blindly. The record can be inspected through
    transaction_id.
    """

    def __init__(self, message: str, transaction_id: str) -> None:
        super().__init__(message)
        self.transaction_id = transaction_id


# =============================================================================
# State & Transition Errors
# =============================================================================


class InvalidStateTransitionError(DomainException):
    """Raised when a transition violates the transaction state machine.

    Initiation transitions:
        - pending → in_progress (provider accepted the payment)
        - pending → failed
        - in_progress → failed (follow-up persistence failed)

    Provider status updates may move a transaction to any status.
    """


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DomainException):
    """Raised when the application is wired with invalid configuration."""


class DuplicateProviderError(ConfigurationError):
    """Raised when two adapters register the same provider tag.

    Tags are compared case-insensitively. Duplicates are rejected when the
    registry is built, never at request time.
    """


# =============================================================================
# Persistence Invariant Errors
# =============================================================================


class DuplicateTransactionError(DomainException):
    """Raised when create() is called with an ID that already exists.

    This is an INVARIANT VIOLATION: transaction IDs are freshly generated
    and never reused.
    """


class TransactionNotFoundError(DomainException):
    """Raised when update() targets a transaction that was never created."""
