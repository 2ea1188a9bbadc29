"""Shared domain error messages and error types."""

from enum import Enum
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested transaction does not exist in the ledger."""


class ConflictError(DomainError):
    """Domain conflict, such as a duplicate transaction ID."""


class StorageStep(Enum):
    """Storage operation step that can fail independently."""

    BACKUP_PREVIOUS = "backup previous ledger"
    WRITE_PRIMARY = "write primary ledger"
    BACKUP_CURRENT = "backup saved ledger"
    PRUNE_BACKUPS = "prune old backups"
    COPY_ATTACHMENT = "copy attachment"


class StorageError(DomainError):
    """A persistence step failed; the in-memory ledger is unaffected."""

    def __init__(self, step: StorageStep, message: str, path: Optional[str] = None):
        super().__init__(f"Failed to {step.value}: {message}")
        self.step = step
        self.path = path


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def duplicate_transaction_id(transaction_id: str) -> str:
    """Return message for duplicate transaction ID."""
    return f"Transaction with id '{transaction_id}' already exists in the ledger"


def non_positive_amount(amount) -> str:
    """Return message for zero or negative amounts."""
    return f"Amount must be positive, got {amount}"


def expected_date_not_allowed(direction_name: str) -> str:
    """Return message when an expected return date is set on a repayment."""
    return (
        f"Expected return date can only be set on Lent or Borrowed "
        f"transactions, not {direction_name}"
    )


def amount_too_large(amount, limit) -> str:
    """Return message for amounts above the supported maximum."""
    return f"Amount {amount} exceeds the maximum of {limit}"


def amount_not_storable(amount) -> str:
    """Return message for amounts the ledger document cannot hold exactly."""
    return f"Amount {amount} has too many significant digits to be stored exactly"
