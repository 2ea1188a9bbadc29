"""Domain model entities for lendtrack.

These are pure data classes representing lending concepts, independent of
the on-disk document layout. The storage mappers translate between the two,
so the JSON schema can evolve without touching business logic.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from lendtrack.domain.errors import (
    ValidationError,
    amount_not_storable,
    amount_too_large,
    expected_date_not_allowed,
    non_positive_amount,
)

# Ledger documents hold amounts as JSON numbers (doubles).
MAX_AMOUNT = Decimal("1000000000000")


class Currency(Enum):
    """Currencies a transaction can be recorded in."""

    GEL = "₾"
    USD = "$"
    EUR = "€"
    GBP = "£"
    RUB = "₽"
    OTHER = "¤"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Name as stored in ledger documents."""
        return "Other" if self is Currency.OTHER else self.name

    @classmethod
    def from_label(cls, label: str) -> "Currency":
        for currency in cls:
            if currency.label.lower() == label.strip().lower():
                return currency
        raise ValidationError(f"Unknown currency '{label}'")


class Direction(Enum):
    """Which way money moved between the user and a counterparty."""

    LENT = "Lent"
    BORROWED = "Borrowed"
    RETURNED = "Returned"
    REPAID = "Repaid"

    @classmethod
    def from_label(cls, label: str) -> "Direction":
        for direction in cls:
            if direction.value.lower() == label.strip().lower():
                return direction
        raise ValidationError(f"Unknown direction '{label}'")

    @property
    def opens_debt(self) -> bool:
        """True for Lent/Borrowed, the only directions with a return date."""
        return self in (Direction.LENT, Direction.BORROWED)

    @property
    def balance_sign(self) -> int:
        """Sign applied to the amount in per-currency balances."""
        return -1 if self in (Direction.LENT, Direction.REPAID) else 1


@dataclass(frozen=True)
class DeadlineChange:
    """Audit entry for one edit of an expected return date."""

    old_date: date
    new_date: date
    changed_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: str
    counterparty: str
    amount: Decimal
    currency: Currency
    direction: Direction
    occurred_at: datetime
    expected_return_date: Optional[date] = None
    attachment_path: Optional[str] = None
    deadline_history: tuple[DeadlineChange, ...] = ()

    def __post_init__(self):
        if not self.counterparty or not self.counterparty.strip():
            raise ValidationError("Counterparty name is required")
        if not self.amount.is_finite() or self.amount <= 0:
            raise ValidationError(non_positive_amount(self.amount))
        if self.amount > MAX_AMOUNT:
            raise ValidationError(amount_too_large(self.amount, MAX_AMOUNT))
        if Decimal(repr(float(self.amount))) != self.amount:
            raise ValidationError(amount_not_storable(self.amount))
        if self.expected_return_date is not None and not self.direction.opens_debt:
            raise ValidationError(expected_date_not_allowed(self.direction.value))

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the balance sign of its direction applied."""
        return self.amount * self.direction.balance_sign


@dataclass
class PersonStats:
    """Aggregated figures for one counterparty, rebuilt on every query."""

    lent: Decimal = Decimal("0")
    borrowed: Decimal = Decimal("0")
    returned: Decimal = Decimal("0")
    repaid: Decimal = Decimal("0")
    outstanding: Decimal = Decimal("0")
    lent_transactions: list[Transaction] = field(default_factory=list)
    return_transactions: list[Transaction] = field(default_factory=list)
    currencies: set[Currency] = field(default_factory=set)
    deadline_changes_count: int = 0

    @property
    def return_rate(self) -> Optional[float]:
        """Percentage of lent money returned, None when nothing was lent."""
        if self.lent <= 0:
            return None
        return float(self.returned / self.lent) * 100.0

    @property
    def display_currency(self) -> Currency:
        """The only currency used with this person, USD when mixed."""
        if len(self.currencies) == 1:
            return next(iter(self.currencies))
        return Currency.USD


@dataclass(frozen=True)
class LedgerTotals:
    """Totals per direction summed across every currency."""

    lent: Decimal
    borrowed: Decimal
    returned: Decimal
    repaid: Decimal


@dataclass(frozen=True)
class PromiseRate:
    """Count of loans repaid by their expected date."""

    kept: int
    total: int

    @property
    def percentage(self) -> float:
        return (self.kept / self.total) * 100.0


@dataclass(frozen=True)
class PersonReport:
    """Per-person statistics plus the derived reliability figures."""

    name: str
    stats: PersonStats
    average_return_days: Optional[float]
    promise_rate: Optional[PromiseRate]


class SortBy(Enum):
    """Sort orders for transaction listings."""

    DATE_NEWEST = "date-newest"
    DATE_OLDEST = "date-oldest"
    AMOUNT_HIGHEST = "amount-highest"
    AMOUNT_LOWEST = "amount-lowest"
    PERSON = "person"
