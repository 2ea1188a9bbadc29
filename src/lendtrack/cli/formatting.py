"""Display helpers shared by CLI commands."""

from decimal import Decimal
from typing import Optional

from lendtrack.domain.entities import Currency, Transaction
from lendtrack.domain.ledger import Ledger


def format_money(amount: Decimal, currency: Currency) -> str:
    return f"{currency.symbol}{amount:,.2f}"


def format_optional(value: Optional[float], fmt: str, suffix: str = "") -> str:
    """Format a derived figure, or N/A when it isn't computable."""
    if value is None:
        return "N/A"
    return f"{value:{fmt}}{suffix}"


def format_transaction(ledger: Ledger, txn: Transaction, paid_back: bool = False) -> str:
    """One-line summary of a transaction, as used in listings."""
    parts = [
        f"#{ledger.position(txn.id)}",
        txn.id[:8],
        txn.counterparty,
        format_money(txn.amount, txn.currency),
        txn.direction.value,
        txn.occurred_at.strftime("%Y-%m-%d %H:%M"),
    ]
    if txn.expected_return_date is not None:
        expected = f"expected {txn.expected_return_date:%Y-%m-%d}"
        if txn.deadline_history:
            expected += f" ({len(txn.deadline_history)}x)"
        parts.append(expected)
    if txn.attachment_path:
        parts.append("[attachment]")
    if paid_back:
        parts.append("[paid back]")
    return "  ".join(parts)
