"""Mapper functions to convert between domain entities and ledger documents.

This layer isolates the on-disk JSON layout, so documents written by older
versions (without transaction IDs or deadline history) keep loading.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from lendtrack.domain import entities as domain
from lendtrack.domain.errors import ValidationError
from lendtrack.domain.ledger import Ledger, new_transaction_id


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    return date.fromisoformat(value)


def _parse_amount(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f"Invalid amount value {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise ValidationError(f"Invalid amount value {value!r}") from e
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount value {value!r}")
    return amount


def deadline_change_to_document(change: domain.DeadlineChange) -> dict[str, Any]:
    """Convert DeadlineChange entity to its document form."""
    return {
        "old_date": change.old_date.isoformat(),
        "new_date": change.new_date.isoformat(),
        "changed_at": change.changed_at.isoformat(),
    }


def deadline_change_to_domain(data: dict[str, Any]) -> domain.DeadlineChange:
    """Convert a deadline change document to a DeadlineChange entity."""
    return domain.DeadlineChange(
        old_date=date.fromisoformat(data["old_date"]),
        new_date=date.fromisoformat(data["new_date"]),
        changed_at=datetime.fromisoformat(data["changed_at"]),
    )


def transaction_to_document(txn: domain.Transaction) -> dict[str, Any]:
    """Convert Transaction entity to its document form."""
    return {
        "id": txn.id,
        "person": {"name": txn.counterparty},
        "amount": float(txn.amount),
        "money_type": txn.currency.label,
        "direction": txn.direction.value,
        "datetime": txn.occurred_at.isoformat(),
        "expected_return_date": (
            txn.expected_return_date.isoformat() if txn.expected_return_date else None
        ),
        "attachment_path": txn.attachment_path,
        "deadline_changes": [
            deadline_change_to_document(change) for change in txn.deadline_history
        ],
    }


def transaction_to_domain(data: dict[str, Any]) -> domain.Transaction:
    """Convert a transaction document to a Transaction entity.

    Documents without an ``id`` get a freshly generated one.
    """
    return domain.Transaction(
        id=data.get("id") or new_transaction_id(),
        counterparty=data["person"]["name"],
        amount=_parse_amount(data["amount"]),
        currency=domain.Currency.from_label(data["money_type"]),
        direction=domain.Direction.from_label(data["direction"]),
        occurred_at=datetime.fromisoformat(data["datetime"]),
        expected_return_date=_parse_date(data.get("expected_return_date")),
        attachment_path=data.get("attachment_path"),
        deadline_history=tuple(
            deadline_change_to_domain(change)
            for change in data.get("deadline_changes") or []
        ),
    )


def ledger_to_document(ledger: Ledger) -> dict[str, Any]:
    """Convert a ledger to the top-level document."""
    return {"transactions": [transaction_to_document(txn) for txn in ledger]}


def ledger_to_domain(document: Any) -> Ledger:
    """Convert a top-level document to a Ledger.

    Raises:
        ValidationError: If the document is malformed
    """
    if not isinstance(document, dict):
        raise ValidationError("Ledger document must be a JSON object")
    records = document.get("transactions", [])
    if not isinstance(records, list):
        raise ValidationError("'transactions' must be a list")

    try:
        return Ledger(transaction_to_domain(record) for record in records)
    except ValidationError:
        raise
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise ValidationError(f"Malformed transaction record: {e!r}") from e
