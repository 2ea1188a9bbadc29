"""In-memory ledger of transactions keyed by generated ID."""

import uuid
from typing import Iterable, Iterator, Optional

from lendtrack.domain.entities import Transaction
from lendtrack.domain.errors import (
    ConflictError,
    NotFoundError,
    duplicate_transaction_id,
    transaction_not_found,
)


def new_transaction_id() -> str:
    """Generate an identifier for a new transaction."""
    return uuid.uuid4().hex


class Ledger:
    """Ordered collection of transactions.

    Insertion order is entry order, not necessarily ``occurred_at`` order,
    since entries may be backdated. Transactions are addressed by ID so
    references survive any change in position.
    """

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._transactions: dict[str, Transaction] = {}
        for txn in transactions:
            self.add(txn)

    def add(self, txn: Transaction) -> Transaction:
        """Append a transaction.

        Raises:
            ConflictError: If a transaction with the same ID is present
        """
        if txn.id in self._transactions:
            raise ConflictError(duplicate_transaction_id(txn.id))
        self._transactions[txn.id] = txn
        return txn

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def require(self, transaction_id: str) -> Transaction:
        """Get a transaction or raise NotFoundError."""
        txn = self._transactions.get(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def replace(self, txn: Transaction) -> None:
        """Swap in an edited copy of a transaction, keeping its position."""
        self.require(txn.id)
        self._transactions[txn.id] = txn

    def position(self, transaction_id: str) -> int:
        """1-based display number of a transaction in entry order."""
        self.require(transaction_id)
        for number, txn_id in enumerate(self._transactions, start=1):
            if txn_id == transaction_id:
                return number
        raise NotFoundError(transaction_not_found(transaction_id))

    def resolve(self, reference: str) -> Transaction:
        """Find a transaction by full ID, unique ID prefix or display number."""
        reference = reference.strip()
        if reference in self._transactions:
            return self._transactions[reference]

        if reference.isdigit():
            number = int(reference)
            if 1 <= number <= len(self._transactions):
                return self.transactions[number - 1]

        matches = [txn for txn_id, txn in self._transactions.items() if txn_id.startswith(reference)]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise ConflictError(f"Transaction reference '{reference}' is ambiguous")
        raise NotFoundError(transaction_not_found(reference))

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Read-only snapshot in entry order."""
        return tuple(self._transactions.values())

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._transactions

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self.transactions == other.transactions

    def __repr__(self) -> str:
        return f"Ledger({len(self)} transactions)"
