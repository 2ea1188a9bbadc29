"""Transaction domain service."""

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional

from lendtrack.domain.entities import (
    Currency,
    DeadlineChange,
    Direction,
    SortBy,
    Transaction,
)
from lendtrack.domain.errors import ValidationError
from lendtrack.domain.ledger import Ledger, new_transaction_id


class TransactionService:
    """Service for recording and editing transactions in a ledger."""

    def __init__(self, ledger: Ledger, clock: Callable[[], datetime] = datetime.now):
        """Initialize transaction service.

        Args:
            ledger: Ledger to operate on
            clock: Source of the current time for deadline audit entries
        """
        self.ledger = ledger
        self.clock = clock

    def create_transaction(
        self,
        counterparty: str,
        amount: Decimal,
        currency: Currency,
        direction: Direction,
        occurred_at: datetime,
        expected_return_date: Optional[date] = None,
        attachment_path: Optional[str] = None,
    ) -> Transaction:
        """Validate input and append a new transaction.

        Args:
            counterparty: Name of the other person
            amount: Positive amount
            currency: Currency of the amount
            direction: Lent, Borrowed, Returned or Repaid
            occurred_at: When the money changed hands
            expected_return_date: Optional promised return date (Lent/Borrowed only)
            attachment_path: Optional path already copied into attachment storage

        Returns:
            The stored transaction

        Raises:
            ValidationError: If the name is empty, the amount is not positive,
                or an expected return date is given for a repayment
        """
        name = (counterparty or "").strip()
        if not name:
            raise ValidationError("Counterparty name is required")

        txn = Transaction(
            id=new_transaction_id(),
            counterparty=name,
            amount=amount,
            currency=currency,
            direction=direction,
            occurred_at=occurred_at,
            expected_return_date=expected_return_date,
            attachment_path=attachment_path,
        )
        return self.add_transaction(txn)

    def add_transaction(self, txn: Transaction) -> Transaction:
        """Append an already-built transaction."""
        return self.ledger.add(txn)

    def edit_expected_return_date(
        self, transaction_id: str, new_date: date
    ) -> Optional[DeadlineChange]:
        """Move a transaction's expected return date and record the change.

        Args:
            transaction_id: Transaction ID
            new_date: New expected return date

        Returns:
            The recorded DeadlineChange, or None if the date is unchanged

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If the transaction has no expected return date
        """
        txn = self.ledger.require(transaction_id)
        if not txn.direction.opens_debt:
            raise ValidationError(
                f"Transaction {transaction_id} is {txn.direction.value} and has no deadline"
            )
        if txn.expected_return_date is None:
            raise ValidationError(
                f"Transaction {transaction_id} has no expected return date to change"
            )
        if txn.expected_return_date == new_date:
            return None

        change = DeadlineChange(
            old_date=txn.expected_return_date,
            new_date=new_date,
            changed_at=self.clock(),
        )
        self.ledger.replace(
            dataclasses.replace(
                txn,
                expected_return_date=new_date,
                deadline_history=txn.deadline_history + (change,),
            )
        )
        return change

    def set_attachment(
        self, transaction_id: str, attachment_path: Optional[str]
    ) -> Transaction:
        """Replace or clear (with None) a transaction's attachment.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.ledger.require(transaction_id)
        updated = dataclasses.replace(txn, attachment_path=attachment_path)
        self.ledger.replace(updated)
        return updated

    def list_transactions(
        self,
        search: Optional[str] = None,
        sort_by: SortBy = SortBy.DATE_NEWEST,
    ) -> list[Transaction]:
        """List transactions matching a search, in the requested order.

        The search is case-insensitive and matches the counterparty name,
        the amount formatted with two decimals, or the direction name.
        """
        transactions = list(self.ledger)
        if search:
            needle = search.lower()
            transactions = [
                txn
                for txn in transactions
                if needle in txn.counterparty.lower()
                or needle in f"{txn.amount:.2f}"
                or needle in txn.direction.value.lower()
            ]

        if sort_by == SortBy.DATE_NEWEST:
            transactions.sort(key=lambda txn: txn.occurred_at, reverse=True)
        elif sort_by == SortBy.DATE_OLDEST:
            transactions.sort(key=lambda txn: txn.occurred_at)
        elif sort_by == SortBy.AMOUNT_HIGHEST:
            transactions.sort(key=lambda txn: txn.amount, reverse=True)
        elif sort_by == SortBy.AMOUNT_LOWEST:
            transactions.sort(key=lambda txn: txn.amount)
        elif sort_by == SortBy.PERSON:
            transactions.sort(key=lambda txn: txn.counterparty)

        return transactions
