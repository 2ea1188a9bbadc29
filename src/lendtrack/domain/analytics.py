"""Lending analytics domain service.

Every query is recomputed from the ledger on each call; nothing is cached
between mutations.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from lendtrack.domain.entities import (
    Currency,
    Direction,
    LedgerTotals,
    PersonReport,
    PersonStats,
    PromiseRate,
    Transaction,
)

# Currencies always shown in balance summaries, even before first use
DEFAULT_BALANCE_CURRENCIES = (Currency.GEL, Currency.USD, Currency.EUR)

# Outstanding amounts at or below this are treated as settled
OUTSTANDING_EPSILON = Decimal("0.01")

ZERO = Decimal("0")


class AnalyticsService:
    """Service for deriving balances and reliability figures from a ledger."""

    def __init__(self, transactions: Iterable[Transaction]):
        """Initialize analytics service.

        Args:
            transactions: Ledger (or any iterable of transactions) to analyse.
                It is re-read on every query.
        """
        self.transactions = transactions

    def _snapshot(self) -> list[Transaction]:
        return list(self.transactions)

    def get_balances_by_currency(self) -> dict[Currency, Decimal]:
        """Signed running total per currency.

        Lent and Repaid decrease the balance; Borrowed and Returned increase
        it. A negative balance means the user is owed money in that currency.
        """
        balances: dict[Currency, Decimal] = {}
        for txn in self._snapshot():
            balances[txn.currency] = balances.get(txn.currency, ZERO) + txn.signed_amount
        return balances

    def get_balance_summary(self) -> list[tuple[Currency, Decimal]]:
        """Balances for display, largest absolute value first.

        GEL, USD and EUR are always present; ties are ordered by currency name.
        """
        balances = {currency: ZERO for currency in DEFAULT_BALANCE_CURRENCIES}
        balances.update(self.get_balances_by_currency())
        return sorted(
            balances.items(), key=lambda item: (-abs(item[1]), item[0].label)
        )

    def get_totals(self) -> LedgerTotals:
        """Sum each direction across all currencies."""
        sums = {direction: ZERO for direction in Direction}
        for txn in self._snapshot():
            sums[txn.direction] += txn.amount
        return LedgerTotals(
            lent=sums[Direction.LENT],
            borrowed=sums[Direction.BORROWED],
            returned=sums[Direction.RETURNED],
            repaid=sums[Direction.REPAID],
        )

    def get_person_stats(self) -> dict[str, PersonStats]:
        """Group transactions by counterparty and accumulate their figures.

        outstanding = (lent - returned) - (borrowed - repaid); positive means
        the counterparty owes the user.
        """
        person_data: dict[str, PersonStats] = {}

        for txn in self._snapshot():
            stats = person_data.setdefault(txn.counterparty, PersonStats())
            stats.currencies.add(txn.currency)
            stats.deadline_changes_count += len(txn.deadline_history)

            if txn.direction == Direction.LENT:
                stats.lent += txn.amount
                stats.outstanding += txn.amount
                stats.lent_transactions.append(txn)
            elif txn.direction == Direction.BORROWED:
                stats.borrowed += txn.amount
                stats.outstanding -= txn.amount
            elif txn.direction == Direction.RETURNED:
                stats.returned += txn.amount
                stats.outstanding -= txn.amount
                stats.return_transactions.append(txn)
            elif txn.direction == Direction.REPAID:
                stats.repaid += txn.amount
                stats.outstanding += txn.amount

        return person_data

    def get_paid_back_ids(self) -> set[str]:
        """IDs of Lent/Borrowed transactions covered by returns.

        For each (counterparty, currency) pair all Returned and Repaid amounts
        are pooled, then loans are walked in entry order, each one consuming
        the pool if it fits. The walk stops at the first loan that does not
        fit; later, smaller loans are not considered.
        """
        groups: dict[tuple[str, Currency], list[Transaction]] = defaultdict(list)
        for txn in self._snapshot():
            groups[(txn.counterparty, txn.currency)].append(txn)

        paid_back: set[str] = set()
        for debts in groups.values():
            available = sum(
                (txn.amount for txn in debts if not txn.direction.opens_debt), ZERO
            )
            for txn in debts:
                if not txn.direction.opens_debt:
                    continue
                if available < txn.amount:
                    break
                paid_back.add(txn.id)
                available -= txn.amount

        return paid_back

    def get_people(self, search: Optional[str] = None) -> list[tuple[str, PersonStats]]:
        """People ordered by reliability (returned/lent), then name.

        Args:
            search: Optional case-insensitive name filter
        """
        def reliability(stats: PersonStats) -> Decimal:
            return stats.returned / stats.lent if stats.lent > 0 else ZERO

        people = sorted(
            self.get_person_stats().items(),
            key=lambda item: (-reliability(item[1]), item[0]),
        )
        if search:
            needle = search.lower()
            people = [(name, stats) for name, stats in people if needle in name.lower()]
        return people

    def get_person_report(self, name: str, stats: Optional[PersonStats] = None) -> PersonReport:
        """Bundle a person's stats with latency and promise-keeping figures."""
        if stats is None:
            stats = self.get_person_stats().get(name, PersonStats())
        return PersonReport(
            name=name,
            stats=stats,
            average_return_days=calculate_avg_return_time(
                stats.lent_transactions, stats.return_transactions
            ),
            promise_rate=calculate_promise_keeping_rate(
                stats.lent_transactions, stats.return_transactions
            ),
        )

    def get_person_reports(self, search: Optional[str] = None) -> list[PersonReport]:
        return [
            self.get_person_report(name, stats)
            for name, stats in self.get_people(search)
        ]

    def get_outstanding_by_person(self) -> list[tuple[str, Decimal]]:
        """Non-settled outstanding figures, largest absolute value first."""
        people = [
            (name, stats.outstanding)
            for name, stats in self.get_person_stats().items()
            if abs(stats.outstanding) > OUTSTANDING_EPSILON
        ]
        return sorted(people, key=lambda item: abs(item[1]), reverse=True)

    def get_return_rate_by_person(self) -> list[tuple[str, float]]:
        """Return rate percentage for everyone the user has lent to."""
        rates = [
            (name, stats.return_rate)
            for name, stats in self.get_person_stats().items()
            if stats.return_rate is not None
        ]
        return sorted(rates, key=lambda item: item[1], reverse=True)

    def get_balance_timeline(self) -> dict[Currency, list[tuple[int, Decimal]]]:
        """Running balance per currency in chronological order.

        Transactions are stably sorted by ``occurred_at``; each sample is the
        transaction's index in that sorted sequence and the balance of its
        currency after applying it.
        """
        result: dict[Currency, list[tuple[int, Decimal]]] = {}
        balances: dict[Currency, Decimal] = {}

        sorted_txns = sorted(self._snapshot(), key=lambda txn: txn.occurred_at)
        for index, txn in enumerate(sorted_txns):
            balance = balances.get(txn.currency, ZERO) + txn.signed_amount
            balances[txn.currency] = balance
            result.setdefault(txn.currency, []).append((index, balance))

        return result


def calculate_avg_return_time(
    lent: Sequence[Transaction], returned: Sequence[Transaction]
) -> Optional[float]:
    """Average whole days between each return and the loan it answers.

    Each return is matched to the most recent loan made at or before it.

    Returns:
        Average in days, or None when there is nothing to match
    """
    if not lent or not returned:
        return None

    total_days = 0
    count = 0
    for ret in returned:
        eligible = [loan for loan in lent if loan.occurred_at <= ret.occurred_at]
        if not eligible:
            continue
        loan = max(eligible, key=lambda txn: txn.occurred_at)
        total_days += (ret.occurred_at.date() - loan.occurred_at.date()).days
        count += 1

    if count == 0:
        return None
    return total_days / count


def calculate_promise_keeping_rate(
    lent: Sequence[Transaction], returned: Sequence[Transaction]
) -> Optional[PromiseRate]:
    """Share of loans whose first later return arrived by the expected date.

    Only loans with an expected return date count. Returns are not consumed,
    so one return can satisfy several loans.

    Returns:
        PromiseRate, or None when no loan has an expected return date
    """
    promised = [loan for loan in lent if loan.expected_return_date is not None]
    if not promised:
        return None

    kept = 0
    for loan in promised:
        later = [ret for ret in returned if ret.occurred_at >= loan.occurred_at]
        if not later:
            continue
        first_return = min(later, key=lambda txn: txn.occurred_at)
        if first_return.occurred_at.date() <= loan.expected_return_date:
            kept += 1

    return PromiseRate(kept=kept, total=len(promised))
