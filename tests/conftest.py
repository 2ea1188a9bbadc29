"""Shared pytest fixtures for lendtrack tests."""

from datetime import date, datetime
from decimal import Decimal
from itertools import count

import pytest

from lendtrack.domain.entities import Currency, Direction, Transaction
from lendtrack.domain.ledger import Ledger
from lendtrack.domain.transaction import TransactionService
from lendtrack.storage.attachments import AttachmentStore
from lendtrack.storage.config import LedgerConfig
from lendtrack.storage.json_store import JSONLedgerStore

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0)


@pytest.fixture
def data_dir(tmp_path):
    """Return a temporary data directory for a ledger."""
    return tmp_path / "data"


@pytest.fixture
def ledger_config(data_dir):
    """Create a LedgerConfig rooted in a temporary directory."""
    return LedgerConfig.from_data_dir(data_dir)


@pytest.fixture
def store(ledger_config):
    """Create a JSONLedgerStore with a temporary data directory."""
    return JSONLedgerStore(ledger_config)


@pytest.fixture
def attachment_store(ledger_config):
    """Create an AttachmentStore with a fixed clock."""
    return AttachmentStore(ledger_config.attachment_dir, clock=lambda: FIXED_NOW)


@pytest.fixture
def ledger():
    """Create an empty ledger."""
    return Ledger()


@pytest.fixture
def transaction_service(ledger):
    """Create a TransactionService with a fixed clock."""
    return TransactionService(ledger, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_txn():
    """Return a factory for transactions with sensible defaults."""
    ids = count(1)

    def factory(
        counterparty="Alice",
        amount="100",
        direction=Direction.LENT,
        occurred_at=datetime(2024, 1, 1, 10, 0),
        currency=Currency.GEL,
        **kwargs,
    ):
        return Transaction(
            id=kwargs.pop("id", f"txn{next(ids):04d}"),
            counterparty=counterparty,
            amount=Decimal(amount),
            currency=currency,
            direction=direction,
            occurred_at=occurred_at,
            **kwargs,
        )

    return factory


@pytest.fixture
def sample_ledger(make_txn):
    """Create a ledger with a mix of people, directions and currencies."""
    return Ledger(
        [
            make_txn(
                "Alice",
                "100",
                Direction.LENT,
                datetime(2024, 1, 1, 10, 0),
                expected_return_date=date(2024, 1, 15),
            ),
            make_txn("Bob", "50", Direction.BORROWED, datetime(2024, 1, 3, 9, 0)),
            make_txn("Alice", "60", Direction.RETURNED, datetime(2024, 1, 10, 18, 30)),
            make_txn(
                "Carol", "200", Direction.LENT, datetime(2024, 1, 5, 12, 0), currency=Currency.USD
            ),
            make_txn("Bob", "50", Direction.REPAID, datetime(2024, 2, 1, 8, 0)),
            make_txn("Alice", "40", Direction.RETURNED, datetime(2024, 1, 20, 11, 0)),
        ]
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
