"""Tests for the in-memory ledger."""

import dataclasses
from decimal import Decimal

import pytest

from lendtrack.domain.errors import ConflictError, NotFoundError
from lendtrack.domain.ledger import Ledger, new_transaction_id


def test_new_transaction_ids_are_unique():
    ids = {new_transaction_id() for _ in range(100)}
    assert len(ids) == 100


def test_add_preserves_entry_order(make_txn):
    ledger = Ledger()
    first = ledger.add(make_txn("Alice"))
    second = ledger.add(make_txn("Bob"))

    assert ledger.transactions == (first, second)
    assert list(ledger) == [first, second]
    assert len(ledger) == 2


def test_add_duplicate_id(make_txn):
    ledger = Ledger([make_txn(id="same")])
    with pytest.raises(ConflictError):
        ledger.add(make_txn(id="same"))


def test_get_and_require(make_txn):
    txn = make_txn()
    ledger = Ledger([txn])

    assert ledger.get(txn.id) is txn
    assert ledger.get("missing") is None
    assert ledger.require(txn.id) is txn
    with pytest.raises(NotFoundError):
        ledger.require("missing")


def test_replace_keeps_position(make_txn):
    first, second, third = make_txn("A"), make_txn("B"), make_txn("C")
    ledger = Ledger([first, second, third])

    edited = dataclasses.replace(second, amount=Decimal("999"))
    ledger.replace(edited)

    assert ledger.transactions == (first, edited, third)
    assert ledger.position(second.id) == 2


def test_replace_unknown_transaction(make_txn):
    with pytest.raises(NotFoundError):
        Ledger().replace(make_txn())


def test_resolve_by_id_prefix_and_number(make_txn):
    alice = make_txn("Alice", id="abc123")
    bob = make_txn("Bob", id="abd456")
    ledger = Ledger([alice, bob])

    assert ledger.resolve("abc123") is alice
    assert ledger.resolve("abd") is bob
    assert ledger.resolve("2") is bob
    with pytest.raises(ConflictError):
        ledger.resolve("ab")
    with pytest.raises(NotFoundError):
        ledger.resolve("zzz")


def test_ledger_equality(make_txn):
    txn = make_txn()
    assert Ledger([txn]) == Ledger([txn])
    assert Ledger([txn]) != Ledger()
    assert "txn" not in Ledger()
    assert txn.id in Ledger([txn])
