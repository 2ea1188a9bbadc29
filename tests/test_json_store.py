"""Tests for the JSON ledger store."""

import json
import os
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from lendtrack.domain.entities import Currency, Direction
from lendtrack.domain.errors import StorageStep, StorageError
from lendtrack.domain.ledger import Ledger
from lendtrack.storage.backups import BackupRotation, is_backup_name
from lendtrack.storage.config import LedgerConfig
from lendtrack.storage.json_store import JSONLedgerStore
from lendtrack.storage.mappers import ledger_to_document


def _backups(config):
    return sorted(p.name for p in config.backup_dir.iterdir() if is_backup_name(p.name))


def _ticking_clock(start=datetime(2024, 1, 1, 12, 0, 0)):
    """Clock that advances one second per call."""
    state = {"now": start}

    def clock():
        state["now"] += timedelta(seconds=1)
        return state["now"]

    return clock


class TestLoad:
    """Tests for loading and recovery."""

    def test_load_missing_everything_returns_empty(self, store):
        assert store.load() == Ledger()

    def test_save_then_load_round_trip(self, store, sample_ledger):
        store.save(sample_ledger)
        loaded = store.load()

        assert loaded == sample_ledger
        assert [txn.id for txn in loaded] == [txn.id for txn in sample_ledger]

    def test_round_trip_keeps_deadline_history(self, store, transaction_service, ledger):
        txn = transaction_service.create_transaction(
            counterparty="Nino",
            amount=Decimal("75.25"),
            currency=Currency.EUR,
            direction=Direction.LENT,
            occurred_at=datetime(2024, 2, 2, 8, 15),
            expected_return_date=date(2024, 3, 1),
        )
        transaction_service.edit_expected_return_date(txn.id, date(2024, 4, 1))
        store.save(ledger)

        assert store.load() == ledger

    def test_corrupted_primary_recovers_from_backup(self, store, ledger_config, sample_ledger):
        store.save(sample_ledger)
        good_content = ledger_config.primary_path.read_text(encoding="utf-8")
        ledger_config.primary_path.write_text("{ not json", encoding="utf-8")

        loaded = store.load()

        assert loaded == sample_ledger
        assert ledger_config.primary_path.read_text(encoding="utf-8") == good_content

    def test_missing_primary_recovers_from_backup(self, store, ledger_config, sample_ledger):
        store.save(sample_ledger)
        ledger_config.primary_path.unlink()

        assert store.load() == sample_ledger
        assert ledger_config.primary_path.exists()

    def test_recovery_prefers_greatest_backup_name(self, ledger_config, make_txn):
        ledger_config.backup_dir.mkdir(parents=True)
        older = Ledger([make_txn("Old")])
        newer = Ledger([make_txn("New")])
        (ledger_config.backup_dir / "transactions_backup_20240101_120000.json").write_text(
            json.dumps(ledger_to_document(newer)), encoding="utf-8"
        )
        (ledger_config.backup_dir / "transactions_backup_20231231_235959.json").write_text(
            json.dumps(ledger_to_document(older)), encoding="utf-8"
        )

        assert JSONLedgerStore(ledger_config).load() == newer

    def test_recovery_skips_unparsable_backups(self, ledger_config, make_txn):
        ledger_config.backup_dir.mkdir(parents=True)
        good = Ledger([make_txn("Good")])
        (ledger_config.backup_dir / "transactions_backup_20240101_120000.json").write_text(
            json.dumps(ledger_to_document(good)), encoding="utf-8"
        )
        (ledger_config.backup_dir / "transactions_backup_20240102_120000.json").write_text(
            "garbage", encoding="utf-8"
        )

        assert JSONLedgerStore(ledger_config).load() == good

    def test_unrelated_files_are_ignored(self, ledger_config, make_txn):
        ledger_config.backup_dir.mkdir(parents=True)
        (ledger_config.backup_dir / "notes.json").write_text(
            json.dumps({"transactions": []}), encoding="utf-8"
        )
        assert JSONLedgerStore(ledger_config).load() == Ledger()
        assert not ledger_config.primary_path.exists()

    def test_no_parsable_backup_returns_empty(self, ledger_config):
        ledger_config.backup_dir.mkdir(parents=True)
        ledger_config.primary_path.write_text("[", encoding="utf-8")
        (ledger_config.backup_dir / "transactions_backup_20240101_120000.json").write_text(
            "also broken", encoding="utf-8"
        )
        assert JSONLedgerStore(ledger_config).load() == Ledger()

    def test_load_legacy_document(self, store, ledger_config):
        ledger_config.primary_path.parent.mkdir(parents=True)
        ledger_config.primary_path.write_text(
            json.dumps(
                {
                    "transactions": [
                        {
                            "person": {"name": "Giorgi"},
                            "amount": 20.0,
                            "money_type": "USD",
                            "direction": "Returned",
                            "datetime": "2024-05-01T09:00:00",
                            "expected_return_date": None,
                            "attachment_path": None,
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )

        ledger = store.load()
        assert len(ledger) == 1
        assert ledger.transactions[0].counterparty == "Giorgi"
        assert ledger.transactions[0].direction is Direction.RETURNED

    @pytest.mark.parametrize(
        "amount", ["0.01", "12345678901.23", "999999999999.99", "1000000000000.00"]
    )
    def test_boundary_amounts_round_trip(self, store, make_txn, amount):
        ledger = Ledger([make_txn("Nino", amount)])
        store.save(ledger)

        loaded = store.load()

        assert loaded == ledger
        assert loaded.transactions[0].amount == Decimal(amount)

    def test_deeply_nested_primary_returns_empty(self, store, ledger_config):
        ledger_config.primary_path.parent.mkdir(parents=True)
        ledger_config.primary_path.write_text("[" * 100000, encoding="utf-8")

        assert store.load() == Ledger()

    def test_deeply_nested_primary_recovers_from_backup(
        self, store, ledger_config, sample_ledger
    ):
        store.save(sample_ledger)
        ledger_config.primary_path.write_text("[" * 100000, encoding="utf-8")

        assert store.load() == sample_ledger

    def test_inaccessible_primary_falls_back_to_backup(
        self, store, ledger_config, sample_ledger, monkeypatch
    ):
        store.save(sample_ledger)
        real_exists = Path.exists

        def exists(path, *args, **kwargs):
            if path == ledger_config.primary_path:
                raise PermissionError(13, "Permission denied", str(path))
            return real_exists(path, *args, **kwargs)

        monkeypatch.setattr(Path, "exists", exists)

        assert store.load() == sample_ledger

    def test_unlistable_backup_dir_returns_empty(self, store, ledger_config, monkeypatch):
        ledger_config.primary_path.parent.mkdir(parents=True)
        ledger_config.primary_path.write_text("{ not json", encoding="utf-8")

        def list_backups():
            raise PermissionError(13, "Permission denied", str(ledger_config.backup_dir))

        monkeypatch.setattr(store.backups, "list_backups", list_backups)

        assert store.load() == Ledger()


class TestSave:
    """Tests for saving and backup rotation."""

    def test_first_save_writes_one_backup(self, store, ledger_config, sample_ledger):
        store.save(sample_ledger)

        backups = _backups(ledger_config)
        assert len(backups) == 1
        content = ledger_config.primary_path.read_text(encoding="utf-8")
        assert (ledger_config.backup_dir / backups[0]).read_text(encoding="utf-8") == content

    def test_save_writes_pre_and_post_backups(self, ledger_config, make_txn):
        store = JSONLedgerStore(ledger_config, clock=_ticking_clock())
        ledger = Ledger([make_txn("First")])
        store.save(ledger)
        before = ledger_config.primary_path.read_text(encoding="utf-8")

        ledger.add(make_txn("Second"))
        store.save(ledger)
        after = ledger_config.primary_path.read_text(encoding="utf-8")

        backups = _backups(ledger_config)
        assert len(backups) == 3
        contents = [
            (ledger_config.backup_dir / name).read_text(encoding="utf-8") for name in backups
        ]
        assert contents == [before, before, after]

    def test_document_layout(self, store, ledger_config, sample_ledger):
        store.save(sample_ledger)
        document = json.loads(ledger_config.primary_path.read_text(encoding="utf-8"))

        assert list(document) == ["transactions"]
        assert len(document["transactions"]) == len(sample_ledger)

    def test_backup_names_do_not_collide_with_frozen_clock(self, ledger_config, make_txn):
        frozen = datetime(2024, 1, 1, 12, 0, 0)
        store = JSONLedgerStore(ledger_config, clock=lambda: frozen)
        ledger = Ledger([make_txn()])

        store.save(ledger)
        store.save(ledger)

        backups = _backups(ledger_config)
        assert len(backups) == 3
        assert backups[0] == "transactions_backup_20240101_120000_000000.json"
        assert backups[1] == "transactions_backup_20240101_120000_000000_000001.json"

    def test_pruning_keeps_most_recent(self, tmp_path, make_txn):
        config = LedgerConfig.from_data_dir(tmp_path / "data")
        store = JSONLedgerStore(config, clock=_ticking_clock())
        ledger = Ledger()

        written = []
        for i in range(config.max_backups + 5):
            ledger.add(make_txn(f"Person {i}"))
            store.save(ledger)
            written = sorted(set(written) | set(_backups(config)))

        remaining = _backups(config)
        assert len(remaining) == config.max_backups
        assert remaining == written[-config.max_backups:]

    def test_pruning_uses_modification_time(self, ledger_config):
        ledger_config.backup_dir.mkdir(parents=True)
        rotation = BackupRotation(ledger_config.backup_dir, max_backups=2)
        names = [
            "transactions_backup_20240101_000001.json",
            "transactions_backup_20240101_000002.json",
            "transactions_backup_20240101_000003.json",
        ]
        for offset, name in enumerate(names):
            path = ledger_config.backup_dir / name
            path.write_text("{}", encoding="utf-8")
            mtime = 1_700_000_000 + offset * 10
            os.utime(path, (mtime, mtime))
        # Make the oldest name the most recently modified
        os.utime(ledger_config.backup_dir / names[0], (1_800_000_000, 1_800_000_000))
        (ledger_config.backup_dir / "keep-me.txt").write_text("x", encoding="utf-8")

        removed = rotation.prune()

        assert [path.name for path in removed] == [names[1]]
        assert (ledger_config.backup_dir / "keep-me.txt").exists()

    def test_small_retention(self, tmp_path, make_txn):
        config = LedgerConfig.from_data_dir(tmp_path / "data", max_backups=3)
        store = JSONLedgerStore(config, clock=_ticking_clock())
        ledger = Ledger([make_txn()])
        for _ in range(4):
            store.save(ledger)
        assert len(_backups(config)) == 3

    def test_write_failure_reports_step_and_keeps_ledger(
        self, store, ledger_config, sample_ledger, monkeypatch
    ):
        def write_atomic(path, content):
            raise OSError(28, "No space left on device", str(path))

        monkeypatch.setattr(store, "_write_atomic", write_atomic)
        before = sample_ledger.transactions

        with pytest.raises(StorageError) as exc_info:
            store.save(sample_ledger)

        assert exc_info.value.step is StorageStep.WRITE_PRIMARY
        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.path == str(ledger_config.primary_path)
        assert sample_ledger.transactions == before
        assert not ledger_config.primary_path.exists()

    def test_post_save_backup_failure_reports_step(
        self, ledger_config, sample_ledger, make_txn, monkeypatch
    ):
        store = JSONLedgerStore(ledger_config, clock=_ticking_clock())
        store.save(sample_ledger)
        real_next_path = store.backups.next_path
        calls = []

        def next_path():
            calls.append(1)
            if len(calls) == 2:
                raise PermissionError(13, "Permission denied", str(ledger_config.backup_dir))
            return real_next_path()

        monkeypatch.setattr(store.backups, "next_path", next_path)
        sample_ledger.add(make_txn("Dato"))
        before = sample_ledger.transactions

        with pytest.raises(StorageError) as exc_info:
            store.save(sample_ledger)

        assert exc_info.value.step is StorageStep.BACKUP_CURRENT
        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert sample_ledger.transactions == before
        # The primary write happened before the failing step
        assert store.load() == sample_ledger

    def test_prune_failure_reports_step(
        self, store, ledger_config, sample_ledger, monkeypatch
    ):
        def prune():
            raise OSError(16, "Device or resource busy", str(ledger_config.backup_dir))

        monkeypatch.setattr(store.backups, "prune", prune)
        before = sample_ledger.transactions

        with pytest.raises(StorageError) as exc_info:
            store.save(sample_ledger)

        assert exc_info.value.step is StorageStep.PRUNE_BACKUPS
        assert isinstance(exc_info.value.__cause__, OSError)
        assert "prune old backups" in str(exc_info.value)
        assert sample_ledger.transactions == before
        assert len(_backups(ledger_config)) == 1

    def test_backup_dir_failure(self, ledger_config, sample_ledger):
        ledger_config.backup_dir.parent.mkdir(parents=True)
        ledger_config.backup_dir.write_text("not a directory", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            JSONLedgerStore(ledger_config).save(sample_ledger)

        assert exc_info.value.step is StorageStep.BACKUP_PREVIOUS
        assert "backup previous ledger" in str(exc_info.value)
        assert not ledger_config.primary_path.exists()


def test_backup_name_pattern():
    assert is_backup_name("transactions_backup_20240101_120000.json")
    assert is_backup_name("transactions_backup_20240101_120000_123456.json")
    assert is_backup_name("transactions_backup_20240101_120000_123456_000002.json")
    assert not is_backup_name("transactions_backup_20240101.json")
    assert not is_backup_name("transactions.json")
    assert not is_backup_name("transactions_backup_20240101_120000.json.tmp")


def test_config_rejects_zero_retention(tmp_path):
    with pytest.raises(ValueError):
        LedgerConfig.from_data_dir(tmp_path, max_backups=0)
