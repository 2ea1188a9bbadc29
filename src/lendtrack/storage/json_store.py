"""JSON file ledger store with backup rotation and recovery."""

import json
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from lendtrack.domain.errors import DomainError, StorageStep, StorageError
from lendtrack.domain.ledger import Ledger
from lendtrack.storage.backups import BackupRotation
from lendtrack.storage.base import LedgerStore
from lendtrack.storage.config import LedgerConfig
from lendtrack.storage.mappers import ledger_to_document, ledger_to_domain

logger = logging.getLogger(__name__)


class JSONLedgerStore(LedgerStore):
    """Ledger store backed by a single JSON document.

    Every save snapshots the previous document, rewrites the primary file,
    snapshots the new document, then prunes old snapshots. Two backups are
    therefore written per save.
    """

    def __init__(self, config: LedgerConfig, clock: Callable[[], datetime] = datetime.now):
        """Initialize JSON ledger store.

        Args:
            config: Storage locations and retention
            clock: Source of timestamps for backup names
        """
        self.config = config
        self.backups = BackupRotation(config.backup_dir, config.max_backups, clock)

    @property
    def primary_path(self) -> Path:
        return self.config.primary_path

    def load(self) -> Ledger:
        """Load the ledger, recovering from backups if needed.

        If the primary file is missing or unparsable, backups are tried from
        the newest name down. The first one that parses is returned and
        copied over the primary file. With nothing usable, unreadable
        directories included, an empty ledger is returned. Never raises.
        """
        try:
            primary_exists = self.primary_path.exists()
        except OSError as e:
            logger.error("Cannot access ledger %s: %s", self.primary_path, e)
            primary_exists = False

        if primary_exists:
            ledger = self._read_ledger(self.primary_path)
            if ledger is not None:
                return ledger
            logger.warning(
                "Main ledger %s is corrupted, attempting to restore from backup",
                self.primary_path,
            )

        try:
            backups = self.backups.list_backups()
        except OSError as e:
            logger.error("Cannot list backups in %s: %s", self.config.backup_dir, e)
            backups = []

        for backup in reversed(backups):
            ledger = self._read_ledger(backup)
            if ledger is None:
                continue
            logger.warning("Restoring ledger from backup %s", backup)
            try:
                self.primary_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(backup, self.primary_path)
            except OSError as e:
                logger.error("Could not restore %s from %s: %s", self.primary_path, backup, e)
            return ledger

        logger.info("No usable ledger found at %s, starting empty", self.primary_path)
        return Ledger()

    def save(self, ledger: Ledger) -> None:
        """Persist the ledger and rotate backups.

        Raises:
            StorageError: With ``step`` set to the step that failed
        """
        content = json.dumps(ledger_to_document(ledger), indent=2, ensure_ascii=False)

        with _save_step(StorageStep.BACKUP_PREVIOUS):
            self.config.backup_dir.mkdir(parents=True, exist_ok=True)
            if self.primary_path.exists():
                backup = self.backups.next_path()
                shutil.copyfile(self.primary_path, backup)
                logger.debug("Backed up previous ledger to %s", backup)

        with _save_step(StorageStep.WRITE_PRIMARY):
            self._write_atomic(self.primary_path, content)

        with _save_step(StorageStep.BACKUP_CURRENT):
            backup = self.backups.next_path()
            backup.write_text(content, encoding="utf-8")
            logger.debug("Backed up saved ledger to %s", backup)

        with _save_step(StorageStep.PRUNE_BACKUPS):
            self.backups.prune()

    def _read_ledger(self, path: Path) -> Optional[Ledger]:
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
            return ledger_to_domain(document)
        except (
            OSError,
            UnicodeDecodeError,
            json.JSONDecodeError,
            RecursionError,
            DomainError,
        ) as e:
            logger.warning("Could not read ledger from %s: %s", path, e)
            return None

    def _write_atomic(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


@contextmanager
def _save_step(step: StorageStep):
    """Turn an OSError raised inside a save step into StorageError."""
    try:
        yield
    except OSError as e:
        logger.error("Save failed during '%s': %s", step.value, e)
        raise StorageError(step, str(e), e.filename) from e
