"""Timestamped ledger backups with bounded retention.

Backup names embed a sortable timestamp, so the lexicographically greatest
name is the newest backup. Pruning orders by modification time instead;
both orders agree as long as the clock does not move backwards.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "transactions_backup_"
BACKUP_SUFFIX = ".json"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S_%f"

# Second-resolution names from older versions, optional microseconds,
# optional clash counter.
BACKUP_NAME_PATTERN = re.compile(
    rf"^{BACKUP_PREFIX}\d{{8}}_\d{{6}}(?:_\d{{6}}){{0,2}}{re.escape(BACKUP_SUFFIX)}$"
)


def is_backup_name(name: str) -> bool:
    """Check whether a filename is a ledger backup."""
    return BACKUP_NAME_PATTERN.match(name) is not None


class BackupRotation:
    """Names, lists and prunes backups in a single directory."""

    def __init__(
        self,
        backup_dir: Path,
        max_backups: int,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.backup_dir = Path(backup_dir)
        self.max_backups = max_backups
        self.clock = clock

    def list_backups(self) -> list[Path]:
        """Backup files sorted by name, oldest first."""
        if not self.backup_dir.is_dir():
            return []
        return sorted(
            (
                path
                for path in self.backup_dir.iterdir()
                if path.is_file() and is_backup_name(path.name)
            ),
            key=lambda path: path.name,
        )

    def next_path(self) -> Path:
        """Path for a new backup that doesn't overwrite an existing one."""
        stem = f"{BACKUP_PREFIX}{self.clock().strftime(TIMESTAMP_FORMAT)}"
        path = self.backup_dir / f"{stem}{BACKUP_SUFFIX}"
        counter = 0
        while path.exists():
            counter += 1
            path = self.backup_dir / f"{stem}_{counter:06d}{BACKUP_SUFFIX}"
        return path

    def prune(self) -> list[Path]:
        """Delete all but the ``max_backups`` most recently modified backups.

        Equal modification times are ordered by name.

        Returns:
            Paths that were removed

        Raises:
            OSError: If a backup cannot be inspected or removed
        """
        backups = sorted(
            self.list_backups(),
            key=lambda path: (path.stat().st_mtime_ns, path.name),
            reverse=True,
        )
        removed = []
        for path in backups[self.max_backups:]:
            path.unlink()
            removed.append(path)
        if removed:
            logger.debug("Pruned %d old backups from %s", len(removed), self.backup_dir)
        return removed
