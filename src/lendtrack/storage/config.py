"""Storage locations for a ledger."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

DB_FILE_NAME = "transactions.json"
BACKUP_DIR_NAME = "backups"
ATTACHMENTS_DIR_NAME = "attachments"
DEFAULT_MAX_BACKUPS = 50


@dataclass(frozen=True)
class LedgerConfig:
    """Where the ledger, its backups and its attachments live."""

    primary_path: Path
    backup_dir: Path
    attachment_dir: Path
    max_backups: int = DEFAULT_MAX_BACKUPS

    def __post_init__(self):
        if self.max_backups < 1:
            raise ValueError(f"max_backups must be at least 1, got {self.max_backups}")

    @classmethod
    def from_data_dir(
        cls, data_dir: Union[str, Path], max_backups: int = DEFAULT_MAX_BACKUPS
    ) -> "LedgerConfig":
        """Lay out all storage under a single directory."""
        data_dir = Path(data_dir)
        return cls(
            primary_path=data_dir / DB_FILE_NAME,
            backup_dir=data_dir / BACKUP_DIR_NAME,
            attachment_dir=data_dir / ATTACHMENTS_DIR_NAME,
            max_backups=max_backups,
        )
