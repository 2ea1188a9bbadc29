"""Factory functions for creating configured stores."""

import os
from pathlib import Path
from typing import Optional, Union

from lendtrack.storage.attachments import AttachmentStore
from lendtrack.storage.config import LedgerConfig
from lendtrack.storage.json_store import JSONLedgerStore

DATA_DIR_ENV_VAR = "LENDTRACK_HOME"


def create_ledger_config(data_dir: Optional[Union[str, Path]] = None) -> LedgerConfig:
    """Create a ledger configuration.

    Args:
        data_dir: Directory holding the ledger, backups and attachments. If
            None, checks the LENDTRACK_HOME environment variable, then
            defaults to ~/.lendtrack

    Returns:
        LedgerConfig rooted at the resolved directory
    """
    if data_dir is None:
        # Check environment variable
        data_dir = os.environ.get(DATA_DIR_ENV_VAR)

    if data_dir is None:
        # Default to ~/.lendtrack
        data_dir = Path.home() / ".lendtrack"
        data_dir.mkdir(exist_ok=True)

    return LedgerConfig.from_data_dir(data_dir)


def create_json_store(config: Optional[LedgerConfig] = None) -> JSONLedgerStore:
    """Create a JSON ledger store, using the default config if none is given."""
    return JSONLedgerStore(config or create_ledger_config())


def create_attachment_store(config: Optional[LedgerConfig] = None) -> AttachmentStore:
    """Create an attachment store, using the default config if none is given."""
    config = config or create_ledger_config()
    return AttachmentStore(config.attachment_dir)
