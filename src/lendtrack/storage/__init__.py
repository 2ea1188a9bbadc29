"""Storage layer for lendtrack application."""

from lendtrack.storage.attachments import AttachmentStore
from lendtrack.storage.base import LedgerStore
from lendtrack.storage.config import LedgerConfig
from lendtrack.storage.factories import (
    create_attachment_store,
    create_json_store,
    create_ledger_config,
)
from lendtrack.storage.json_store import JSONLedgerStore

__all__ = [
    "AttachmentStore",
    "LedgerStore",
    "LedgerConfig",
    "JSONLedgerStore",
    "create_attachment_store",
    "create_json_store",
    "create_ledger_config",
]
