"""Managed copies of user-attached files."""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Union

from lendtrack.domain.errors import StorageStep, StorageError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
DEFAULT_EXTENSION = "png"


class AttachmentStore:
    """Copies files into the attachment directory."""

    def __init__(self, attachment_dir: Path, clock: Callable[[], datetime] = datetime.now):
        self.attachment_dir = Path(attachment_dir)
        self.clock = clock

    def stored_name(self, source: Path) -> str:
        """Name a copy of ``source`` will get: ``<timestamp>_<filename>.<ext>``.

        The filename keeps its own extension, so ``photo.png`` becomes
        ``<timestamp>_photo.png.png``. Existing attachments are named this way.
        """
        extension = source.suffix[1:] or DEFAULT_EXTENSION
        return f"{self.clock().strftime(TIMESTAMP_FORMAT)}_{source.name}.{extension}"

    def store(self, source_path: Union[str, Path]) -> str:
        """Copy a file into managed storage.

        Args:
            source_path: File chosen by the user

        Returns:
            Path of the stored copy

        Raises:
            StorageError: If the filename is invalid or the copy fails
        """
        source = Path(source_path)
        if not source.name or source.name in (".", ".."):
            raise StorageError(StorageStep.COPY_ATTACHMENT, "Invalid filename", str(source))

        dest = self.attachment_dir / self.stored_name(source)
        try:
            self.attachment_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, dest)
        except OSError as e:
            logger.error("Failed to copy attachment %s: %s", source, e)
            raise StorageError(StorageStep.COPY_ATTACHMENT, str(e), str(source)) from e

        logger.debug("Stored attachment %s as %s", source, dest)
        return str(dest)
