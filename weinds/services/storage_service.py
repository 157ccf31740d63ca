"""
Storage Service - uploaded files on local disk.

Files are written below settings.storage_path and served by the app
under /files, so a stored path "a/b.pdf" has the URL "/files/a/b.pdf".
"""

import logging
import os
from typing import Optional

from weinds.core.config import get_settings
from weinds.core.errors import StorageError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/files"


def safe_relative_path(relative_path: str) -> str:
    """Normalize a storage path; rejects absolute paths and '..' segments."""
    if not relative_path or relative_path.startswith(("/", "\\")) or os.path.isabs(relative_path):
        raise StorageError("Invalid storage path")
    parts = relative_path.replace("\\", "/").split("/")
    if any(part in ("", ".", "..") for part in parts):
        raise StorageError("Invalid storage path")
    return "/".join(parts)


def public_url(relative_path: str) -> str:
    return f"{PUBLIC_PREFIX}/{safe_relative_path(relative_path)}"


class StorageService:

    def __init__(self, root: Optional[str] = None):
        self.root = root or get_settings().storage_path

    def save_file(self, relative_path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """
        Write a file and return its public URL.

        Raises:
            StorageError: bad path or the file could not be written
        """
        relative_path = safe_relative_path(relative_path)
        target = os.path.join(self.root, *relative_path.split("/"))
        try:
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error("Could not write %s: %s", target, e)
            raise StorageError("Could not store the file, please try again later") from e

        logger.info("Stored %s (%d bytes, %s)", relative_path, len(data), content_type or "unknown type")
        return public_url(relative_path)

    def exists(self, relative_path: str) -> bool:
        relative_path = safe_relative_path(relative_path)
        return os.path.isfile(os.path.join(self.root, *relative_path.split("/")))
