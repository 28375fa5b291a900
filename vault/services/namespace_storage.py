"""Manages per-user original files and preview artifacts on disk."""

import os
import shutil
from pathlib import Path
from typing import BinaryIO, Optional

from common.logging_config import get_logger
from vault.exceptions import DuplicateFileError, NamespaceNotFoundError, StorageError
from vault.utils import resolve_within

logger = get_logger(__name__)

COPY_CHUNK_BYTES = 1024 * 1024


class NamespaceStorage:
    """
    Filesystem layout for originals and previews.

    Originals live at ``<upload_root>/<user>/<relative_path>``. Previews mirror
    that layout under ``<preview_root>`` with a ``.jpg`` suffix appended.
    """

    def __init__(self, upload_root: Path, preview_root: Path):
        self.upload_root = Path(upload_root)
        self.preview_root = Path(preview_root)

    def ensure_roots(self) -> None:
        """Ensure both storage roots exist."""
        self.upload_root.mkdir(parents=True, exist_ok=True)
        self.preview_root.mkdir(parents=True, exist_ok=True)

    def user_dir(self, user: str) -> Path:
        return self.upload_root / user

    def existing_user_dir(self, user: str) -> Path:
        """
        Get the namespace directory, requiring it to exist.

        Raises:
            NamespaceNotFoundError: If nothing was ever stored for the user
        """
        path = self.user_dir(user)
        if not path.is_dir():
            raise NamespaceNotFoundError(f"User folder not found: {user}")
        return path

    def original_path(self, user: str, relative_path: str) -> Path:
        user_root = self.user_dir(user)
        user_root.mkdir(parents=True, exist_ok=True)
        return resolve_within(user_root, relative_path)

    def preview_ref_for(self, user: str, relative_path: str) -> str:
        return f"{user}/{relative_path}.jpg"

    def preview_path(self, preview_ref: str) -> Path:
        self.preview_root.mkdir(parents=True, exist_ok=True)
        return resolve_within(self.preview_root, preview_ref)

    def write_original(
        self,
        user: str,
        relative_path: str,
        source: BinaryIO,
        expected_size: Optional[int] = None,
    ) -> Path:
        """
        Stream an upload to its destination, never replacing an existing file.

        Args:
            user: Validated namespace
            relative_path: Sanitized relative path
            source: Readable binary stream, copied from its start
            expected_size: Byte count the client sent, checked after the copy

        Returns:
            Path of the written file

        Raises:
            DuplicateFileError: If the destination already exists
            StorageError: If the write fails or is short; partial bytes are removed
        """
        destination = self.original_path(user, relative_path)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create folder for {relative_path}: {e}") from e

        try:
            with open(destination, "xb") as f:
                source.seek(0)
                shutil.copyfileobj(source, f, COPY_CHUNK_BYTES)
                f.flush()
                os.fsync(f.fileno())
        except FileExistsError:
            raise DuplicateFileError(f"{relative_path} already exists")
        except OSError as e:
            self.remove(destination)
            raise StorageError(f"Failed to write {relative_path}: {e}") from e

        written = destination.stat().st_size
        if expected_size is not None and written != expected_size:
            self.remove(destination)
            raise StorageError(f"Short write for {relative_path}: {written} of {expected_size} bytes")

        return destination

    def remove(self, path: Optional[Path]) -> bool:
        """
        Delete a file if present.

        Returns:
            True if a file was deleted, False if it didn't exist
        """
        if path is None:
            return False
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to remove {path}: {e}")
            return False
