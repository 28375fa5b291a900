"""Zip export of a namespace's storage tree."""

import os
import tempfile
import zipfile
from pathlib import Path

from common.logging_config import get_logger
from vault.services.namespace_storage import NamespaceStorage

logger = get_logger(__name__)

ZIP_COMPRESSION_LEVEL = 9


class ArchiveService:
    def __init__(self, storage: NamespaceStorage):
        self.storage = storage

    def build_archive(self, user: str) -> Path:
        """
        Write a zip of the user's directory tree to a temporary file.

        Entries are relative to the user's root. The caller owns the returned
        file and must delete it.

        Raises:
            NamespaceNotFoundError: If the user has no storage directory
        """
        user_root = self.storage.existing_user_dir(user)

        fd, archive_name = tempfile.mkstemp(prefix="vault-export-", suffix=".zip")
        os.close(fd)
        archive_path = Path(archive_name)

        entries = 0
        try:
            with zipfile.ZipFile(
                archive_path,
                "w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=ZIP_COMPRESSION_LEVEL,
            ) as archive:
                for path in sorted(user_root.rglob("*")):
                    if path.is_file() and not path.is_symlink():
                        archive.write(path, path.relative_to(user_root).as_posix())
                        entries += 1
        except Exception:
            archive_path.unlink(missing_ok=True)
            raise

        logger.info(f"Built archive for {user} [entries={entries}] [bytes={archive_path.stat().st_size}]")
        return archive_path
