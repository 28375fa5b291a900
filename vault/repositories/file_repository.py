"""File catalog repository for database operations."""

import sqlite3
from typing import List, Optional

from common.logging_config import get_logger
from vault.database import get_db_connection
from vault.exceptions import DuplicateFileError, StorageError
from vault.types import FileRecord

logger = get_logger(__name__)

_SELECT_COLUMNS = """
    SELECT id, user, relpath, filename, detected_mimetype, declared_mimetype,
           size, created, preview_ref
    FROM files
"""


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_record(row: sqlite3.Row) -> FileRecord:
    return FileRecord(
        id=row["id"],
        user=row["user"],
        relative_path=row["relpath"],
        declared_name=row["filename"],
        detected_mime_type=row["detected_mimetype"],
        declared_mime_type=row["declared_mimetype"],
        size_bytes=row["size"],
        created_at_epoch_millis=row["created"],
        preview_ref=row["preview_ref"],
    )


class FileRepository:
    """
    Durable catalog of accepted uploads.

    Every call opens its own connection, so one instance is safe to share
    across requests and executor threads. The UNIQUE(user, relpath) constraint
    is checked by SQLite inside the single INSERT statement, which makes the
    duplicate check and the write one atomic step.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, record: FileRecord) -> int:
        """
        Insert a record and return its new id.

        Raises:
            DuplicateFileError: If (user, relative_path) already exists
            StorageError: If the database write fails
        """
        try:
            with get_db_connection(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    INSERT INTO files (user, relpath, filename, detected_mimetype,
                                       declared_mimetype, size, created, preview_ref)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.user,
                        record.relative_path,
                        record.declared_name,
                        record.detected_mime_type,
                        record.declared_mime_type,
                        record.size_bytes,
                        record.created_at_epoch_millis,
                        record.preview_ref,
                    )
                )
                conn.commit()
                file_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise DuplicateFileError(
                f"{record.relative_path} already exists for user {record.user}"
            ) from e
        except sqlite3.Error as e:
            logger.error(f"Catalog insert failed [user={record.user}] [path={record.relative_path}]: {e}")
            raise StorageError(f"Catalog write failed: {e}") from e

        logger.debug(f"Catalog row created [id={file_id}] [user={record.user}] [path={record.relative_path}]")
        return file_id

    def get_by_id(self, file_id: int) -> Optional[FileRecord]:
        with get_db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(_SELECT_COLUMNS + " WHERE id = ?", (file_id,))
            row = cursor.fetchone()

            if row is None:
                return None

            return _row_to_record(row)

    def query_by_user(
        self,
        user: str,
        name_filter: Optional[str] = None,
        type_filter: Optional[str] = None,
    ) -> List[FileRecord]:
        """
        List a user's records in insertion order.

        Args:
            user: Namespace key (exact, case-sensitive)
            name_filter: Case-insensitive substring of the declared name
            type_filter: Prefix of the detected MIME type (e.g. "image/")

        Returns:
            Matching records ordered by id; empty for unknown users
        """
        query = _SELECT_COLUMNS + " WHERE user = ?"
        params: list = [user]

        if name_filter:
            query += " AND filename LIKE ? ESCAPE '\\'"
            params.append(f"%{_escape_like(name_filter)}%")
        if type_filter:
            query += " AND detected_mimetype LIKE ? ESCAPE '\\'"
            params.append(f"{_escape_like(type_filter)}%")

        query += " ORDER BY id"

        with get_db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [_row_to_record(row) for row in cursor.fetchall()]
