"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator


def init_database(db_path: str) -> None:
    """
    Initialize database and create tables if they don't exist.
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute("PRAGMA journal_mode=WAL")

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS files (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user TEXT NOT NULL,
                relpath TEXT NOT NULL,
                filename TEXT NOT NULL,
                detected_mimetype TEXT NOT NULL,
                declared_mimetype TEXT NOT NULL,
                size INTEGER NOT NULL,
                created INTEGER NOT NULL,
                preview_ref TEXT,
                UNIQUE(user, relpath)
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_files_user ON files(user, id)
        """)

        conn.commit()


@contextmanager
def get_db_connection(db_path: str) -> Generator[sqlite3.Connection, None, None]:
    """
    Context manager for database connections.
    """
    conn = sqlite3.connect(db_path, timeout=30)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
