"""Repository layer for data access."""

from vault.repositories.file_repository import FileRepository

__all__ = [
    "FileRepository",
]
