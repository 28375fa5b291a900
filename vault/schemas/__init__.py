"""Pydantic schemas for API requests, responses and real-time events."""

from vault.schemas.files import (
    FileRecordResponse,
    FileErrorResponse,
    FileResultResponse,
    UploadResponse,
    FileListEvent,
    FileAddedEvent,
)
from vault.schemas.common import ErrorResponse, HealthResponse

__all__ = [
    "FileRecordResponse",
    "FileErrorResponse",
    "FileResultResponse",
    "UploadResponse",
    "FileListEvent",
    "FileAddedEvent",
    "ErrorResponse",
    "HealthResponse",
]
