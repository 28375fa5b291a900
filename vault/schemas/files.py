"""Pydantic schemas for upload, search and real-time endpoints."""

from typing import List, Optional
from urllib.parse import quote

from pydantic import BaseModel

from vault.types import FileRecord, Outcome

UPLOADS_URL_PREFIX = "/uploads"
PREVIEWS_URL_PREFIX = "/thumbs"


class FileRecordResponse(BaseModel):
    """Response model for one catalog record."""
    id: int
    user: str
    relative_path: str
    declared_name: str
    detected_mime_type: str
    declared_mime_type: str
    size_bytes: int
    created_at_epoch_millis: int
    preview_ref: Optional[str] = None
    url: str
    preview_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: FileRecord) -> "FileRecordResponse":
        return cls(
            **record.to_dict(),
            url=f"{UPLOADS_URL_PREFIX}/{quote(record.user, safe='')}/{quote(record.relative_path)}",
            preview_url=f"{PREVIEWS_URL_PREFIX}/{quote(record.preview_ref)}" if record.preview_ref else None,
        )


class FileErrorResponse(BaseModel):
    """Failure detail for one file of a batch."""
    code: str
    detail: str


class FileResultResponse(BaseModel):
    """Per-file result of an upload batch."""
    file: str
    ok: bool
    record: Optional[FileRecordResponse] = None
    error: Optional[FileErrorResponse] = None

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> "FileResultResponse":
        if outcome.ok:
            return cls(
                file=outcome.declared_name,
                ok=True,
                record=FileRecordResponse.from_record(outcome.record),
            )
        return cls(
            file=outcome.declared_name,
            ok=False,
            error=FileErrorResponse(code=outcome.failure.value, detail=outcome.message or ""),
        )


class UploadResponse(BaseModel):
    """Response model for a batch upload."""
    success: bool
    accepted: int
    rejected: int
    results: List[FileResultResponse]


class FileListEvent(BaseModel):
    """Snapshot sent once after a viewer joins a namespace."""
    type: str = "file_list"
    user: str
    files: List[FileRecordResponse]


class FileAddedEvent(BaseModel):
    """Incremental event pushed for every newly ingested record."""
    type: str = "file_added"
    user: str
    file: FileRecordResponse
