"""Server-side data type definitions."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, BinaryIO, Dict, Optional


@dataclass(frozen=True)
class FileRecord:
    """
    One accepted upload. Never mutated after the catalog assigns its id.
    """
    user: str
    relative_path: str
    declared_name: str
    detected_mime_type: str
    declared_mime_type: str
    size_bytes: int
    created_at_epoch_millis: int
    preview_ref: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IncomingFile:
    """
    A single file part as received from the client. Every field is untrusted.

    ``source`` is the spooled upload stream; it is read once, from the start,
    when the original is written.
    """
    declared_name: str
    declared_mime_type: str
    source: BinaryIO
    size_bytes: int


class Verdict(str, Enum):
    CLEAN = "clean"
    INFECTED = "infected-or-unreadable"


class FailureReason(str, Enum):
    TYPE_MISMATCH = "type-mismatch"
    THREAT_DETECTED = "threat-detected"
    STORAGE_ERROR = "storage-error"


@dataclass(frozen=True)
class ContentType:
    """
    Result of content sniffing: full MIME type and its top-level category.
    """
    mime_type: str

    @property
    def category(self) -> str:
        return top_level_category(self.mime_type)


@dataclass(frozen=True)
class Outcome:
    """
    Per-file result of ingestion: either a record or a tagged failure.
    """
    index: int
    declared_name: str
    record: Optional[FileRecord] = None
    failure: Optional[FailureReason] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def success(cls, index: int, declared_name: str, record: FileRecord) -> "Outcome":
        return cls(index=index, declared_name=declared_name, record=record)

    @classmethod
    def rejected(cls, index: int, declared_name: str, failure: FailureReason, message: str) -> "Outcome":
        return cls(index=index, declared_name=declared_name, failure=failure, message=message)


def top_level_category(mime_type: Optional[str]) -> str:
    """
    Return the part of a MIME type before the slash, lower-cased.

    Parameters such as ``; charset=utf-8`` are ignored.
    """
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().split("/", 1)[0].lower()
