"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class UserCommand:
    """Select the namespace for following commands."""

    name: str
    command: Literal["user"] = "user"


@dataclass(frozen=True)
class UploadCommand:
    """Upload files and folders."""

    paths: tuple[str, ...]
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ListCommand:
    """List files with optional name and type filters."""

    query: str = ""
    type_prefix: str = ""
    command: Literal["list"] = "list"


@dataclass(frozen=True)
class ExportCommand:
    """Download the namespace as a zip archive."""

    output_path: Optional[str] = None
    command: Literal["export"] = "export"


CommandRequest = UserCommand | UploadCommand | ListCommand | ExportCommand
