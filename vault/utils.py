"""Utility helper functions for the MediaVault server."""

import re
import time
from pathlib import Path, PurePosixPath

from common.constants import MAX_NAMESPACE_LENGTH
from vault.exceptions import InvalidNamespaceError, InvalidPathError

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")


def current_epoch_millis() -> int:
    """
    Get current time as integer milliseconds since the epoch.
    """
    return int(time.time() * 1000)


def validate_namespace(user: str) -> str:
    """
    Validate a client-supplied namespace for use as a directory name.

    Args:
        user: Raw namespace value

    Returns:
        The namespace unchanged (namespaces are case-sensitive)

    Raises:
        InvalidNamespaceError: If the value is empty or unsafe
    """
    if user is None or not user.strip():
        raise InvalidNamespaceError("Missing username")
    if len(user) > MAX_NAMESPACE_LENGTH:
        raise InvalidNamespaceError(f"Username longer than {MAX_NAMESPACE_LENGTH} characters")
    if user in (".", "..") or any(ch in user for ch in ("/", "\\", "\x00")):
        raise InvalidNamespaceError(f"Invalid username: {user!r}")
    return user


def sanitize_relative_path(declared_name: str) -> str:
    """
    Turn a declared filename (possibly carrying subfolders) into a safe
    forward-slash relative path.

    Empty and ``.`` segments are dropped. Backslashes count as separators.

    Args:
        declared_name: Filename as submitted by the client

    Returns:
        Normalized relative path such as ``holiday/beach.jpg``

    Raises:
        InvalidPathError: If the name is empty, absolute or contains ``..``
    """
    if not declared_name or "\x00" in declared_name:
        raise InvalidPathError("Empty or malformed filename")

    candidate = declared_name.replace("\\", "/")
    if candidate.startswith("/") or _DRIVE_PREFIX.match(candidate):
        raise InvalidPathError(f"Absolute paths are not allowed: {declared_name!r}")

    parts = [part for part in candidate.split("/") if part not in ("", ".")]
    if any(part == ".." for part in parts):
        raise InvalidPathError(f"Path traversal is not allowed: {declared_name!r}")
    if not parts:
        raise InvalidPathError(f"Filename has no usable name: {declared_name!r}")

    return str(PurePosixPath(*parts))


def resolve_within(root: Path, relative_path: str) -> Path:
    """
    Join a sanitized relative path to a root and confirm the result stays inside it.

    Raises:
        InvalidPathError: If symlinks or odd segments would escape the root
    """
    resolved_root = root.resolve()
    target = (resolved_root / relative_path).resolve()
    try:
        target.relative_to(resolved_root)
    except ValueError:
        raise InvalidPathError(f"Path escapes namespace root: {relative_path!r}")
    return target
