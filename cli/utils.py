"""Utility functions for CLI operations."""

import os
from pathlib import Path


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def collect_upload_files(paths: list[str]) -> tuple[list[tuple[Path, str]], list[str]]:
    """
    Expand CLI arguments into (local file, upload name) pairs.

    A plain file uploads under its base name. A folder is walked recursively
    and every file keeps its path relative to the folder's parent, so
    "upload trip" sends "trip/day1/beach.jpg".

    Args:
        paths: File or folder paths given on the command line

    Returns:
        Tuple of (pairs to upload, error messages for unusable arguments)
    """
    pairs: list[tuple[Path, str]] = []
    errors: list[str] = []

    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_file():
            pairs.append((path, path.name))
        elif path.is_dir():
            base = path.resolve().parent
            found = False
            for dirpath, dirnames, filenames in os.walk(path.resolve()):
                dirnames.sort()
                for filename in sorted(filenames):
                    file_path = Path(dirpath) / filename
                    if file_path.is_symlink() or not file_path.is_file():
                        continue
                    pairs.append((file_path, file_path.relative_to(base).as_posix()))
                    found = True
            if not found:
                errors.append(f"Folder is empty: {raw}")
        else:
            errors.append(f"File not found: {raw}")

    return pairs, errors
