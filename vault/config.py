"""Configuration settings for the MediaVault server."""

import os
import shlex
from pathlib import Path

from common.constants import DEFAULT_SERVER_PORT, MAX_FILE_BYTES


DATA_DIR = Path(os.environ.get("VAULT_DATA_DIR", "./data"))

DATABASE_PATH = os.environ.get("VAULT_DATABASE_PATH", str(DATA_DIR / "files.db"))

UPLOAD_ROOT = Path(os.environ.get("VAULT_UPLOAD_ROOT", str(DATA_DIR / "uploads")))

PREVIEW_ROOT = Path(os.environ.get("VAULT_PREVIEW_ROOT", str(DATA_DIR / "thumbs")))

VAULT_HOST = os.environ.get("VAULT_HOST", "0.0.0.0")

VAULT_PORT = int(os.environ.get("VAULT_PORT", str(DEFAULT_SERVER_PORT)))

MAX_UPLOAD_FILE_BYTES = int(os.environ.get("VAULT_MAX_FILE_BYTES", str(MAX_FILE_BYTES)))

SCANNER_COMMAND = shlex.split(os.environ.get("VAULT_SCANNER_COMMAND", "clamscan --no-summary"))

SCAN_TIMEOUT_SECONDS = float(os.environ.get("VAULT_SCAN_TIMEOUT", "60"))

PREVIEW_MAX_DIMENSION = int(os.environ.get("VAULT_PREVIEW_MAX_DIMENSION", "300"))

PREVIEW_QUALITY = int(os.environ.get("VAULT_PREVIEW_QUALITY", "80"))

FFMPEG_COMMAND = os.environ.get("VAULT_FFMPEG_COMMAND", "ffmpeg")

FRAME_TIMEOUT_SECONDS = float(os.environ.get("VAULT_FRAME_TIMEOUT", "30"))
