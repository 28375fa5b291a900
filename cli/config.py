"""Persistent settings for the MediaVault CLI."""

import json
import os
from pathlib import Path
from typing import Optional

from common.constants import DEFAULT_SERVER_PORT
from common.logging_config import get_logger

logger = get_logger(__name__)


def default_settings() -> dict:
    """Defaults, with the server address overridable from the environment."""
    return {
        "server_host": os.environ.get("VAULT_SERVER_HOST", "localhost"),
        "server_port": int(os.environ.get("VAULT_SERVER_PORT", str(DEFAULT_SERVER_PORT))),
        "timeout": 30,
        "max_retries": 3,
        "retry_backoff_multiplier": 2,
        "user": None,
    }


class Config:
    """
    CLI settings stored as JSON (typically ``~/.mediavault/config.json``).

    Only the selected namespace is written back by the CLI; everything else
    is read from the file when present and defaulted otherwise.
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)
        self.data = default_settings()
        if self.config_path.exists():
            self.data.update(self._read())
        else:
            self.save()

    def _read(self) -> dict:
        try:
            with open(self.config_path, 'r') as f:
                stored = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable config {self.config_path}: {e}")
            return {}
        if not isinstance(stored, dict):
            logger.warning(f"Ignoring config {self.config_path}: expected a JSON object")
            return {}
        return stored

    def save(self) -> None:
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config to {self.config_path}: {e}")

    def get_user(self) -> Optional[str]:
        return self.data.get('user')

    def set_user(self, user: str) -> None:
        """Select a namespace and persist the choice."""
        self.data['user'] = user
        self.save()

    def get_base_url(self) -> str:
        return f"http://{self.data['server_host']}:{self.data['server_port']}"

    def get_timeout(self) -> int:
        return self.data['timeout']

    def get_retry_config(self) -> dict:
        return {
            'max_retries': self.data['max_retries'],
            'retry_backoff_multiplier': self.data['retry_backoff_multiplier'],
        }
