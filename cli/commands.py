"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    ExportCommand,
    ListCommand,
    UploadCommand,
    UserCommand,
)
from cli.config import Config
from cli.vault_client import VaultClient

logger = get_logger(__name__)


_client: Optional[VaultClient] = None


def get_client() -> VaultClient:
    """
    Get or create global VaultClient instance.

    Returns:
        VaultClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new VaultClient instance")
        config = Config(Path.home() / '.mediavault' / 'config.json')
        _client = VaultClient(config)
    return _client


def handle_user(cmd: UserCommand, client: Optional[VaultClient] = None) -> str:
    """
    Handle 'user' command.

    Args:
        cmd: UserCommand with the namespace name
        client: Optional VaultClient for dependency injection (testing)

    Returns:
        Confirmation message
    """
    if client is None:
        client = get_client()
    client.config.set_user(cmd.name)
    logger.info(f"Selected user: {cmd.name}")
    return f"Now working as: {cmd.name}"


def handle_upload(cmd: UploadCommand, client: Optional[VaultClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with files and folders to send
        client: Optional VaultClient for dependency injection (testing)

    Returns:
        Per-file upload results
    """
    logger.info(f"Executing upload command: {len(cmd.paths)} path(s)")
    if client is None:
        client = get_client()
    result = client.upload(list(cmd.paths))
    logger.debug("Upload command completed")
    return result


def handle_list(cmd: ListCommand, client: Optional[VaultClient] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand with optional name query and type prefix
        client: Optional VaultClient for dependency injection (testing)

    Returns:
        Formatted list of files
    """
    logger.info(f"Executing list command: query={cmd.query!r} type={cmd.type_prefix!r}")
    if client is None:
        client = get_client()
    return client.list_files(cmd.query, cmd.type_prefix)


def handle_export(cmd: ExportCommand, client: Optional[VaultClient] = None) -> str:
    """
    Handle 'export' command.

    Args:
        cmd: ExportCommand with optional output path
        client: Optional VaultClient for dependency injection (testing)

    Returns:
        Success or error message with archive details
    """
    logger.info(f"Executing export command: output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    return client.export(cmd.output_path)
