"""CLI entry point."""

import os
import sys

from common.logging_config import setup_logging
from cli.repl import repl_loop
from cli import commands


def main() -> None:
    """Entry point for the MediaVault CLI."""
    debug = '--debug' in sys.argv
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')

    logger = setup_logging('cli', log_level=log_level)

    if debug:
        logger.info("Debug logging enabled")
        sys.argv.remove('--debug')

    logger.info("MediaVault CLI starting...")
    try:
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        if commands._client is not None:
            commands._client.close()
        logger.info("MediaVault CLI exiting")


if __name__ == "__main__":
    main()
