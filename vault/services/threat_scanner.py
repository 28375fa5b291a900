"""Antivirus screening through an external scanner process."""

import subprocess
from pathlib import Path
from typing import List, Sequence

from common.logging_config import get_logger
from vault.types import Verdict

logger = get_logger(__name__)

CLEAN_EXIT_CODE = 0
INFECTED_EXIT_CODE = 1


class ThreatScanner:
    """
    Runs a ClamAV-compatible command against one file and maps the result to a verdict.

    The command receives the file path as its last argument. Exit code 0 means
    clean and 1 means infected. Any other exit code, a missing binary or a
    timeout is reported as INFECTED: the scanner fails closed.
    """

    def __init__(self, command: Sequence[str], timeout_seconds: float = 60.0):
        if not command:
            raise ValueError("Scanner command must not be empty")
        self.command: List[str] = list(command)
        self.timeout_seconds = timeout_seconds

    def scan(self, path: Path) -> Verdict:
        """
        Scan a file on disk.

        Args:
            path: File to scan

        Returns:
            Verdict.CLEAN only when the engine positively reports a clean file
        """
        argv = self.command + [str(path)]
        try:
            result = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"Scanner timed out after {self.timeout_seconds}s on {path.name}")
            return Verdict.INFECTED
        except OSError as e:
            logger.error(f"Scanner could not be started ({argv[0]}): {e}")
            return Verdict.INFECTED

        if result.returncode == CLEAN_EXIT_CODE:
            return Verdict.CLEAN

        output = result.stdout.decode(errors="replace").strip()
        if result.returncode == INFECTED_EXIT_CODE:
            logger.warning(f"Scanner flagged {path.name}: {output}")
        else:
            errors = result.stderr.decode(errors="replace").strip()
            logger.error(f"Scanner failed on {path.name} with exit code {result.returncode}: {errors or output}")
        return Verdict.INFECTED
