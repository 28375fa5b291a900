"""Content-based media type detection and validation."""

from pathlib import Path
from typing import Optional

import magic

from common.logging_config import get_logger
from vault.exceptions import TypeMismatchError
from vault.types import ContentType, top_level_category

logger = get_logger(__name__)

DEFAULT_DECLARED_TYPE = "application/octet-stream"


class ContentClassifier:
    """
    Sniffs the real type of a stored file with libmagic.

    Only the file's bytes are inspected. The filename extension and the
    client-declared type never influence detection.
    """

    def __init__(self):
        self._magic = magic.Magic(mime=True)

    def detect(self, path: Path) -> ContentType:
        mime_type = self._magic.from_file(str(path))
        return ContentType(mime_type=mime_type or DEFAULT_DECLARED_TYPE)

    def classify(self, path: Path, declared_mime_type: Optional[str]) -> ContentType:
        """
        Detect the content type and check it against the declared one.

        Args:
            path: File already written to storage
            declared_mime_type: Type asserted by the client (may be empty)

        Returns:
            The detected content type

        Raises:
            TypeMismatchError: If the top-level categories differ
        """
        declared = declared_mime_type or DEFAULT_DECLARED_TYPE
        detected = self.detect(path)

        if detected.category != top_level_category(declared):
            logger.info(
                f"Type mismatch for {path.name}: declared={declared} detected={detected.mime_type}"
            )
            raise TypeMismatchError(
                f"File type mismatch: declared {declared} but content is {detected.mime_type}",
                detected_mime_type=detected.mime_type,
                declared_mime_type=declared,
            )

        return detected
