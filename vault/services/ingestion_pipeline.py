"""Upload ingestion pipeline: per-file classify, scan, preview, persist, notify."""

import asyncio
import functools
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TypeVar

from common.logging_config import get_logger
from vault.exceptions import (
    DuplicateFileError,
    EmptyBatchError,
    InvalidPathError,
    PreviewError,
    StorageError,
    ThreatDetectedError,
    TypeMismatchError,
)
from vault.repositories.file_repository import FileRepository
from vault.schemas.files import FileAddedEvent, FileRecordResponse
from vault.services.content_classifier import ContentClassifier
from vault.services.namespace_storage import NamespaceStorage
from vault.services.notification_hub import NotificationHub
from vault.services.preview_generator import PREVIEW_CATEGORIES, PreviewGenerator
from vault.services.threat_scanner import ThreatScanner
from vault.types import ContentType, FailureReason, FileRecord, IncomingFile, Outcome, Verdict
from vault.utils import current_epoch_millis, sanitize_relative_path, validate_namespace

logger = get_logger(__name__)

T = TypeVar("T")


class IngestionPipeline:
    """
    Runs every file of a batch through the ingestion steps independently.

    Per file: write → classify → scan → preview → catalog insert → publish.
    A rejected file has its bytes (and any preview) removed before its outcome
    is returned. One file failing never stops the rest of the batch.

    Files are processed one after another. Each file's work is shielded from
    cancellation: if the client goes away mid-batch, the file in flight still
    reaches a terminal state and no further files are started.
    """

    def __init__(
        self,
        storage: NamespaceStorage,
        classifier: ContentClassifier,
        scanner: ThreatScanner,
        previews: PreviewGenerator,
        catalog: FileRepository,
        hub: NotificationHub,
    ):
        self.storage = storage
        self.classifier = classifier
        self.scanner = scanner
        self.previews = previews
        self.catalog = catalog
        self.hub = hub

    async def ingest(self, user: str, batch: Sequence[IncomingFile]) -> List[Outcome]:
        """
        Ingest a batch of files for one namespace.

        Args:
            user: Client-supplied namespace
            batch: File parts in submission order

        Returns:
            One Outcome per file, in submission order

        Raises:
            InvalidNamespaceError: If the namespace is missing or unsafe
            EmptyBatchError: If the batch has no files
        """
        user = validate_namespace(user)
        if not batch:
            raise EmptyBatchError("No files uploaded")

        logger.info(f"Ingesting batch [user={user}] [files={len(batch)}]")

        outcomes: List[Outcome] = []
        for index, incoming in enumerate(batch):
            outcome = await asyncio.shield(self._ingest_one(user, index, incoming))
            outcomes.append(outcome)

        accepted = sum(1 for outcome in outcomes if outcome.ok)
        logger.info(
            f"Batch finished [user={user}] [accepted={accepted}] [rejected={len(outcomes) - accepted}]"
        )
        return outcomes

    async def _run(self, fn: Callable[..., T], *args) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args))

    async def _ingest_one(self, user: str, index: int, incoming: IncomingFile) -> Outcome:
        name = incoming.declared_name
        written: Optional[Path] = None
        preview_file: Optional[Path] = None

        try:
            relative_path = sanitize_relative_path(name)
            written = await self._run(
                self.storage.write_original, user, relative_path, incoming.source, incoming.size_bytes
            )
            logger.debug(f"Received {relative_path} [user={user}] [bytes={incoming.size_bytes}]")

            detected = await self._run(self.classifier.classify, written, incoming.declared_mime_type)
            logger.debug(f"Classified {relative_path} as {detected.mime_type}")

            verdict = await self._run(self.scanner.scan, written)
            if verdict is not Verdict.CLEAN:
                raise ThreatDetectedError(f"Virus detected or scan error in {relative_path}")
            logger.debug(f"Scanned {relative_path}: clean")

            preview_ref, preview_file = await self._derive_preview(user, relative_path, detected, written)

            record = FileRecord(
                user=user,
                relative_path=relative_path,
                declared_name=name,
                detected_mime_type=detected.mime_type,
                declared_mime_type=incoming.declared_mime_type,
                size_bytes=written.stat().st_size,
                created_at_epoch_millis=current_epoch_millis(),
                preview_ref=preview_ref,
            )
            file_id = await self._run(self.catalog.insert, record)
            record = replace(record, id=file_id)

        except TypeMismatchError as e:
            self._discard(written, preview_file)
            return Outcome.rejected(index, name, FailureReason.TYPE_MISMATCH, str(e))
        except ThreatDetectedError as e:
            self._discard(written, preview_file)
            logger.warning(f"Rejected {name} [user={user}]: {e}")
            return Outcome.rejected(index, name, FailureReason.THREAT_DETECTED, str(e))
        except (InvalidPathError, DuplicateFileError, StorageError) as e:
            self._discard(written, preview_file)
            logger.warning(f"Rejected {name} [user={user}]: {e}")
            return Outcome.rejected(index, name, FailureReason.STORAGE_ERROR, str(e))
        except Exception as e:
            self._discard(written, preview_file)
            logger.error(f"Unexpected failure ingesting {name} [user={user}]: {e}", exc_info=True)
            return Outcome.rejected(index, name, FailureReason.STORAGE_ERROR, f"Upload failed: {e}")

        logger.info(f"Persisted {record.relative_path} [user={user}] [id={record.id}]")
        await self._notify(record)
        return Outcome.success(index, name, record)

    async def _derive_preview(
        self,
        user: str,
        relative_path: str,
        detected: ContentType,
        source: Path,
    ) -> tuple[Optional[str], Optional[Path]]:
        if detected.category not in PREVIEW_CATEGORIES:
            return None, None

        preview_ref = self.storage.preview_ref_for(user, relative_path)
        try:
            destination = self.storage.preview_path(preview_ref)
            produced = await self._run(self.previews.generate, detected.category, source, destination)
        except (PreviewError, InvalidPathError, OSError) as e:
            logger.warning(f"Preview failed for {relative_path} [user={user}]: {e}")
            return None, None

        if produced is None:
            return None, None
        return preview_ref, produced

    async def _notify(self, record: FileRecord) -> None:
        event = FileAddedEvent(user=record.user, file=FileRecordResponse.from_record(record))
        try:
            delivered = await self.hub.publish(record.user, event.model_dump())
            logger.debug(f"Notified {delivered} viewer(s) of {record.relative_path} [user={record.user}]")
        except Exception as e:
            logger.error(f"Notification failed for {record.relative_path} [user={record.user}]: {e}", exc_info=True)

    def _discard(self, written: Optional[Path], preview_file: Optional[Path]) -> None:
        if self.storage.remove(written):
            logger.debug(f"Removed rejected upload {written}")
        self.storage.remove(preview_file)
