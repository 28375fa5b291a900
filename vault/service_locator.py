"""Construction of server components and FastAPI dependencies that hand them out."""

from dataclasses import dataclass

from fastapi import Request

from vault import config
from vault.database import init_database
from vault.repositories.file_repository import FileRepository
from vault.services.archive_service import ArchiveService
from vault.services.content_classifier import ContentClassifier
from vault.services.ingestion_pipeline import IngestionPipeline
from vault.services.namespace_storage import NamespaceStorage
from vault.services.notification_hub import NotificationHub
from vault.services.preview_generator import FfmpegFrameExtractor, PreviewGenerator
from vault.services.threat_scanner import ThreatScanner


@dataclass
class VaultServices:
    """All long-lived components of one application instance."""
    catalog: FileRepository
    storage: NamespaceStorage
    hub: NotificationHub
    pipeline: IngestionPipeline
    archive: ArchiveService


def build_services() -> VaultServices:
    """
    Build the component graph from the current configuration.

    Creates the storage roots and the catalog schema if missing.
    """
    storage = NamespaceStorage(config.UPLOAD_ROOT, config.PREVIEW_ROOT)
    storage.ensure_roots()

    init_database(config.DATABASE_PATH)
    catalog = FileRepository(config.DATABASE_PATH)

    hub = NotificationHub()

    previews = PreviewGenerator(
        max_dimension=config.PREVIEW_MAX_DIMENSION,
        quality=config.PREVIEW_QUALITY,
        frame_extractor=FfmpegFrameExtractor(
            command=config.FFMPEG_COMMAND,
            timeout_seconds=config.FRAME_TIMEOUT_SECONDS,
        ),
    )

    pipeline = IngestionPipeline(
        storage=storage,
        classifier=ContentClassifier(),
        scanner=ThreatScanner(config.SCANNER_COMMAND, timeout_seconds=config.SCAN_TIMEOUT_SECONDS),
        previews=previews,
        catalog=catalog,
        hub=hub,
    )

    return VaultServices(
        catalog=catalog,
        storage=storage,
        hub=hub,
        pipeline=pipeline,
        archive=ArchiveService(storage),
    )


def get_services(request: Request) -> VaultServices:
    """FastAPI dependency returning the application's components."""
    return request.app.state.services


def get_pipeline(request: Request) -> IngestionPipeline:
    return get_services(request).pipeline


def get_catalog(request: Request) -> FileRepository:
    return get_services(request).catalog


def get_archive_service(request: Request) -> ArchiveService:
    return get_services(request).archive
