"""Service layer: ingestion steps, notifications and exports."""

from vault.services.archive_service import ArchiveService
from vault.services.content_classifier import ContentClassifier
from vault.services.ingestion_pipeline import IngestionPipeline
from vault.services.namespace_storage import NamespaceStorage
from vault.services.notification_hub import NotificationHub
from vault.services.preview_generator import FfmpegFrameExtractor, PreviewGenerator
from vault.services.threat_scanner import ThreatScanner

__all__ = [
    "ArchiveService",
    "ContentClassifier",
    "IngestionPipeline",
    "NamespaceStorage",
    "NotificationHub",
    "FfmpegFrameExtractor",
    "PreviewGenerator",
    "ThreatScanner",
]
