"""Shared pytest fixtures for all tests."""

import io
from pathlib import Path

import pytest
from PIL import Image

from cli.config import Config
from vault.database import init_database
from vault.exceptions import PreviewError
from vault.repositories.file_repository import FileRepository
from vault.services.archive_service import ArchiveService
from vault.services.content_classifier import ContentClassifier
from vault.services.ingestion_pipeline import IngestionPipeline
from vault.services.namespace_storage import NamespaceStorage
from vault.services.notification_hub import NotificationHub
from vault.services.preview_generator import PreviewGenerator
from vault.service_locator import VaultServices
from vault.types import Verdict


def make_image_bytes(size=(640, 480), color=(200, 30, 30), fmt='JPEG') -> bytes:
    """Encode a solid-colour image in memory."""
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format=fmt)
    return buffer.getvalue()


# Start of a 64-bit little-endian ELF executable header
ELF_BYTES = (
    b'\x7fELF\x02\x01\x01\x00' + b'\x00' * 8
    + b'\x02\x00\x3e\x00\x01\x00\x00\x00'
    + b'\x00' * 40
    + b'\x00' * 256
)

# Minimal ISO base media "ftyp" box followed by an empty "mdat" box
MP4_BYTES = (
    b'\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom'
    + b'\x00\x00\x00\x08mdat'
)


class FakeScanner:
    """Scanner double that flags files by name instead of running clamscan."""

    def __init__(self, infected_names=()):
        self.infected_names = set(infected_names)
        self.scanned = []

    def scan(self, path: Path) -> Verdict:
        self.scanned.append(path.name)
        if path.name in self.infected_names:
            return Verdict.INFECTED
        return Verdict.CLEAN


def fake_frame_extractor(source: Path, output: Path) -> None:
    """Frame extractor double that writes a fixed PNG frame."""
    Image.new('RGB', (1280, 720), (10, 120, 200)).save(output, format='PNG')


def failing_frame_extractor(source: Path, output: Path) -> None:
    raise PreviewError("no decodable frame")


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .mediavault directory
    """
    config_dir = tmp_path / '.mediavault'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes()


@pytest.fixture
def db_path(tmp_path) -> str:
    """Initialize an empty catalog database in a temporary directory."""
    path = str(tmp_path / 'files.db')
    init_database(path)
    return path


@pytest.fixture
def catalog(db_path):
    return FileRepository(db_path)


@pytest.fixture
def storage(tmp_path):
    storage = NamespaceStorage(tmp_path / 'uploads', tmp_path / 'thumbs')
    storage.ensure_roots()
    return storage


@pytest.fixture
def scanner():
    return FakeScanner(infected_names={'eicar.txt'})


@pytest.fixture
def hub():
    return NotificationHub(send_timeout=1.0)


@pytest.fixture
def pipeline(storage, catalog, scanner, hub):
    """Ingestion pipeline wired with real storage and classifier, fake scanner and frame extractor."""
    return IngestionPipeline(
        storage=storage,
        classifier=ContentClassifier(),
        scanner=scanner,
        previews=PreviewGenerator(frame_extractor=fake_frame_extractor),
        catalog=catalog,
        hub=hub,
    )


@pytest.fixture
def services(storage, catalog, hub, pipeline):
    return VaultServices(
        catalog=catalog,
        storage=storage,
        hub=hub,
        pipeline=pipeline,
        archive=ArchiveService(storage),
    )
