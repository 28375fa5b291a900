"""Tests for on-disk namespace storage and zip export."""

import io
import tempfile
import zipfile

import pytest

from vault.exceptions import DuplicateFileError, InvalidPathError, NamespaceNotFoundError, StorageError
from vault.services.archive_service import ArchiveService


class TestNamespaceStorage:

    def test_write_creates_nested_folders(self, storage):
        path = storage.write_original("alice", "trip/day1/beach.jpg", io.BytesIO(b"jpeg"))

        assert path == (storage.upload_root / "alice" / "trip" / "day1" / "beach.jpg").resolve()
        assert path.read_bytes() == b"jpeg"

    def test_existing_file_never_overwritten(self, storage):
        storage.write_original("alice", "beach.jpg", io.BytesIO(b"first"))

        with pytest.raises(DuplicateFileError):
            storage.write_original("alice", "beach.jpg", io.BytesIO(b"second"))
        assert (storage.user_dir("alice") / "beach.jpg").read_bytes() == b"first"

    def test_symlinked_folder_cannot_escape_root(self, storage, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        storage.user_dir("alice").mkdir(parents=True)
        (storage.user_dir("alice") / "link").symlink_to(outside, target_is_directory=True)

        with pytest.raises(InvalidPathError):
            storage.write_original("alice", "link/escape.txt", io.BytesIO(b"data"))
        assert list(outside.iterdir()) == []

    def test_preview_ref_mirrors_original_path(self, storage):
        ref = storage.preview_ref_for("alice", "trip/beach.jpg")
        assert ref == "alice/trip/beach.jpg.jpg"
        assert storage.preview_path(ref) == (storage.preview_root / "alice" / "trip" / "beach.jpg.jpg").resolve()

    def test_existing_user_dir_requires_folder(self, storage):
        with pytest.raises(NamespaceNotFoundError, match="User folder not found: bob"):
            storage.existing_user_dir("bob")

    def test_write_streams_from_start_of_spooled_source(self, storage):
        payload = b"\xff\xd8" + b"\x00" * (3 * 1024 * 1024)
        with tempfile.SpooledTemporaryFile(max_size=1024) as source:
            source.write(payload)
            path = storage.write_original("alice", "big.bin", source, expected_size=len(payload))

        assert path.stat().st_size == len(payload)
        assert path.read_bytes()[:2] == b"\xff\xd8"

    def test_short_write_removes_partial_file(self, storage):
        with pytest.raises(StorageError, match="Short write"):
            storage.write_original("alice", "cut.bin", io.BytesIO(b"abc"), expected_size=10)
        assert not (storage.user_dir("alice") / "cut.bin").exists()

    def test_remove_reports_whether_file_existed(self, storage):
        path = storage.write_original("alice", "a.txt", io.BytesIO(b"x"))
        assert storage.remove(path) is True
        assert storage.remove(path) is False
        assert storage.remove(None) is False


class TestArchiveService:

    def test_archive_entries_relative_to_user_root(self, storage):
        storage.write_original("alice", "trip/beach.jpg", io.BytesIO(b"jpeg"))
        storage.write_original("alice", "notes.txt", io.BytesIO(b"notes"))
        storage.write_original("bob", "secret.txt", io.BytesIO(b"bob only"))

        archive_path = ArchiveService(storage).build_archive("alice")
        try:
            with zipfile.ZipFile(archive_path) as archive:
                assert sorted(archive.namelist()) == ["notes.txt", "trip/beach.jpg"]
                assert archive.getinfo("notes.txt").compress_type == zipfile.ZIP_DEFLATED
                assert archive.read("trip/beach.jpg") == b"jpeg"
        finally:
            archive_path.unlink()

    def test_archive_for_unknown_user_not_found(self, storage):
        with pytest.raises(NamespaceNotFoundError):
            ArchiveService(storage).build_archive("nobody")
