"""Integration tests for the file catalog repository."""

import pytest

from vault.database import get_db_connection
from vault.exceptions import DuplicateFileError
from vault.types import FileRecord


def _record(user="alice", relative_path="beach.jpg", mime="image/jpeg", **overrides):
    values = dict(
        user=user,
        relative_path=relative_path,
        declared_name=relative_path,
        detected_mime_type=mime,
        declared_mime_type=mime,
        size_bytes=1024,
        created_at_epoch_millis=1_700_000_000_000,
    )
    values.update(overrides)
    return FileRecord(**values)


class TestDatabaseSchema:

    def test_files_table_created(self, db_path):
        with get_db_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='files'")
            assert cursor.fetchone() is not None

    def test_init_is_idempotent(self, db_path):
        from vault.database import init_database
        init_database(db_path)
        init_database(db_path)


class TestFileRepository:

    def test_insert_assigns_increasing_ids(self, catalog):
        first = catalog.insert(_record(relative_path="a.jpg"))
        second = catalog.insert(_record(relative_path="b.jpg"))
        assert second > first

    def test_get_by_id_round_trips_all_fields(self, catalog):
        record = _record(preview_ref="alice/beach.jpg.jpg")
        file_id = catalog.insert(record)

        stored = catalog.get_by_id(file_id)
        assert stored.id == file_id
        assert stored.user == "alice"
        assert stored.relative_path == "beach.jpg"
        assert stored.detected_mime_type == "image/jpeg"
        assert stored.size_bytes == 1024
        assert stored.created_at_epoch_millis == 1_700_000_000_000
        assert stored.preview_ref == "alice/beach.jpg.jpg"

    def test_get_by_id_missing_returns_none(self, catalog):
        assert catalog.get_by_id(9999) is None

    def test_duplicate_path_for_same_user_rejected(self, catalog):
        catalog.insert(_record())
        with pytest.raises(DuplicateFileError):
            catalog.insert(_record(size_bytes=1))
        assert len(catalog.query_by_user("alice")) == 1

    def test_same_path_allowed_for_different_users(self, catalog):
        catalog.insert(_record(user="alice"))
        catalog.insert(_record(user="bob"))
        assert len(catalog.query_by_user("alice")) == 1
        assert len(catalog.query_by_user("bob")) == 1

    def test_query_returns_insertion_order(self, catalog):
        for name in ["c.jpg", "a.jpg", "b.jpg"]:
            catalog.insert(_record(relative_path=name))
        assert [r.relative_path for r in catalog.query_by_user("alice")] == ["c.jpg", "a.jpg", "b.jpg"]

    def test_query_unknown_user_is_empty(self, catalog):
        catalog.insert(_record())
        assert catalog.query_by_user("bob") == []

    def test_query_is_case_sensitive_on_user(self, catalog):
        catalog.insert(_record(user="alice"))
        assert catalog.query_by_user("Alice") == []

    def test_name_filter_matches_substring(self, catalog):
        catalog.insert(_record(relative_path="beach.jpg"))
        catalog.insert(_record(relative_path="mountain.jpg"))
        results = catalog.query_by_user("alice", name_filter="EAC")
        assert [r.relative_path for r in results] == ["beach.jpg"]

    def test_name_filter_treats_wildcards_literally(self, catalog):
        catalog.insert(_record(relative_path="100%_real.jpg"))
        catalog.insert(_record(relative_path="other.jpg"))
        results = catalog.query_by_user("alice", name_filter="%_")
        assert [r.relative_path for r in results] == ["100%_real.jpg"]

    def test_type_filter_matches_prefix(self, catalog):
        catalog.insert(_record(relative_path="a.jpg", mime="image/jpeg"))
        catalog.insert(_record(relative_path="b.mp4", mime="video/mp4"))
        catalog.insert(_record(relative_path="c.png", mime="image/png"))

        images = catalog.query_by_user("alice", type_filter="image/")
        assert [r.relative_path for r in images] == ["a.jpg", "c.png"]

        videos = catalog.query_by_user("alice", type_filter="video")
        assert [r.relative_path for r in videos] == ["b.mp4"]
