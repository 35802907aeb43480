"""Tests for the conversation MemoryStore."""

import json
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from goclaw.core.exceptions import StorageError
from goclaw.repositories.inmemory import InMemoryMessageRepository
from goclaw.services.memory_store import MemoryStore


def _append_turns(store, n):
    for i in range(n):
        store.append("user" if i % 2 == 0 else "assistant", f"m{i}")


class TestAppendAndHistory:
    """Tests for ordering guarantees."""

    def test_history_preserves_append_order(self, memory_store):
        """Test history returns messages in append order."""
        contents = [f"message {i}" for i in range(20)]
        for i, content in enumerate(contents):
            memory_store.append("user" if i % 2 == 0 else "assistant", content)
        assert [m.content for m in memory_store.history()] == contents

    def test_timestamps_strictly_increasing(self, memory_store):
        """Test rapid appends never share a timestamp."""
        _append_turns(memory_store, 50)
        stamps = [m.timestamp for m in memory_store.history()]
        assert all(a < b for a, b in zip(stamps, stamps[1:]))

    def test_history_limit_returns_oldest(self, memory_store):
        """Test history(limit) takes from the start."""
        _append_turns(memory_store, 5)
        assert [m.content for m in memory_store.history(2)] == ["m0", "m1"]

    def test_recent_limit_returns_newest_ascending(self, memory_store):
        """Test recent(limit) takes the tail in ascending order."""
        _append_turns(memory_store, 5)
        assert [m.content for m in memory_store.recent(2)] == ["m3", "m4"]

    def test_negative_limit_returns_everything(self, memory_store):
        """Test limit -1 means unbounded."""
        _append_turns(memory_store, 5)
        assert len(memory_store.history(-1)) == 5
        assert len(memory_store.recent(-1)) == 5

    def test_empty_content_allowed(self, memory_store):
        """Test empty content is stored as empty string."""
        memory_store.append("assistant", "")
        assert memory_store.history()[0].content == ""

    def test_invalid_role_rejected(self, memory_store):
        """Test unknown roles raise ValueError."""
        with pytest.raises(ValueError):
            memory_store.append("robot", "beep")
        assert memory_store.count() == 0

    def test_to_provider_format(self, memory_store):
        """Test provider format is role/content pairs of the newest rows."""
        _append_turns(memory_store, 5)
        assert memory_store.to_provider_format(4) == [
            {"role": "assistant", "content": "m1"},
            {"role": "user", "content": "m2"},
            {"role": "assistant", "content": "m3"},
            {"role": "user", "content": "m4"},
        ]

    def test_session_id_scopes_rows(self, message_repository):
        """Test two stores on one repository stay separate."""
        a = MemoryStore(message_repository, "a")
        b = MemoryStore(message_repository, "b")
        a.append("user", "only in a")
        assert b.count() == 0
        assert a.session_id == "a"


class TestClearAndCount:
    """Tests for clear and count."""

    def test_clear_idempotent(self, memory_store):
        """Test clearing twice is the same as clearing once."""
        _append_turns(memory_store, 3)
        assert memory_store.clear() == 3
        assert memory_store.clear() == 0
        assert memory_store.count() == 0

    def test_count(self, memory_store):
        """Test count tracks appends."""
        _append_turns(memory_store, 4)
        assert memory_store.count() == 4


class TestImportExport:
    """Tests for the JSON round-trip."""

    def test_round_trip_into_fresh_store(self, memory_store):
        """Test import(export()) reproduces role/content sequence."""
        _append_turns(memory_store, 6)
        memory_store.append("assistant", "多语言 ✓")

        fresh = MemoryStore(InMemoryMessageRepository(), "other")
        count = fresh.import_json(memory_store.export_json())

        assert count == 7
        assert [(m.role, m.content) for m in fresh.history()] == [
            (m.role, m.content) for m in memory_store.history()
        ]

    def test_export_shape(self, memory_store):
        """Test exported JSON carries role, content and timestamp."""
        memory_store.append("user", "hi")
        data = json.loads(memory_store.export_json())
        assert data[0]["role"] == "user"
        assert data[0]["content"] == "hi"
        assert "timestamp" in data[0]

    def test_export_keeps_non_ascii(self, memory_store):
        """Test export does not escape non-ASCII text."""
        memory_store.append("user", "你好")
        assert "你好" in memory_store.export_json()

    def test_import_invalid_json(self, memory_store):
        """Test malformed input raises StorageError."""
        with pytest.raises(StorageError):
            memory_store.import_json("not json")

    def test_import_requires_array(self, memory_store):
        """Test a JSON object is rejected."""
        with pytest.raises(StorageError):
            memory_store.import_json('{"role": "user"}')

    def test_import_is_all_or_nothing(self, memory_store):
        """Test a bad element rejects the whole import."""
        payload = json.dumps([{"role": "user", "content": "ok"}, {"role": "bogus", "content": "x"}])
        with pytest.raises(StorageError):
            memory_store.import_json(payload)
        assert memory_store.count() == 0

    @pytest.mark.parametrize("content", [0, False, None, {"text": "hi"}, ["a"]])
    def test_import_rejects_non_string_content(self, memory_store, content):
        """Test content must be a string; nothing is coerced."""
        payload = json.dumps([{"role": "user", "content": "ok"}, {"role": "user", "content": content}])
        with pytest.raises(StorageError):
            memory_store.import_json(payload)
        assert memory_store.count() == 0

    def test_import_keeps_empty_string_content(self, memory_store):
        """Test an empty string is imported as-is."""
        assert memory_store.import_json(json.dumps([{"role": "assistant", "content": ""}])) == 1
        assert memory_store.history()[0].content == ""


class TestLifecycle:
    """Tests for open/close and error translation."""

    def test_open_creates_parent_directory(self, tmp_path):
        """Test MemoryStore.open creates missing directories."""
        path = tmp_path / "nested" / "dir" / "goclaw.db"
        store = MemoryStore.open(path)
        store.append("user", "hi")
        store.close()
        assert path.exists()

    def test_history_survives_reopen(self, tmp_path):
        """Test a restart reads prior history intact."""
        path = tmp_path / "goclaw.db"
        store = MemoryStore.open(path)
        _append_turns(store, 4)
        store.close()

        reopened = MemoryStore.open(path)
        assert [m.content for m in reopened.history()] == ["m0", "m1", "m2", "m3"]
        reopened.close()

    def test_close_idempotent(self, sqlite_store):
        """Test close can be called twice."""
        sqlite_store.close()
        sqlite_store.close()
        assert sqlite_store.closed is True

    def test_use_after_close_raises(self, memory_store):
        """Test operations on a closed store raise StorageError."""
        memory_store.close()
        with pytest.raises(StorageError):
            memory_store.append("user", "late")

    def test_database_errors_wrapped(self):
        """Test SQLAlchemy errors surface as StorageError."""
        repository = MagicMock()
        repository.last_timestamp.return_value = None
        repository.add.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))
        store = MemoryStore(repository)

        with pytest.raises(StorageError) as exc_info:
            store.append("user", "hi")

        assert exc_info.value.operation == "append"

    def test_sqlite_backend_matches_inmemory(self, sqlite_store):
        """Test the SQLite store honours recent/history the same way."""
        _append_turns(sqlite_store, 5)
        assert [m.content for m in sqlite_store.recent(2)] == ["m3", "m4"]
        assert [m.content for m in sqlite_store.history(2)] == ["m0", "m1"]
