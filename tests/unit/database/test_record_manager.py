"""Tests for RecordManager."""
import pytest
from datetime import date
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from mindnote.core.exceptions import (
    RecordNotFoundError,
    RecordValidationError,
    StoreError,
    ValidationError,
)
from mindnote.database.managers import RecordManager
from mindnote.database.models import Base, RecordRow
from mindnote.journal.models import RecordKind


@pytest.fixture
def session():
    """In-memory SQLite session with the schema created."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    with Session(engine) as db_session:
        yield db_session
    engine.dispose()


@pytest.fixture
def manager(session, mock_logger):
    """RecordManager bound to the test session."""
    return RecordManager(session, mock_logger)


class TestCreate:
    """Tests for RecordManager.create."""

    def test_create_assigns_id_and_timestamps(self, manager):
        """Created rows should get an id and created_at."""
        row = manager.create("app", "alice", {"date": "2024-05-01", "kind": "Emotion", "mood": 4})

        assert row.id
        assert row.created_at is not None
        assert row.date == date(2024, 5, 1)
        assert row.kind is RecordKind.EMOTION
        assert row.mood == 4
        assert row.title == ""
        assert row.tags == []

    @pytest.mark.parametrize("missing", ["date", "kind"])
    def test_required_fields(self, manager, missing):
        """date and kind should be required."""
        metadata = {"date": "2024-05-01", "kind": "BrainDump"}
        del metadata[missing]
        with pytest.raises(ValidationError, match=missing):
            manager.create("app", "alice", metadata)

    def test_mood_check_constraint(self, manager, session):
        """The database should refuse moods outside 1-5."""
        row = manager.create("app", "alice", {"date": "2024-05-01", "kind": "Emotion"})
        row.mood = 9
        with pytest.raises(Exception):
            session.flush()

    def test_to_record(self, manager):
        """to_record should produce a domain value with ISO date."""
        row = manager.create(
            "app", "alice",
            {"date": "2024-05-01", "kind": "BrainDump", "content": "c", "tags": ["x"]},
        )
        record = row.to_record()

        assert record.id == row.id
        assert record.date == "2024-05-01"
        assert record.tags == ["x"]


class TestLookupAndOrdering:
    """Tests for get, require and list_for."""

    def test_scoped_by_owner(self, manager):
        """Rows of another user or app should be invisible."""
        row = manager.create("app", "alice", {"date": "2024-05-01", "kind": "BrainDump"})

        assert manager.get("app", "alice", row.id) is row
        assert manager.get("app", "bob", row.id) is None
        assert manager.get("other", "alice", row.id) is None
        with pytest.raises(RecordNotFoundError):
            manager.require("app", "bob", row.id)

    def test_list_order(self, manager):
        """Rows should be ordered by date desc, then newest first."""
        manager.create("app", "u", {"date": "2024-05-01", "kind": "BrainDump", "title": "1"})
        manager.create("app", "u", {"date": "2024-05-02", "kind": "BrainDump", "title": "2"})
        manager.create("app", "u", {"date": "2024-05-01", "kind": "BrainDump", "title": "3"})

        titles = [row.title for row in manager.list_for("app", "u")]

        assert titles == ["2", "3", "1"]
        assert manager.count("app", "u") == 3


class TestUpdateDelete:
    """Tests for update and delete."""

    def test_update_preserves_unlisted_fields(self, manager):
        """Only listed fields should change; id and created_at stay."""
        row = manager.create(
            "app", "u", {"date": "2024-05-01", "kind": "Emotion", "title": "t", "mood": 2}
        )
        created_at = row.created_at

        manager.update(row, {"content": "new"})

        assert row.title == "t"
        assert row.mood == 2
        assert row.content == "new"
        assert row.created_at == created_at

    def test_update_rejects_kind_change(self, manager):
        """Changing the kind should raise RecordValidationError."""
        row = manager.create("app", "u", {"date": "2024-05-01", "kind": "BrainDump"})
        with pytest.raises(RecordValidationError):
            manager.update(row, {"kind": "Emotion"})
        assert row.kind is RecordKind.BRAIN_DUMP

    def test_update_mood_ignored_for_non_emotion(self, manager):
        """Setting a mood on a brain dump should leave it empty."""
        row = manager.create("app", "u", {"date": "2024-05-01", "kind": "BrainDump"})
        manager.update(row, {"mood": 3})
        assert row.mood is None

    def test_delete_is_permanent(self, manager, session):
        """Deleted rows should be gone from the table."""
        row = manager.create("app", "u", {"date": "2024-05-01", "kind": "BrainDump"})
        manager.delete(row)
        assert session.query(RecordRow).count() == 0


class TestBulkCreate:
    """Tests for bulk_create."""

    def test_bulk_create_in_order(self, manager):
        """Rows should be returned in input order."""
        rows = manager.bulk_create(
            "app", "u",
            [
                {"date": "2024-05-01", "kind": "BrainDump", "title": "a"},
                {"date": "2024-05-02", "kind": RecordKind.EMOTION, "title": "b", "mood": 1},
            ],
        )
        assert [row.title for row in rows] == ["a", "b"]
        assert manager.count("app", "u") == 2

    def test_invalid_item_adds_nothing(self, manager, session):
        """One invalid item should leave the session untouched."""
        with pytest.raises(ValidationError):
            manager.bulk_create(
                "app", "u",
                [
                    {"date": "2024-05-01", "kind": "BrainDump"},
                    {"date": "not a date", "kind": "BrainDump"},
                ],
            )
        assert session.query(RecordRow).count() == 0


class TestRetryOnLock:
    """Tests for the lock retry inherited from BaseManager."""

    @patch("mindnote.database.managers.base_manager.time.sleep")
    def test_retries_locked_database(self, mock_sleep, manager):
        """A 'database is locked' error should be retried with backoff."""
        calls = {"n": 0}

        def flaky():
            calls["n"] += 1
            if calls["n"] < 3:
                raise OperationalError("INSERT", {}, Exception("database is locked"))
            return "ok"

        assert manager._retry_on_lock(flaky, "create") == "ok"
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.1, 0.2]

    @patch("mindnote.database.managers.base_manager.time.sleep")
    def test_lock_retries_are_logged(self, mock_sleep, manager, mock_logger):
        """Each retry should be logged as a warning naming the write."""
        calls = {"n": 0}

        def flaky():
            calls["n"] += 1
            if calls["n"] == 1:
                raise OperationalError("UPDATE", {}, Exception("database is busy"))
            return "ok"

        manager._retry_on_lock(flaky, "update")

        message, details = mock_logger.log_warning.call_args[0]
        assert "during update" in message
        assert details == {"attempt": 1, "pause_seconds": 0.1}

    @patch("mindnote.database.managers.base_manager.time.sleep")
    def test_lock_held_after_last_attempt(self, mock_sleep, manager):
        """A lock that never clears should surface after three attempts."""
        calls = {"n": 0}

        def locked():
            calls["n"] += 1
            raise OperationalError("INSERT", {}, Exception("database is locked"))

        with pytest.raises(OperationalError):
            manager._retry_on_lock(locked)
        assert calls["n"] == 3
        assert mock_sleep.call_count == 2

    @patch("mindnote.database.managers.base_manager.time.sleep")
    def test_other_operational_errors_not_retried(self, mock_sleep, manager):
        """Non-lock errors should propagate on the first attempt."""

        def broken():
            raise OperationalError("SELECT", {}, Exception("no such table"))

        with pytest.raises(OperationalError):
            manager._retry_on_lock(broken)
        mock_sleep.assert_not_called()

    def test_operational_error_surfaces_as_store_error(self, manager):
        """Public methods should convert exhausted retries to StoreError."""
        with patch.object(
            manager.session, "flush",
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
        ):
            with pytest.raises(StoreError):
                manager.create("app", "u", {"date": "2024-05-01", "kind": "BrainDump"})
