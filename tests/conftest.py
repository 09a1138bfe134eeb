"""
conftest.py
-----------
Shared pytest fixtures for MindNote tests.

Provides fixtures for:
- In-memory record stores
- Record factories and sample collections
- Sample CSV documents
"""
import pytest
from datetime import datetime, timezone
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock

from mindnote.core.logging_manager import MindNoteLogger
from mindnote.database.store import StoreConfig
from mindnote.database.sql_store import SqlRecordStore
from mindnote.journal.models import Identity, Record, RecordKind


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MINDNOTE_* environment overrides out of every test."""
    monkeypatch.delenv("MINDNOTE_APP_ID", raising=False)
    monkeypatch.delenv("MINDNOTE_USER", raising=False)


# ----- Logger Fixtures -----

@pytest.fixture
def mock_logger():
    """Mock logger instance."""
    return MagicMock(spec=MindNoteLogger)


# ----- Store Fixtures -----

@pytest.fixture
def store():
    """Fresh in-memory record store in the default app namespace."""
    record_store = SqlRecordStore(StoreConfig(app_id="test-app"))
    yield record_store
    record_store.close()


@pytest.fixture
def identity():
    """Persistent test identity."""
    return Identity(user_id="alice")


# ----- Record Factories -----

@pytest.fixture
def make_record():
    """Factory for in-memory Record values."""
    counter = {"n": 0}

    def _make(date="2024-05-01", kind=RecordKind.BRAIN_DUMP, **fields):
        counter["n"] += 1
        fields.setdefault("id", f"rec-{counter['n']}")
        fields.setdefault(
            "created_at", datetime(2024, 1, 1, tzinfo=timezone.utc)
        )
        return Record(date=date, kind=kind, **fields)

    return _make


@pytest.fixture
def sample_records(make_record):
    """A small mixed collection spanning two months."""
    return [
        make_record("2024-05-03", RecordKind.EMOTION, title="Good coffee", mood=4),
        make_record("2024-05-01", RecordKind.MORNING_PAGE, content="Woke up early"),
        make_record("2024-05-03", RecordKind.BRAIN_DUMP, content="Coffee, tabs, inbox"),
        make_record(
            "2024-04-28",
            RecordKind.RETROSPECTIVE,
            title="April",
            content="## Keep\nWalks\n\n## Problem\nLate nights\n\n## Try\nBed by 11",
        ),
        make_record("2024-05-01", RecordKind.EMOTION, title="Rainy", mood=2),
    ]


# ----- CSV Fixtures -----

@pytest.fixture
def sample_csv():
    """A backup as written by the export, with one malformed row."""
    return (
        "\ufeffID,Date,Type,Title,Content,Mood,Tags\n"
        'a1,2024-05-01,감정 일지,"Sunny","Felt ""great"" today",4,walk,sun\n'
        "broken,row,here\n"
        'a2,2024-05-02,모닝 페이지,"","Pages\nwith two lines",,\n'
    )
