"""
Pytest configuration and shared fixtures for all tests.

This module provides the temporary record store, sample principals and an
in-memory versioned record used across the unit tests.
"""
import pytest
import os
from datetime import datetime, timedelta, timezone
from itertools import count
from unittest.mock import MagicMock

from storage import local_store
from backend.app.models.records import load_record
from backend.app.models.versioning import Principal, VersionSnapshot


class FakeVersionedRecord:
    """In-memory record implementing the versioned capability; restore is a mock."""

    def __init__(self, record_id=7, versions=(1, 2, 3), current=None, title="About us",
                 singular_name="Page", has_sort=True):
        self.id = record_id
        self.title = title
        self.singular_name = singular_name
        self.has_sort = has_sort
        self._current = current if current is not None else max(versions)
        self._history = [
            VersionSnapshot(
                record_id=record_id,
                version=n,
                created=f"2024-01-0{n}T09:00:00+00:00" if n < 10 else "2024-02-01T09:00:00+00:00",
                title=f"{title} v{n}",
                fields={"content": f"Body {n}", "summary": f"Summary {n}"},
                sort=n if has_sort else None,
            )
            for n in versions
        ]
        self.restore_recursive = MagicMock(return_value=True)

    def current_version(self):
        return self._current

    def history(self):
        return list(self._history)

    def is_latest(self, version):
        return version == self._current

    def edit_link(self):
        return f"/admin/records/{self.id}/edit"


class FakePlainRecord:
    """A record type without version history."""

    def __init__(self, record_id=8):
        self.id = record_id
        self.title = "Site settings"
        self.singular_name = "Site config"


@pytest.fixture
def make_record():
    return FakeVersionedRecord


@pytest.fixture
def fake_record():
    return FakeVersionedRecord()


@pytest.fixture
def plain_record():
    return FakePlainRecord()


@pytest.fixture
def editor():
    return Principal(id="editor", permissions=frozenset({"records.view", "records.edit"}))


@pytest.fixture
def viewer():
    return Principal(id="viewer", permissions=frozenset({"records.view"}))


@pytest.fixture
def stranger():
    return Principal(id="stranger")


@pytest.fixture
def record_store(tmp_path, monkeypatch):
    """Point the JSON store at a temporary file with a strictly increasing clock."""
    monkeypatch.setattr(local_store, "RECORDS_FILE", str(tmp_path / "records_index.json"))
    start = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    ticks = count()
    monkeypatch.setattr(
        local_store, "_now",
        lambda: (start + timedelta(minutes=next(ticks))).isoformat(timespec="seconds"),
    )
    yield local_store


@pytest.fixture
def stored_record(record_store):
    """Record #7 with versions 1, 2 and 3 (current)."""
    record_store.put_record(7, "Page", "About us (draft)", {"content": "First"}, sort=1)
    record_store.write_record(7, title="About us (review)", fields={"content": "Second"})
    record_store.write_record(7, title="About us", fields={"content": "Third"}, sort=2)
    return load_record(7)


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up test environment before each test."""
    os.environ["APP_ENV"] = "test"
    os.environ["LANGSMITH_TRACING"] = "0"  # Disable tracing in tests

    yield
