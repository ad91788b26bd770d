"""
Point the app at a throwaway SQLite file before anything imports
fittrack.db, and keep background tick loops out of HTTP tests.
"""
import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="fittrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["CREATE_TABLES"] = "false"

import pytest

from fittrack.db import create_tables
from fittrack.deps.profile import get_ticker
from fittrack.main import app

create_tables()


class RecordingTicker:
    """Stands in for RestTicker; records loops instead of scheduling them."""

    def __init__(self):
        self.running: set[str] = set()
        self.started: list[str] = []

    def is_running(self, key):
        return key in self.running

    def ensure(self, key, tick):
        if key in self.running:
            return False
        self.running.add(key)
        self.started.append(key)
        return True

    def stop(self, key):
        if key not in self.running:
            return False
        self.running.discard(key)
        return True

    def stop_all(self):
        self.running.clear()


@pytest.fixture(autouse=True)
def ticker():
    t = RecordingTicker()
    app.dependency_overrides[get_ticker] = lambda: t
    yield t
    app.dependency_overrides.pop(get_ticker, None)
