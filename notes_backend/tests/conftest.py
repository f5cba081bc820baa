from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from local_notes.alerts import AlertQueue
from local_notes.api.main import app, get_workspace
from local_notes.db import make_session_factory
from local_notes.storage import LocalStorage, NotesPersistence
from local_notes.store import NoteStore
from local_notes.workspace import Workspace


class ManualTimer:
    """Stand-in for threading.Timer that only fires when the test says so."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


@pytest.fixture
def timers():
    """Every ManualTimer created by the alert queue, oldest first."""
    return []


@pytest.fixture
def alerts(timers):
    def factory(interval, function):
        timer = ManualTimer(interval, function)
        timers.append(timer)
        return timer

    queue = AlertQueue(delay=3.0, timer_factory=factory)
    yield queue
    queue.close()


# --- Storage on a throwaway SQLite file per test ---
@pytest.fixture
def session_factory(tmp_path):
    return make_session_factory(f"sqlite:///{tmp_path / 'notes.db'}")


@pytest.fixture
def persistence(session_factory):
    return NotesPersistence(LocalStorage(session_factory))


@pytest.fixture
def store(persistence):
    note_store = NoteStore(persistence)
    note_store.initialize()
    return note_store


@pytest.fixture
def workspace(session_factory, alerts):
    ws = Workspace.from_session_factory(session_factory, alerts=alerts)
    ws.initialize()
    return ws


@pytest.fixture
def client(workspace):
    app.dependency_overrides[get_workspace] = lambda: workspace
    yield TestClient(app)
    app.dependency_overrides.clear()
