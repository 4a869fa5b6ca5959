"""Shared fixtures: an in-memory backend and a gateway signed in to it."""

import pytest

from tasklane.api import Gateway
from tasklane.api.memory import MemoryBackend, MemoryTransport


class Notes:
    """Stands in for ``App.notify``; records every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, message, *, title="", severity="information"):
        self.calls.append((severity, title, message))

    @property
    def errors(self):
        return [(title, message) for severity, title, message in self.calls if severity == "error"]

    @property
    def messages(self):
        return [message for _severity, _title, message in self.calls]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the saved session and API URL away from the real user config."""
    monkeypatch.setenv("TASKLANE_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("TASKLANE_API_URL", raising=False)
    return tmp_path / "config"


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def owner(backend):
    """The signed-in user."""
    return backend.add_user("owner", "owner@example.com", "secret1")


@pytest.fixture
def alice(backend):
    return backend.add_user("alice", "alice@example.com")


@pytest.fixture
def gateway(backend, owner):
    return Gateway(MemoryTransport(backend, backend.issue_token(owner["id"])))


@pytest.fixture
def board(gateway):
    return gateway.boards.create("Roadmap", "Things to build")


@pytest.fixture
def tasks(gateway, board):
    """One task in each column: todo, in-progress, done."""
    return [
        gateway.tasks.create(board.id, "Write docs", status="todo", priority="low"),
        gateway.tasks.create(board.id, "Fix login", status="in-progress", priority="high"),
        gateway.tasks.create(board.id, "Ship v1", status="done"),
    ]


@pytest.fixture
def notes():
    return Notes()
