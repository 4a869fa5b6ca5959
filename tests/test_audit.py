"""Tests for the activity log side channel."""

import logging

import pytest

from tasklane.api import Gateway
from tasklane.api.transport import HttpTransport
from tasklane.audit import AuditSink
from tasklane.model.entities import Action


def test_emit_outside_loop_queues(gateway, board):
    sink = AuditSink(gateway.activities)
    sink.emit(board.id, Action.CREATED, "Created task")

    assert len(sink.pending) == 1
    assert gateway.activities.list_for_board(board.id) == []

    sink.flush()
    assert not sink.pending
    (entry,) = gateway.activities.list_for_board(board.id)
    assert entry.details == "Created task"


@pytest.mark.asyncio
async def test_emit_inside_loop_writes_in_background(gateway, board):
    sink = AuditSink(gateway.activities)
    sink.emit(board.id, "commented", "Commented", task_id="9")
    await sink.join()

    (entry,) = gateway.activities.list_for_board(board.id)
    assert entry.action is Action.COMMENTED
    assert entry.task_id == "9"


def test_failed_write_is_logged_not_raised(gateway, backend, board, caplog):
    backend.fail("POST", "/api/activities", "Audit store down")
    sink = AuditSink(gateway.activities)
    sink.emit(board.id, Action.UPDATED, "Updated")

    with caplog.at_level(logging.WARNING, logger="tasklane.audit"):
        sink.flush()

    assert "Audit store down" in caplog.text
    assert not sink.pending


def test_unknown_action_rejected(gateway):
    with pytest.raises(ValueError):
        AuditSink(gateway.activities).emit("1", "archived", "nope")


class _EmptyCreated:
    status_code = 201
    ok = True
    content = b""


class _EmptyBodySession:
    def __init__(self):
        self.sent = []

    def request(self, method, url, json=None, headers=None):
        self.sent.append((method, url))
        return _EmptyCreated()


@pytest.mark.asyncio
async def test_unreadable_write_is_logged_not_raised(caplog):
    session = _EmptyBodySession()
    gateway = Gateway(HttpTransport("http://api.test", token="abc", session=session))
    sink = AuditSink(gateway.activities)

    with caplog.at_level(logging.WARNING, logger="tasklane.audit"):
        sink.emit("1", Action.STATUS_CHANGED, "Moved to Done", task_id="7")
        await sink.join()

    assert session.sent == [("POST", "http://api.test/api/activities")]
    assert "activity log write failed (status_changed 1)" in caplog.text
    assert not sink.pending
