"""Tests for dashboard metrics."""

import pytest

from tasklane.metrics import DashboardStats, compute_metrics, percent
from tasklane.model.entities import Status, Task


def _tasks(*statuses):
    return [Task(id=str(i), board_id="1", title=f"t{i}", status=s) for i, s in enumerate(statuses)]


def test_percent():
    assert percent(1, 4) == 25.0
    assert percent(0, 0) == 0.0


def test_counts_and_distribution():
    metrics = compute_metrics(_tasks("todo", "todo", "in-progress", "done", "done", "done"))

    assert metrics.total == 6
    assert metrics.todo == 2
    assert metrics.in_progress == 1
    assert metrics.done == 3
    assert metrics.completed == 3
    assert metrics.pending == 3

    shares = {share.status: share for share in metrics.distribution}
    assert round(shares[Status.TODO].percent, 1) == 33.3
    assert round(shares[Status.IN_PROGRESS].percent, 1) == 16.7
    assert shares[Status.DONE].percent == 50.0
    assert [share.title for share in metrics.distribution] == ["To Do", "In Progress", "Done"]


def test_empty_task_list():
    metrics = compute_metrics([])

    assert metrics.total == 0
    assert metrics.completed == 0
    assert metrics.pending == 0
    assert [share.count for share in metrics.distribution] == [0, 0, 0]
    assert [share.percent for share in metrics.distribution] == [0.0, 0.0, 0.0]


def test_count_by_status():
    metrics = compute_metrics(_tasks("todo", "done"))
    assert metrics.count("todo") == 1
    assert metrics.count(Status.IN_PROGRESS) == 0


def test_count_unknown_status():
    with pytest.raises(ValueError):
        compute_metrics([]).count("blocked")


def test_dashboard_tiles():
    stats = DashboardStats.from_lists(["a", "b"], _tasks("todo", "done", "done"))
    assert stats.tiles() == [
        ("Total Boards", 2),
        ("Total Tasks", 3),
        ("Completed", 2),
        ("Pending", 1),
    ]
