"""Tests for ViewCache."""

import pytest

from tasklane.model.cache import ViewCache
from tasklane.model.entities import Status, Task, User


def _task(task_id, status="todo"):
    return Task(id=task_id, board_id="1", title=f"Task {task_id}", status=status)


def test_starts_empty():
    cache = ViewCache()
    assert cache.board is None
    assert cache.tasks == []


def test_replace_notifies_key_watcher():
    cache = ViewCache()
    seen = []
    cache.watch("tasks", lambda c, key, old, new: seen.append((key, old, new)))

    tasks = [_task("1")]
    cache.replace(tasks=tasks)

    assert seen == [("tasks", [], tasks)]
    assert cache.tasks == tasks


def test_replace_copies_lists():
    cache = ViewCache()
    tasks = [_task("1")]
    cache.replace(tasks=tasks)
    tasks.append(_task("2"))
    assert len(cache.tasks) == 1


def test_star_watcher_sees_every_key():
    cache = ViewCache()
    keys = []
    cache.watch("*", lambda c, key, old, new: keys.append(key))
    cache.replace(tasks=[], users=[])
    assert keys == ["tasks", "users"]


def test_other_keys_do_not_notify():
    cache = ViewCache()
    seen = []
    cache.watch("users", lambda *args: seen.append(args))
    cache.replace(tasks=[_task("1")])
    assert seen == []


def test_unwatch():
    cache = ViewCache()
    seen = []
    unwatch = cache.watch("tasks", lambda *args: seen.append(args))
    unwatch()
    unwatch()
    cache.replace(tasks=[])
    assert seen == []


def test_replace_unknown_key():
    with pytest.raises(KeyError):
        ViewCache().replace(cards=[])


def test_tasks_with_status():
    cache = ViewCache()
    cache.replace(tasks=[_task("1"), _task("2", "done"), _task("3")])
    assert [t.id for t in cache.tasks_with_status(Status.TODO)] == ["1", "3"]
    assert [t.id for t in cache.tasks_with_status("done")] == ["2"]


def test_lookups():
    cache = ViewCache()
    alice = User(id="2", username="alice", email="")
    cache.replace(tasks=[_task("1")], users=[alice])
    assert cache.task("1").title == "Task 1"
    assert cache.task("9") is None
    assert cache.user("2") is alice
    assert cache.user(None) is None
    assert cache.user("9") is None


def test_unknown_attribute():
    with pytest.raises(AttributeError):
        ViewCache().cards
