"""View-local snapshot of loaded entities with change notification."""

from __future__ import annotations

from typing import Any, Callable

from tasklane.model.entities import Status, Task, User

Callback = Callable[["ViewCache", str, Any, Any], None]

KEYS = ("board", "boards", "tasks", "users", "comments")


class ViewCache:
    """Snapshot of what a screen has loaded.

    Each key is only ever replaced wholesale by ``replace``; nothing is
    patched in place, so a reload always reflects the server exactly and
    local edits are never merged in. Replacing a key fires its watchers.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {
            "board": None,
            "boards": [],
            "tasks": [],
            "users": [],
            "comments": [],
        }
        self._watchers: dict[str, list[Callback]] = {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def replace(self, **snapshot: Any) -> None:
        """Swap the given keys for new values and notify watchers."""
        unknown = set(snapshot) - set(KEYS)
        if unknown:
            raise KeyError(f"unknown cache keys: {', '.join(sorted(unknown))}")
        for key, new in snapshot.items():
            if key != "board":
                new = list(new)
            old = self._data[key]
            self._data[key] = new
            for cb in list(self._watchers.get(key, ())):
                cb(self, key, old, new)
            for cb in list(self._watchers.get("*", ())):
                cb(self, key, old, new)

    def watch(self, key: str, callback: Callback) -> Callable[[], None]:
        """Watch a key ("*" for all). Returns an unwatch callable."""
        self._watchers.setdefault(key, []).append(callback)

        def unwatch() -> None:
            callbacks = self._watchers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unwatch

    def tasks_with_status(self, status: Status | str) -> list[Task]:
        status = Status(status)
        return [t for t in self.tasks if t.status is status]

    def task(self, task_id: str) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def user(self, user_id: str | None) -> User | None:
        if not user_id:
            return None
        return next((u for u in self.users if u.id == user_id), None)

