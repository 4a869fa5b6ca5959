"""Moving tasks between status columns."""

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from tasklane.api import Gateway
from tasklane.audit import AuditSink
from tasklane.errors import RequestError
from tasklane.model.entities import STATUS_TITLES, STATUSES, Action, Status, Task

logger = logging.getLogger(__name__)


class Notify(Protocol):
    """Same shape as ``textual.app.App.notify``."""

    def __call__(self, message: str, *, title: str = "", severity: str = "information") -> None: ...


Reload = Callable[[], Awaitable[None]]


def neighbour_status(status: Status | str, step: int) -> Status | None:
    """The column ``step`` places to the left (<0) or right (>0), or None past the edge."""
    index = STATUSES.index(Status(status)) + step
    if 0 <= index < len(STATUSES):
        return STATUSES[index]
    return None


class KanbanTransitions:
    """Drag-and-drop and keyboard moves of tasks between columns.

    Any status can move to any other in one step. At most one task is being
    dragged at a time; starting a new drag replaces the old one. A move is
    never applied locally: after the server accepts it the board's task
    list is reloaded, and after a failure the stale list is left alone.
    """

    def __init__(
        self,
        gateway: Gateway,
        notify: Notify,
        reload: Reload,
        audit: AuditSink | None = None,
    ) -> None:
        self.gateway = gateway
        self.notify = notify
        self.reload = reload
        self.audit = audit
        self.dragged: Task | None = None

    def drag_start(self, task: Task) -> None:
        self.dragged = task

    def cancel(self) -> None:
        self.dragged = None

    async def drop(self, status: Status | str) -> bool:
        """Drop the dragged task on a column. Returns True if it moved."""
        task, self.dragged = self.dragged, None
        if task is None:
            return False
        status = Status(status)
        if task.status is status:
            return False

        try:
            await asyncio.to_thread(self.gateway.tasks.update, task.id, status=status)
        except RequestError as exc:
            logger.info("move of task %s to %s failed: %s", task.id, status.value, exc)
            self.notify(str(exc), title="Failed to move task.", severity="error")
            return False

        if self.audit is not None:
            self.audit.emit(
                task.board_id,
                Action.STATUS_CHANGED,
                f'Moved "{task.title}" from {STATUS_TITLES[task.status]} to {STATUS_TITLES[status]}',
                task_id=task.id,
            )
        try:
            await self.reload()
        except RequestError as exc:
            self.notify(str(exc), title="Failed to refresh", severity="error")
        self.notify(f"Task moved to {STATUS_TITLES[status]}", title="Task moved")
        return True

    async def move(self, task: Task, status: Status | str) -> bool:
        """Keyboard move: a drag and drop in one call."""
        self.drag_start(task)
        return await self.drop(status)
