"""Best-effort activity logging.

Controllers call ``emit`` after a mutation succeeds. Events are written to
the activity endpoint in the background; a failed write is logged and
dropped, never shown to the user and never retried.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass

from tasklane.api.resources import ActivityApi
from tasklane.model.entities import Action

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditEvent:
    board_id: str
    action: Action
    details: str
    task_id: str | None = None


class AuditSink:
    def __init__(self, activities: ActivityApi) -> None:
        self.activities = activities
        self.pending: deque[AuditEvent] = deque()
        self._tasks: set[asyncio.Task] = set()

    def emit(self, board_id: str, action: Action, details: str, task_id: str | None = None) -> None:
        """Queue an event. Inside a running loop, writing starts straight away."""
        self.pending.append(AuditEvent(board_id, Action(action), details, task_id))
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.drain())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Write every queued event off the event loop."""
        while self.pending:
            event = self.pending.popleft()
            await asyncio.to_thread(self._write, event)

    async def join(self) -> None:
        """Wait until every queued event has been written."""
        await self.drain()
        if self._tasks:
            await asyncio.gather(*self._tasks)

    def flush(self) -> None:
        """Write every queued event synchronously (for the CLI)."""
        while self.pending:
            self._write(self.pending.popleft())

    def _write(self, event: AuditEvent) -> None:
        try:
            self.activities.create(event.board_id, event.action, event.details, task_id=event.task_id)
        except Exception as exc:
            logger.warning("activity log write failed (%s %s): %s", event.action.value, event.board_id, exc)
