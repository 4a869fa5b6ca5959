"""Concurrent multi-resource loads.

Each loader fans out with ``asyncio.gather`` over blocking gateway calls
run in threads. If any part fails the whole load raises, so a screen
never renders half a view.
"""

import asyncio
import logging

from tasklane.api import Gateway
from tasklane.errors import NotFound, RequestError
from tasklane.model.entities import Board, Task, TaskComment, User

logger = logging.getLogger(__name__)


async def load_board_view(gateway: Gateway, board_id: str) -> tuple[Board, list[Task]]:
    """A board and its tasks. Raises NotFound if the board is gone.

    Both requests run together; a missing board wins over a failed task list.
    """
    board, tasks = await asyncio.gather(
        asyncio.to_thread(gateway.boards.get, board_id),
        asyncio.to_thread(gateway.tasks.list_for_board, board_id),
        return_exceptions=True,
    )
    if isinstance(board, Exception):
        raise board
    if board is None:
        raise NotFound(f"Board {board_id} not found")
    if isinstance(tasks, Exception):
        raise tasks
    return board, tasks


async def load_board_tasks(gateway: Gateway, board_id: str) -> list[Task]:
    return await asyncio.to_thread(gateway.tasks.list_for_board, board_id)


async def _tasks_per_board(gateway: Gateway, boards: list[Board]) -> list[list[Task]]:
    return await asyncio.gather(*(asyncio.to_thread(gateway.tasks.list_for_board, b.id) for b in boards))


async def load_boards_with_counts(gateway: Gateway) -> list[tuple[Board, int]]:
    boards = await asyncio.to_thread(gateway.boards.list)
    per_board = await _tasks_per_board(gateway, boards)
    return [(board, len(tasks)) for board, tasks in zip(boards, per_board)]


async def load_dashboard(gateway: Gateway) -> tuple[list[Board], list[Task]]:
    """All boards, then every board's tasks concurrently, flattened."""
    boards = await asyncio.to_thread(gateway.boards.list)
    per_board = await _tasks_per_board(gateway, boards)
    return boards, [task for tasks in per_board for task in tasks]


async def load_users_by_id(gateway: Gateway, user_ids) -> dict[str, User]:
    """Look up each distinct user. A user that fails to load is left out."""
    ids = sorted({uid for uid in user_ids if uid})

    async def one(user_id: str) -> User | None:
        try:
            return await asyncio.to_thread(gateway.users.get, user_id)
        except RequestError as exc:
            logger.warning("could not load user %s: %s", user_id, exc)
            return None

    users = await asyncio.gather(*(one(uid) for uid in ids))
    return {user.id: user for user in users if user is not None}


async def load_task_details(gateway: Gateway, task: Task) -> tuple[User | None, list[TaskComment]]:
    """The task's assignee (if any) and its comments."""

    async def assignee() -> User | None:
        if not task.assigned_to:
            return None
        return await asyncio.to_thread(gateway.users.get, task.assigned_to)

    user, comments = await asyncio.gather(assignee(), asyncio.to_thread(gateway.comments.list_for_task, task.id))
    return user, comments


async def find_task(gateway: Gateway, task_id: str) -> Task:
    """Search every visible board for a task. Raises NotFound.

    The API has no single-task endpoint, so this is one board list plus
    one task list per board.
    """
    _boards, tasks = await load_dashboard(gateway)
    for task in tasks:
        if task.id == task_id:
            return task
    raise NotFound(f"Task '{task_id}' not found.")
