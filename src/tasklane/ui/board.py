"""Board screen showing one board's tasks in status columns."""

import asyncio
from typing import assert_never

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static

from tasklane.api import Gateway
from tasklane.audit import AuditSink
from tasklane.controllers import AssignTask, CreateTask, DeleteTask, EditTask
from tasklane.errors import NotFound, RequestError
from tasklane.kanban import KanbanTransitions, neighbour_status
from tasklane.loaders import load_board_tasks, load_board_view
from tasklane.model.cache import ViewCache
from tasklane.model.entities import STATUSES, Board, Task
from tasklane.modes import IDLE, Assigning, Commenting, Deleting, Editing, Idle, UiMode
from tasklane.ui.card import TaskCard
from tasklane.ui.column import StatusColumn
from tasklane.ui.comments import CommentsScreen
from tasklane.ui.constants import ICON_BOARD
from tasklane.ui.dialogs import AssignScreen, ConfirmDeleteScreen, TaskFormScreen


class BoardScreen(Screen):
    """Kanban view of a single board."""

    BINDINGS = [
        Binding("escape", "back", "Back"),
        ("n", "new_task", "New task"),
        ("r", "refresh", "Refresh"),
    ]

    CSS = """
    BoardScreen #board-header {
        height: auto;
        padding: 0 1;
        background: $boost;
    }
    BoardScreen #board-name {
        text-style: bold;
    }
    BoardScreen #board-description {
        color: $text-muted;
    }
    BoardScreen #columns {
        height: 1fr;
    }
    """

    def __init__(self, gateway: Gateway, board_id: str, audit: AuditSink | None = None, current_user_id=None):
        super().__init__()
        self.gateway = gateway
        self.board_id = board_id
        self.audit = audit
        self.current_user_id = current_user_id
        self.cache = ViewCache()
        self.transitions = KanbanTransitions(gateway, self.notify, self.reload, audit=audit)
        self.ui_mode: UiMode = IDLE
        self.active_drag = None
        self._focus_task_id: str | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="board-header"):
            yield Static(f"{ICON_BOARD} Loading...", id="board-name", markup=False)
            yield Static("", id="board-description", markup=False)
        with Horizontal(id="columns"):
            for status in STATUSES:
                yield StatusColumn(status, self.cache)
        yield Footer()

    def on_mount(self) -> None:
        self.load()

    @property
    def board(self) -> Board | None:
        return self.cache.board

    # -- loading --

    @work(exclusive=True, group="load")
    async def load(self) -> None:
        """Load the board, its tasks and the user list together."""
        try:
            (board, tasks), users = await asyncio.gather(
                load_board_view(self.gateway, self.board_id),
                asyncio.to_thread(self.gateway.users.list),
            )
        except NotFound:
            self.notify("The board you're looking for doesn't exist.", title="Board not found", severity="warning")
            self.app.pop_screen()
            return
        except RequestError as exc:
            self.notify(str(exc), title="Failed to load board data.", severity="error")
            self.app.pop_screen()
            return
        self.cache.replace(board=board, users=users, tasks=tasks)
        self.query_one("#board-name", Static).update(f"{ICON_BOARD} {board.name}")
        self.query_one("#board-description", Static).update(board.description)
        self.call_after_refresh(self._restore_focus)

    async def reload(self) -> None:
        """Re-fetch the task list and replace it in the cache."""
        tasks = await load_board_tasks(self.gateway, self.board_id)
        self.cache.replace(tasks=tasks)
        self.call_after_refresh(self._restore_focus)

    def _restore_focus(self) -> None:
        cards = list(self.query(TaskCard))
        target = next((c for c in cards if c.task_id == self._focus_task_id), None)
        if target is None and cards and not isinstance(self.focused, TaskCard):
            target = cards[0]
        if target is not None:
            target.focus()

    def action_refresh(self) -> None:
        self.load()

    def action_back(self) -> None:
        if self.active_drag is not None:
            self.active_drag.cancel_drag()
            return
        self.app.pop_screen()

    # -- drag and drop: screen routes mouse events to the active draggable --

    def on_mouse_move(self, event) -> None:
        if self.active_drag is not None:
            self.active_drag.drag_to(event.screen_x, event.screen_y)

    def on_mouse_up(self, event) -> None:
        if self.active_drag is not None:
            self.active_drag.release_at(event.screen_x, event.screen_y)

    def on_task_card_drag_started(self, event: TaskCard.DragStarted) -> None:
        event.stop()
        self.transitions.drag_start(event.card.item)

    def on_task_card_drag_cancelled(self, event: TaskCard.DragCancelled) -> None:
        event.stop()
        self.transitions.cancel()

    def on_status_column_task_dropped(self, event: StatusColumn.TaskDropped) -> None:
        event.stop()
        self._focus_task_id = event.card.task_id
        self.run_worker(self.transitions.drop(event.status), group="move")

    def on_task_card_move_requested(self, event: TaskCard.MoveRequested) -> None:
        event.stop()
        item = event.card.item
        target = neighbour_status(item.status, event.step)
        if target is None:
            return
        self._focus_task_id = item.id
        self.run_worker(self.transitions.move(item, target), group="move")

    # -- dialogs --

    def on_task_card_action_requested(self, event: TaskCard.ActionRequested) -> None:
        event.stop()
        item = event.card.item
        self._focus_task_id = item.id
        match event.action:
            case "edit":
                self.open(Editing(item))
            case "assign":
                self.open(Assigning(item))
            case "comments":
                self.open(Commenting(item))
            case "delete":
                self.open(Deleting(item))

    def action_new_task(self) -> None:
        self.open(Editing(None))

    def open(self, mode: UiMode) -> None:
        """Show the dialog for ``mode``."""
        self.ui_mode = mode
        args = (self.gateway, self.notify)
        opts = {"on_success": self.reload, "audit": self.audit}
        match mode:
            case Idle():
                return
            case Editing(entity=Task() as item):
                screen = TaskFormScreen(EditTask(item, *args, **opts), item)
            case Editing():
                screen = TaskFormScreen(CreateTask(self.board_id, *args, **opts), status=self._new_task_status())
            case Deleting(entity=Task() as item):
                screen = ConfirmDeleteScreen(
                    DeleteTask(item, *args, **opts),
                    "Delete Task",
                    f'Are you sure you want to delete "{item.title}"? This action cannot be undone.',
                )
            case Deleting():
                self.ui_mode = IDLE
                return
            case Assigning(task=item):
                users = list(self.cache.users)
                screen = AssignScreen(AssignTask(item, *args, users=users, **opts), users)
            case Commenting(task=item):
                screen = CommentsScreen(
                    self.gateway, item, list(self.cache.users), self.current_user_id, audit=self.audit
                )
            case _:
                assert_never(mode)
        self.app.push_screen(screen, self._on_dialog_closed)

    def _new_task_status(self):
        """New tasks start in the column of the focused card, if any."""
        focused = self.focused
        if isinstance(focused, TaskCard):
            return focused.item.status
        return STATUSES[0]

    def _on_dialog_closed(self, result) -> None:
        self.ui_mode = IDLE
        self.call_after_refresh(self._restore_focus)
