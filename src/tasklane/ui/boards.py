"""Board list screen."""

from typing import assert_never

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import Footer, ListItem, ListView, Static

from tasklane.controllers import CreateBoard, DeleteBoard, EditBoard
from tasklane.errors import RequestError
from tasklane.loaders import load_boards_with_counts
from tasklane.model.cache import ViewCache
from tasklane.model.entities import Board
from tasklane.modes import IDLE, Assigning, Commenting, Deleting, Editing, Idle, UiMode
from tasklane.ui.board import BoardScreen
from tasklane.ui.constants import ICON_BOARD
from tasklane.ui.dialogs import BoardFormScreen, ConfirmDeleteScreen
from tasklane.ui.watcher import CacheWatcherMixin


class BoardItem(ListItem):
    """One row of the board list."""

    DEFAULT_CSS = """
    BoardItem {
        height: auto;
        padding: 0 1;
    }
    BoardItem > Horizontal {
        height: auto;
    }
    BoardItem .board-name {
        width: 1fr;
        text-style: bold;
    }
    BoardItem .board-count {
        width: auto;
        color: $text-muted;
    }
    BoardItem .board-description {
        color: $text-muted;
    }
    """

    def __init__(self, board: Board, task_count: int) -> None:
        super().__init__()
        self.board = board
        self.task_count = task_count

    def compose(self) -> ComposeResult:
        tasks = "task" if self.task_count == 1 else "tasks"
        with Horizontal():
            yield Static(f"{ICON_BOARD} {self.board.name}", classes="board-name", markup=False)
            yield Static(f"{self.task_count} {tasks}", classes="board-count")
        yield Static(self.board.description or "No description", classes="board-description", markup=False)


class BoardsScreen(CacheWatcherMixin, Screen):
    """All boards visible to the signed-in user."""

    BINDINGS = [
        ("n", "new_board", "New board"),
        ("e", "edit_board", "Edit"),
        Binding("d", "delete_board", "Delete"),
        ("r", "refresh", "Refresh"),
    ]

    CSS = """
    BoardsScreen #heading {
        height: 1;
        padding: 0 1;
        text-style: bold;
        background: $boost;
    }
    BoardsScreen #empty {
        padding: 1 2;
        color: $text-muted;
    }
    """

    def __init__(self) -> None:
        self._init_watcher()
        super().__init__()
        self.cache = ViewCache()
        self.counts: dict[str, int] = {}
        self.ui_mode: UiMode = IDLE
        self._returning = False

    def compose(self) -> ComposeResult:
        yield Static("My Boards", id="heading")
        yield ListView(id="boards")
        yield Static("No boards yet. Press n to create your first board.", id="empty")
        yield Footer()

    def on_mount(self) -> None:
        self.cache_watch(self.cache, "boards", self._on_boards_changed)
        self.load()

    def on_screen_resume(self) -> None:
        if self._returning:
            self._returning = False
            self.load()

    @work(exclusive=True, group="load")
    async def load(self) -> None:
        try:
            rows = await load_boards_with_counts(self.app.gateway)
        except RequestError as exc:
            self.notify(str(exc), title="Failed to load boards. Please try again.", severity="error")
            return
        self.counts = {board.id: count for board, count in rows}
        self.cache.replace(boards=[board for board, _ in rows])

    async def reload(self) -> None:
        rows = await load_boards_with_counts(self.app.gateway)
        self.counts = {board.id: count for board, count in rows}
        self.cache.replace(boards=[board for board, _ in rows])

    def _on_boards_changed(self, cache, key, old, new) -> None:
        self.call_later(self._rebuild, new)

    async def _rebuild(self, boards: list[Board]) -> None:
        list_view = self.query_one("#boards", ListView)
        index = list_view.index
        await list_view.clear()
        await list_view.extend(BoardItem(board, self.counts.get(board.id, 0)) for board in boards)
        if boards:
            list_view.index = min(index or 0, len(boards) - 1)
        self.query_one("#empty", Static).display = not boards

    def selected_board(self) -> Board | None:
        item = self.query_one("#boards", ListView).highlighted_child
        return item.board if isinstance(item, BoardItem) else None

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        event.stop()
        if isinstance(event.item, BoardItem):
            self.open_board(event.item.board)

    def open_board(self, board: Board) -> None:
        app = self.app
        user = app.session.current_user
        self._returning = True
        app.push_screen(BoardScreen(app.gateway, board.id, audit=app.audit, current_user_id=user.id if user else None))

    def action_refresh(self) -> None:
        self.load()

    def action_new_board(self) -> None:
        self.open(Editing(None))

    def action_edit_board(self) -> None:
        board = self.selected_board()
        if board is not None:
            self.open(Editing(board))

    def action_delete_board(self) -> None:
        board = self.selected_board()
        if board is not None:
            self.open(Deleting(board))

    def open(self, mode: UiMode) -> None:
        """Show the dialog for ``mode``."""
        self.ui_mode = mode
        args = (self.app.gateway, self.notify)
        match mode:
            case Idle():
                return
            case Editing(entity=Board() as board):
                screen = BoardFormScreen(EditBoard(board, *args, on_success=self.reload), board)
            case Editing():
                screen = BoardFormScreen(CreateBoard(*args, on_success=self.reload))
            case Deleting(entity=Board() as board):
                screen = ConfirmDeleteScreen(
                    DeleteBoard(board, *args, on_success=self.reload),
                    "Delete Board",
                    f'Are you sure you want to delete "{board.name}"? '
                    "This will also delete all tasks in this board. This action cannot be undone.",
                )
            case Deleting() | Assigning() | Commenting():
                self.ui_mode = IDLE
                return
            case _:
                assert_never(mode)
        self.app.push_screen(screen, self._on_dialog_closed)

    def _on_dialog_closed(self, result) -> None:
        self.ui_mode = IDLE
