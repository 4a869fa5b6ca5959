"""Status columns for the board screen."""

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.message import Message
from textual.widgets import Rule, Static

from tasklane.model.cache import ViewCache
from tasklane.model.entities import STATUS_TITLES, Status
from tasklane.ui.card import TaskCard
from tasklane.ui.drag import DropTarget
from tasklane.ui.watcher import CacheWatcherMixin


class StatusColumn(CacheWatcherMixin, DropTarget, Vertical):
    """One status column, listing the cached tasks with that status."""

    DEFAULT_CSS = """
    StatusColumn {
        width: 1fr;
        height: 100%;
        padding: 0 1;
        border-right: tall $surface-lighten-1;
    }
    StatusColumn.drop-hover {
        background: $primary 15%;
    }
    StatusColumn > .column-title {
        width: 100%;
        text-align: center;
        text-style: bold;
    }
    StatusColumn > Rule.-horizontal {
        margin: 0;
    }
    StatusColumn > VerticalScroll {
        height: 1fr;
    }
    """

    class TaskDropped(Message):
        """Posted when a dragged card is released over this column."""

        def __init__(self, column: "StatusColumn", card: TaskCard) -> None:
            super().__init__()
            self.column = column
            self.card = card

        @property
        def status(self) -> Status:
            return self.column.status

    def __init__(self, status: Status, cache: ViewCache, **kwargs) -> None:
        self._init_watcher()
        super().__init__(id=f"column-{status.value}", **kwargs)
        self.status = status
        self.cache = cache

    def compose(self) -> ComposeResult:
        yield Static(self._title(), classes="column-title")
        yield Rule()
        with VerticalScroll(classes="cards", can_focus=False):
            for card in self._build_cards():
                yield card

    def on_mount(self) -> None:
        self.cache_watch(self.cache, "tasks", self._on_cache_changed)
        self.cache_watch(self.cache, "users", self._on_cache_changed)

    def _title(self) -> str:
        return f"{STATUS_TITLES[self.status]} ({len(self.cache.tasks_with_status(self.status))})"

    def _build_cards(self) -> list[TaskCard]:
        return [TaskCard(t, self.cache.user(t.assigned_to)) for t in self.cache.tasks_with_status(self.status)]

    def _on_cache_changed(self, cache, key, old, new) -> None:
        self.query_one(".column-title", Static).update(self._title())
        container = self.query_one(".cards", VerticalScroll)
        container.remove_children()
        container.mount_all(self._build_cards())

    @property
    def cards(self) -> list[TaskCard]:
        return list(self.query(TaskCard))

    # -- DropTarget: column accepting task drops --

    def drag_enter(self, draggable) -> bool:
        if not isinstance(draggable, TaskCard):
            return False
        self.add_class("drop-hover")
        return True

    def drag_leave(self, draggable) -> None:
        self.remove_class("drop-hover")

    def drop(self, draggable) -> bool:
        if not isinstance(draggable, TaskCard):
            return False
        self.remove_class("drop-hover")
        self.post_message(self.TaskDropped(self, draggable))
        return True
