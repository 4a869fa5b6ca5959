"""Dashboard: totals, recent boards and the status distribution."""

from textual import work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static

from tasklane.errors import RequestError
from tasklane.loaders import load_dashboard
from tasklane.metrics import DashboardStats, StatusShare
from tasklane.model.cache import ViewCache
from tasklane.model.entities import Board
from tasklane.ui.constants import BAR_EMPTY, BAR_FULL, ICON_BOARD
from tasklane.ui.watcher import CacheWatcherMixin

BAR_WIDTH = 30
RECENT_BOARDS = 3


def distribution_bar(share: StatusShare, width: int = BAR_WIDTH) -> str:
    filled = round(share.percent / 100 * width)
    return f"{share.title:<12} {BAR_FULL * filled}{BAR_EMPTY * (width - filled)} {share.percent:5.1f}%  ({share.count})"


def recent_boards(boards: list[Board], limit: int = RECENT_BOARDS) -> list[Board]:
    return sorted(boards, key=lambda b: b.created_at, reverse=True)[:limit]


class StatTile(Vertical):
    DEFAULT_CSS = """
    StatTile {
        width: 1fr;
        height: 5;
        border: round $primary-darken-2;
        padding: 0 1;
    }
    StatTile .tile-label {
        color: $text-muted;
    }
    StatTile .tile-value {
        text-style: bold;
    }
    """

    def __init__(self, label: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.label = label

    def compose(self) -> ComposeResult:
        yield Static(self.label, classes="tile-label")
        yield Static("-", classes="tile-value")

    def set_value(self, value: int) -> None:
        self.query_one(".tile-value", Static).update(str(value))


class DashboardScreen(CacheWatcherMixin, Screen):
    """Overview of every board the user can see."""

    BINDINGS = [("r", "refresh", "Refresh")]

    CSS = """
    DashboardScreen {
        padding: 1 2;
    }
    DashboardScreen #welcome {
        text-style: bold;
        margin-bottom: 1;
    }
    DashboardScreen #tiles {
        height: 5;
    }
    DashboardScreen .section-title {
        text-style: bold;
        margin-top: 1;
    }
    """

    TILES = ("Total Boards", "Total Tasks", "Completed", "Pending")

    def __init__(self) -> None:
        self._init_watcher()
        super().__init__()
        self.cache = ViewCache()

    def compose(self) -> ComposeResult:
        yield Static("", id="welcome", markup=False)
        with Horizontal(id="tiles"):
            for label in self.TILES:
                yield StatTile(label)
        yield Static("Recent Boards", classes="section-title")
        yield Static("", id="recent", markup=False)
        yield Static("Task Distribution", classes="section-title")
        yield Static("", id="distribution", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self.cache_watch(self.cache, "*", self._on_cache_changed)
        self.query_one("#welcome", Static).update(f"Welcome back, {self.app.session.display_name}")
        self.load()

    def on_screen_resume(self) -> None:
        if self.is_mounted:
            self.query_one("#welcome", Static).update(f"Welcome back, {self.app.session.display_name}")

    def action_refresh(self) -> None:
        self.load()

    @work(exclusive=True, group="load")
    async def load(self) -> None:
        try:
            boards, tasks = await load_dashboard(self.app.gateway)
        except RequestError as exc:
            self.notify(str(exc), title="Failed to load dashboard", severity="error")
            return
        self.cache.replace(boards=boards, tasks=tasks)

    def _on_cache_changed(self, cache, key, old, new) -> None:
        stats = DashboardStats.from_lists(cache.boards, cache.tasks)
        for tile, (_label, value) in zip(self.query(StatTile), stats.tiles()):
            tile.set_value(value)

        boards = recent_boards(cache.boards)
        self.query_one("#recent", Static).update(
            "\n".join(f"{ICON_BOARD} {b.name}  {b.description}" for b in boards) or "No boards yet."
        )
        self.query_one("#distribution", Static).update(
            "\n".join(distribution_bar(share) for share in stats.tasks.distribution)
        )
