"""Comment thread for a single task."""

from __future__ import annotations

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Markdown, Static

from tasklane.api import Gateway
from tasklane.audit import AuditSink
from tasklane.controllers import AddComment, DeleteComment
from tasklane.errors import RequestError
from tasklane.loaders import load_task_details, load_users_by_id
from tasklane.model.cache import ViewCache
from tasklane.model.entities import Task, TaskComment, User
from tasklane.ui.constants import ICON_COMMENT, ICON_PERSON
from tasklane.ui.markdown import tasklane_parser_factory


def _when(timestamp: str) -> str:
    return timestamp[:16].replace("T", " ") if timestamp else ""


class CommentView(Vertical):
    """One comment: author line and markdown body."""

    DEFAULT_CSS = """
    CommentView {
        height: auto;
        margin-bottom: 1;
        padding: 0 1;
        border-left: tall $primary-darken-2;
    }
    CommentView > Horizontal {
        height: 1;
    }
    CommentView .comment-author {
        width: 1fr;
        color: $text-muted;
    }
    CommentView .comment-delete {
        min-width: 8;
        height: 1;
        border: none;
    }
    CommentView Markdown {
        margin: 0;
    }
    """

    def __init__(self, comment: TaskComment, author: User | None, users: list[User], mine: bool) -> None:
        super().__init__()
        self.comment = comment
        self.author = author
        self.users = users
        self.mine = mine

    def compose(self) -> ComposeResult:
        name = self.author.username if self.author else "Unknown user"
        with Horizontal():
            yield Static(f"{ICON_PERSON} {name}  {_when(self.comment.created_at)}", classes="comment-author", markup=False)
            if self.mine:
                yield Button("Delete", classes="comment-delete", variant="error")
        yield Markdown(self.comment.content, parser_factory=tasklane_parser_factory(self.users))


class CommentsScreen(ModalScreen[None]):
    """List a task's comments and add new ones."""

    BINDINGS = [Binding("escape", "close", "Close")]

    CSS = """
    CommentsScreen {
        align: center middle;
    }
    CommentsScreen > #dialog {
        width: 80;
        height: 80%;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    CommentsScreen .dialog-title {
        text-style: bold;
        margin-bottom: 1;
    }
    CommentsScreen #thread {
        height: 1fr;
    }
    CommentsScreen #compose {
        height: 3;
    }
    CommentsScreen #compose Input {
        width: 1fr;
    }
    """

    def __init__(
        self,
        gateway: Gateway,
        item: Task,
        users: list[User],
        current_user_id: str | None = None,
        audit: AuditSink | None = None,
    ) -> None:
        super().__init__()
        self.gateway = gateway
        self.item = item
        self.users = users
        self.current_user_id = current_user_id
        self.audit = audit
        self.cache = ViewCache()
        self.authors: dict[str, User] = {u.id: u for u in users}
        self.adder = AddComment(item, gateway, self.app_notify, on_success=self.reload, audit=audit)

    def app_notify(self, message: str, *, title: str = "", severity: str = "information") -> None:
        self.app.notify(message, title=title, severity=severity)

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(f"{ICON_COMMENT} Comments: {self.item.title}", classes="dialog-title", markup=False)
            yield Static("", id="assignee", markup=False)
            yield VerticalScroll(id="thread")
            with Horizontal(id="compose"):
                yield Input(placeholder="Add a comment... (@name to mention)", id="new-comment")
                yield Button("Post", id="post", variant="primary")
                yield Button("Close", id="close")

    def on_mount(self) -> None:
        self.query_one("#new-comment", Input).focus()
        self.load()

    @work(exclusive=True, group="comments")
    async def load(self) -> None:
        try:
            await self.reload()
        except RequestError as exc:
            self.app_notify(str(exc), title="Failed to load comments", severity="error")

    async def reload(self) -> None:
        """Fetch the assignee, comments and their authors, then redraw."""
        assignee, comments = await load_task_details(self.gateway, self.item)
        missing = [c.user_id for c in comments if c.user_id not in self.authors]
        if missing:
            self.authors.update(await load_users_by_id(self.gateway, missing))
        self.cache.replace(comments=sorted(comments, key=lambda c: c.created_at))
        self.query_one("#assignee", Static).update(
            f"Assigned to {assignee.username}" if assignee else "Not assigned"
        )
        thread = self.query_one("#thread", VerticalScroll)
        await thread.remove_children()
        if not self.cache.comments:
            await thread.mount(Static("No comments yet.", classes="empty"))
            return
        await thread.mount_all(
            CommentView(c, self.authors.get(c.user_id), self.users, c.user_id == self.current_user_id)
            for c in self.cache.comments
        )
        thread.scroll_end(animate=False)

    async def post(self) -> None:
        field = self.query_one("#new-comment", Input)
        button = self.query_one("#post", Button)
        button.disabled = True
        try:
            if await self.adder.submit(content=field.value):
                field.value = ""
        finally:
            button.disabled = False

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        await self.post()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        match event.button.id:
            case "post":
                await self.post()
            case "close":
                self.action_close()
            case _:
                view = next((a for a in event.button.ancestors if isinstance(a, CommentView)), None)
                if view is not None:
                    remover = DeleteComment(view.comment, self.gateway, self.app_notify, on_success=self.reload)
                    await remover.submit()

    def action_close(self) -> None:
        self.dismiss(None)
