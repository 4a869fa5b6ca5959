"""Task cards shown in the board's status columns."""

from datetime import date

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.message import Message
from textual.widgets import Static

from tasklane.model.entities import PRIORITY_TITLES, Status, Task, User
from tasklane.ui.constants import ICON_CALENDAR, ICON_PERSON, ICON_TAG, PRIORITY_ICONS
from tasklane.ui.drag import DraggableMixin


def is_overdue(task: Task, today: date | None = None) -> bool:
    """Due before today and not done. An unparseable date is never overdue."""
    if not task.due_date or task.status is Status.DONE:
        return False
    try:
        due = date.fromisoformat(task.due_date[:10])
    except ValueError:
        return False
    return due < (today or date.today())


def footer_text(task: Task, assignee: User | None, today: date | None = None) -> Text:
    """Priority, assignee, due date and tags on one line. Overdue dates are red."""
    parts = [Text(f"{PRIORITY_ICONS[task.priority.value]} {PRIORITY_TITLES[task.priority]}")]
    if assignee is not None:
        parts.append(Text(f"{ICON_PERSON} {assignee.username}"))
    if task.due_date:
        parts.append(Text(f"{ICON_CALENDAR} {task.due_date[:10]}", style="red" if is_overdue(task, today) else ""))
    if task.tags:
        parts.append(Text(f"{ICON_TAG} {', '.join(task.tags)}", style="dim"))
    return Text("  ").join(parts)


class TaskCard(DraggableMixin, Static, can_focus=True):
    """A single task in a column."""

    BINDINGS = [
        ("enter", "request('edit')", "Edit"),
        ("e", "request('edit')", "Edit"),
        ("a", "request('assign')", "Assign"),
        ("c", "request('comments')", "Comments"),
        ("delete", "request('delete')", "Delete"),
        Binding("shift+left", "move(-1)", "Move left", show=False),
        Binding("shift+right", "move(1)", "Move right", show=False),
    ]

    DEFAULT_CSS = """
    TaskCard {
        width: 100%;
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        background: $surface;
        border-left: tall $primary-darken-2;
    }
    TaskCard:focus {
        background: $primary;
    }
    TaskCard.priority-high {
        border-left: tall $error;
    }
    TaskCard.priority-low {
        border-left: tall $success-darken-2;
    }
    TaskCard.dragging {
        opacity: 0.3;
    }
    TaskCard #task-title {
        text-style: bold;
    }
    TaskCard #task-footer {
        color: $text-muted;
    }
    """

    class DragStarted(Message):
        """Posted when the card starts being dragged."""

        def __init__(self, card: "TaskCard") -> None:
            super().__init__()
            self.card = card

    class DragCancelled(Message):
        """Posted when a drag ends without landing on a column."""

        def __init__(self, card: "TaskCard") -> None:
            super().__init__()
            self.card = card

    class ActionRequested(Message):
        """Posted when the user asks to edit, assign, comment on or delete the task."""

        def __init__(self, card: "TaskCard", action: str) -> None:
            super().__init__()
            self.card = card
            self.action = action

    class MoveRequested(Message):
        """Posted when the card should move one column left (-1) or right (+1)."""

        def __init__(self, card: "TaskCard", step: int) -> None:
            super().__init__()
            self.card = card
            self.step = step

    def __init__(self, item: Task, assignee: User | None = None, **kwargs) -> None:
        Static.__init__(self, **kwargs)
        self._init_draggable()
        self.item = item
        self.assignee = assignee
        self.add_class(f"priority-{item.priority.value}")

    @property
    def task_id(self) -> str:
        return self.item.id

    def compose(self) -> ComposeResult:
        yield Static(self.item.title, id="task-title", markup=False)
        if self.item.description:
            first_line = self.item.description.splitlines()[0]
            yield Static(first_line, id="task-description", markup=False)
        yield Static(footer_text(self.item, self.assignee), id="task-footer", markup=False)

    def action_request(self, action: str) -> None:
        self.post_message(self.ActionRequested(self, action))

    def action_move(self, step: int) -> None:
        self.post_message(self.MoveRequested(self, step))

    def draggable_make_ghost(self):
        return DragGhost(self)

    def draggable_clicked(self) -> None:
        self.focus()

    def draggable_started(self) -> None:
        self.post_message(self.DragStarted(self))

    def draggable_cancelled(self) -> None:
        self.post_message(self.DragCancelled(self))


class DragGhost(Static):
    """Floating overlay showing the task being dragged."""

    DEFAULT_CSS = """
    DragGhost {
        layer: overlay;
        height: auto;
        background: $boost;
        border: round $primary;
    }
    """

    def __init__(self, card: TaskCard) -> None:
        super().__init__(card.item.title, markup=False)
        self.card = card
