"""Modal dialogs that create, edit, assign and delete boards and tasks.

Each dialog wraps a mutation controller. It dismisses with True once the
controller reports success; on failure it stays open with the user's
input untouched.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, Static, TextArea

from tasklane.controllers import AssignTask, MutationController
from tasklane.model.entities import PRIORITY_TITLES, STATUS_TITLES, Board, Priority, Status, Task, User

DIALOG_CSS = """
{name} {{
    align: center middle;
}}
{name} > #dialog {{
    width: 72;
    height: auto;
    max-height: 90%;
    border: thick $primary;
    background: $surface;
    padding: 1 2;
}}
{name} .dialog-title {{
    text-style: bold;
    margin-bottom: 1;
}}
{name} Label {{
    margin-top: 1;
}}
{name} #buttons {{
    width: 100%;
    height: 3;
    margin-top: 1;
    align: right middle;
}}
{name} Button {{
    margin-left: 2;
}}
"""


class FormScreen(ModalScreen[bool]):
    """Modal form bound to one controller."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    SUBMIT_ID = "submit"

    def __init__(self, controller: MutationController) -> None:
        super().__init__()
        self.controller = controller

    def action_cancel(self) -> None:
        if not self.controller.busy:
            self.dismiss(False)

    def fields(self) -> dict:
        """Current form values, as keyword arguments for the controller."""
        return {}

    async def submit(self, **fields) -> bool:
        """Run the controller with the submit button disabled. Dismisses on success."""
        button = self.query_one(f"#{self.SUBMIT_ID}", Button)
        button.disabled = True
        try:
            ok = await self.controller.submit(**fields)
        finally:
            button.disabled = False
        if ok:
            self.dismiss(True)
        return ok

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "cancel":
            self.action_cancel()
        elif event.button.id == self.SUBMIT_ID:
            await self.submit(**self.fields())

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        await self.submit(**self.fields())


class BoardFormScreen(FormScreen):
    """Create a board, or edit the given one."""

    CSS = DIALOG_CSS.format(name="BoardFormScreen")

    def __init__(self, controller: MutationController, board: Board | None = None) -> None:
        super().__init__(controller)
        self.board = board

    def compose(self) -> ComposeResult:
        editing = self.board is not None
        with Vertical(id="dialog"):
            yield Static("Edit Board" if editing else "Create New Board", classes="dialog-title")
            yield Label("Name")
            yield Input(self.board.name if editing else "", placeholder="Board name", id="name")
            yield Label("Description")
            yield Input(self.board.description if editing else "", placeholder="What is this board for?", id="description")
            with Horizontal(id="buttons"):
                yield Button("Cancel", id="cancel")
                yield Button("Save Changes" if editing else "Create Board", id="submit", variant="primary")

    def fields(self) -> dict:
        return {
            "name": self.query_one("#name", Input).value,
            "description": self.query_one("#description", Input).value,
        }


class TaskFormScreen(FormScreen):
    """Create a task, or edit the given one."""

    CSS = (
        DIALOG_CSS.format(name="TaskFormScreen")
        + """
    TaskFormScreen #description {
        height: 6;
    }
    TaskFormScreen #selects {
        height: auto;
    }
    TaskFormScreen #selects > Vertical {
        width: 1fr;
        height: auto;
    }
    """
    )

    def __init__(
        self,
        controller: MutationController,
        task: Task | None = None,
        status: Status = Status.TODO,
    ) -> None:
        super().__init__(controller)
        self.item = task
        self.initial_status = task.status if task else status

    def compose(self) -> ComposeResult:
        item = self.item
        with Vertical(id="dialog"):
            yield Static("Edit Task" if item else "Create New Task", classes="dialog-title")
            yield Label("Title")
            yield Input(item.title if item else "", placeholder="Task title", id="title")
            yield Label("Description")
            yield TextArea(item.description if item else "", id="description")
            with Horizontal(id="selects"):
                with Vertical():
                    yield Label("Status")
                    yield Select(
                        [(STATUS_TITLES[s], s.value) for s in Status],
                        value=self.initial_status.value,
                        allow_blank=False,
                        id="status",
                    )
                with Vertical():
                    yield Label("Priority")
                    yield Select(
                        [(PRIORITY_TITLES[p], p.value) for p in Priority],
                        value=(item.priority if item else Priority.MEDIUM).value,
                        allow_blank=False,
                        id="priority",
                    )
            yield Label("Due date")
            yield Input((item.due_date or "") if item else "", placeholder="YYYY-MM-DD", id="due")
            yield Label("Tags")
            yield Input(", ".join(item.tags) if item else "", placeholder="comma, separated", id="tags")
            with Horizontal(id="buttons"):
                yield Button("Cancel", id="cancel")
                yield Button("Save Changes" if item else "Create Task", id="submit", variant="primary")

    def fields(self) -> dict:
        return {
            "title": self.query_one("#title", Input).value,
            "description": self.query_one("#description", TextArea).text,
            "status": self.query_one("#status", Select).value,
            "priority": self.query_one("#priority", Select).value,
            "due_date": self.query_one("#due", Input).value,
            "tags": self.query_one("#tags", Input).value.split(","),
        }


class ConfirmDeleteScreen(FormScreen):
    """Ask before an irreversible delete."""

    CSS = DIALOG_CSS.format(name="ConfirmDeleteScreen")

    def __init__(self, controller: MutationController, title: str, message: str) -> None:
        super().__init__(controller)
        self.title_text = title
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self.title_text, classes="dialog-title")
            yield Static(self.message, id="message", markup=False)
            with Horizontal(id="buttons"):
                yield Button("Cancel", id="cancel")
                yield Button("Delete", id="submit", variant="error")


class AssignScreen(FormScreen):
    """Pick a user to assign the task to."""

    CSS = DIALOG_CSS.format(name="AssignScreen")

    def __init__(self, controller: AssignTask, users: list[User]) -> None:
        super().__init__(controller)
        self.users = users

    @property
    def item(self) -> Task:
        return self.controller.task

    def compose(self) -> ComposeResult:
        current = next((u for u in self.users if u.id == self.item.assigned_to), None)
        with Vertical(id="dialog"):
            yield Static(f"Assign Task: {self.item.title}", classes="dialog-title", markup=False)
            yield Static(
                f"Currently assigned to {current.username}" if current else "Not assigned",
                id="current",
                markup=False,
            )
            yield Label("User")
            yield Select(
                [(f"{u.username} <{u.email}>", u.id) for u in self.users],
                prompt="Select a user",
                id="user",
            )
            with Horizontal(id="buttons"):
                yield Button("Cancel", id="cancel")
                yield Button("Unassign", id="unassign", variant="warning", disabled=not self.item.assigned_to)
                yield Button(self.controller.confirm_label(None), id="submit", variant="primary", disabled=True)

    def selected(self) -> str | None:
        value = self.query_one("#user", Select).value
        return None if value is Select.NULL else value

    def _refresh_submit(self) -> None:
        user_id = self.selected()
        button = self.query_one("#submit", Button)
        button.label = self.controller.confirm_label(user_id)
        button.disabled = self.controller.busy or not self.controller.can_assign(user_id)

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        self._refresh_submit()

    def fields(self) -> dict:
        return {"user_id": self.selected()}

    async def submit(self, **fields) -> bool:
        ok = await super().submit(**fields)
        if not ok:
            self._refresh_submit()
        return ok

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "unassign":
            event.stop()
            await self.submit(user_id="")
            return
        await super().on_button_pressed(event)
