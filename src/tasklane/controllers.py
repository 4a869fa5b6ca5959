"""Controllers behind every create/edit/delete dialog.

Each controller validates its fields locally, then makes exactly one
gateway call. A second submit while the first is in flight is refused.
On success it emits an audit event (if it has one), awaits the caller's
reload callback and notifies; on failure it notifies and returns False so
the dialog can stay open with what the user typed.
"""

import asyncio
import inspect
import logging
import re
from pathlib import Path
from typing import Any, Awaitable, Callable

from tasklane.api import Gateway
from tasklane.audit import AuditSink
from tasklane.errors import RequestError, ValidationError
from tasklane.kanban import Notify
from tasklane.model.entities import STATUS_TITLES, Action, Board, Priority, Status, Task, TaskComment, User
from tasklane.session import Session, save_session

logger = logging.getLogger(__name__)

OnSuccess = Callable[[], Awaitable[None] | None]

MIN_PASSWORD_LENGTH = 6

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_password_change(new_password: str, confirm_password: str) -> None:
    """Raise ValidationError unless the new password is confirmed and long enough."""
    if new_password != confirm_password:
        raise ValidationError("New passwords do not match.", title="Password mismatch")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.", title="Weak password"
        )


def _required(value: str | None, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(message)
    return value


def _email(value: str | None) -> str:
    value = _required(value, "Email is required")
    if "@" not in value:
        raise ValidationError("Enter a valid email address")
    return value


class MutationController:
    """One dialog's submit action."""

    success_title = ""
    success_message = ""
    failure_title = "Error"

    def __init__(
        self,
        gateway: Gateway,
        notify: Notify,
        on_success: OnSuccess | None = None,
        audit: AuditSink | None = None,
    ) -> None:
        self.gateway = gateway
        self.notify = notify
        self.on_success = on_success
        self.audit = audit
        self.busy = False
        self.result: Any = None

    def validate(self, **fields) -> dict:
        """Check and normalise the submitted fields. Raises ValidationError."""
        return fields

    def perform(self, **fields) -> Any:
        """The single gateway call. Runs in a worker thread."""
        raise NotImplementedError

    def record(self, result: Any, **fields) -> None:
        """Emit audit events for a successful call."""

    def succeeded(self, result: Any) -> tuple[str, str]:
        return self.success_message, self.success_title

    async def submit(self, **fields) -> bool:
        if self.busy:
            return False
        try:
            fields = self.validate(**fields)
        except ValidationError as exc:
            self.notify(exc.message, title=exc.title, severity="error")
            return False

        self.busy = True
        try:
            try:
                result = await asyncio.to_thread(self.perform, **fields)
            except RequestError as exc:
                logger.info("%s failed: %s", type(self).__name__, exc)
                self.notify(exc.message, title=self.failure_title, severity="error")
                return False
            self.result = result
            if self.audit is not None:
                self.record(result, **fields)
            if self.on_success is not None:
                try:
                    pending = self.on_success()
                    if inspect.isawaitable(pending):
                        await pending
                except RequestError as exc:
                    self.notify(exc.message, title="Failed to refresh", severity="error")
            message, title = self.succeeded(result)
            if message:
                self.notify(message, title=title)
            return True
        finally:
            self.busy = False


# -- boards --


class CreateBoard(MutationController):
    success_title = "Board created"
    success_message = "Your new board has been created successfully."
    failure_title = "Failed to create board"

    def validate(self, name: str = "", description: str = "") -> dict:
        return {"name": _required(name, "Board name is required"), "description": (description or "").strip()}

    def perform(self, name: str, description: str) -> Board:
        return self.gateway.boards.create(name, description)


class EditBoard(MutationController):
    success_title = "Board updated"
    success_message = "Your board has been updated successfully."
    failure_title = "Failed to update board"

    def __init__(self, board: Board, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.board = board

    def validate(self, name: str = "", description: str = "") -> dict:
        return {"name": _required(name, "Board name is required"), "description": (description or "").strip()}

    def perform(self, name: str, description: str) -> Board:
        return self.gateway.boards.update(self.board.id, name=name, description=description)


class DeleteBoard(MutationController):
    """Hard delete. The backend removes the board's tasks with it."""

    success_title = "Board deleted"
    success_message = "Your board has been deleted successfully."
    failure_title = "Failed to delete board"

    def __init__(self, board: Board, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.board = board

    def perform(self) -> None:
        self.gateway.boards.delete(self.board.id)


# -- tasks --


def _task_fields(
    title: str = "",
    description: str = "",
    status: Status | str = Status.TODO,
    priority: Priority | str = Priority.MEDIUM,
    due_date: str | None = None,
    tags: list[str] | None = None,
) -> dict:
    try:
        status = Status(status)
    except ValueError:
        raise ValidationError(f"Unknown status: {status}") from None
    try:
        priority = Priority(priority)
    except ValueError:
        raise ValidationError(f"Unknown priority: {priority}") from None
    due_date = (due_date or "").strip()
    if due_date and not _DATE_RE.match(due_date):
        raise ValidationError("Due date must be YYYY-MM-DD")
    return {
        "title": _required(title, "Task title is required"),
        "description": (description or "").strip(),
        "status": status,
        "priority": priority,
        "due_date": due_date,
        "tags": [t.strip() for t in tags or [] if t.strip()],
    }


class CreateTask(MutationController):
    success_title = "Task created"
    success_message = "Your new task has been added."
    failure_title = "Failed to create task"

    def __init__(self, board_id: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.board_id = board_id

    def validate(self, **fields) -> dict:
        return _task_fields(**fields)

    def perform(self, due_date: str, **fields) -> Task:
        return self.gateway.tasks.create(self.board_id, due_date=due_date or None, **fields)

    def record(self, result: Task, **fields) -> None:
        self.audit.emit(self.board_id, Action.CREATED, f'Created task "{result.title}"', task_id=result.id)


class EditTask(MutationController):
    """Edit a task's fields. Its board never changes."""

    success_title = "Task updated"
    success_message = "Your task has been updated successfully."
    failure_title = "Failed to update task"

    def __init__(self, task: Task, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.task = task

    def validate(self, **fields) -> dict:
        return _task_fields(**fields)

    def perform(self, **fields) -> Task:
        return self.gateway.tasks.update(self.task.id, **fields)

    def record(self, result: Task, **fields) -> None:
        self.audit.emit(self.task.board_id, Action.UPDATED, f'Updated task "{result.title}"', task_id=self.task.id)
        status = fields["status"]
        if status is not self.task.status:
            self.audit.emit(
                self.task.board_id,
                Action.STATUS_CHANGED,
                f'Moved "{result.title}" from {STATUS_TITLES[self.task.status]} to {STATUS_TITLES[status]}',
                task_id=self.task.id,
            )


class DeleteTask(MutationController):
    success_title = "Task deleted"
    success_message = "Your task has been deleted successfully."
    failure_title = "Failed to delete task"

    def __init__(self, task: Task, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.task = task

    def perform(self) -> None:
        self.gateway.tasks.delete(self.task.id)

    def record(self, result: None) -> None:
        self.audit.emit(self.task.board_id, Action.DELETED, f'Deleted task "{self.task.title}"')


class AssignTask(MutationController):
    """Assign a task to a user, or unassign it with an empty user id.

    ``None`` means no user has been picked yet.
    """

    failure_title = "Failed to assign task"

    def __init__(self, task: Task, *args, users: list[User] | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.task = task
        self.users = {u.id: u for u in users or []}

    def can_assign(self, user_id: str | None) -> bool:
        if user_id is None:
            return False
        if user_id == "":
            return bool(self.task.assigned_to)
        return user_id != self.task.assigned_to

    def confirm_label(self, user_id: str | None) -> str:
        if user_id is None:
            return "Select User"
        if user_id == "":
            return "Unassign"
        if user_id == self.task.assigned_to:
            return "Already Assigned"
        return "Assign"

    def validate(self, user_id: str | None = None) -> dict:
        if user_id is None:
            raise ValidationError("Select a user to assign")
        if user_id == "" and not self.task.assigned_to:
            raise ValidationError("Task is not assigned")
        if user_id and user_id == self.task.assigned_to:
            raise ValidationError("Task is already assigned to this user")
        return {"user_id": user_id}

    def perform(self, user_id: str) -> Task:
        return self.gateway.tasks.assign(self.task.id, user_id)

    def _name(self, user_id: str) -> str:
        user = self.users.get(user_id)
        return user.username if user else user_id

    def record(self, result: Task, user_id: str) -> None:
        if user_id:
            details = f'Assigned "{self.task.title}" to {self._name(user_id)}'
        else:
            details = f'Unassigned "{self.task.title}"'
        self.audit.emit(self.task.board_id, Action.ASSIGNED, details, task_id=self.task.id)

    def succeeded(self, result: Task) -> tuple[str, str]:
        if result.assigned_to:
            return f"Task assigned to {self._name(result.assigned_to)}", "Task assigned"
        return "Task is no longer assigned", "Task unassigned"


# -- comments --


class AddComment(MutationController):
    success_title = "Comment added"
    success_message = "Your comment has been added successfully."
    failure_title = "Failed to add comment"

    def __init__(self, task: Task, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.task = task

    def validate(self, content: str = "") -> dict:
        return {"content": _required(content, "Comment cannot be empty")}

    def perform(self, content: str) -> TaskComment:
        return self.gateway.comments.create(self.task.id, content)

    def record(self, result: TaskComment, content: str) -> None:
        self.audit.emit(self.task.board_id, Action.COMMENTED, f'Commented on "{self.task.title}"', task_id=self.task.id)


class EditComment(MutationController):
    success_title = "Comment updated"
    success_message = "Your comment has been updated."
    failure_title = "Failed to update comment"

    def __init__(self, comment: TaskComment, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.comment = comment

    def validate(self, content: str = "") -> dict:
        return {"content": _required(content, "Comment cannot be empty")}

    def perform(self, content: str) -> TaskComment:
        return self.gateway.comments.update(self.comment.id, content)


class DeleteComment(MutationController):
    success_title = "Comment deleted"
    success_message = "Your comment has been deleted."
    failure_title = "Failed to delete comment"

    def __init__(self, comment: TaskComment, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.comment = comment

    def perform(self) -> None:
        self.gateway.comments.delete(self.comment.id)


# -- account --


class Login(MutationController):
    """Sign in. On success the gateway carries the new token."""

    failure_title = "Login failed"

    def validate(self, email: str = "", password: str = "") -> dict:
        return {"email": _email(email), "password": _required(password, "Password is required")}

    def perform(self, email: str, password: str):
        result = self.gateway.auth.login(email, password)
        self.gateway.token = result.token
        return result

    def succeeded(self, result) -> tuple[str, str]:
        name = result.user.username if result.user else "User"
        return f"Welcome back, {name}", "Signed in"


class Register(MutationController):
    """Create an account and sign in with it."""

    failure_title = "Registration failed"

    def validate(self, username: str = "", email: str = "", password: str = "", confirm: str | None = None) -> dict:
        username = _required(username, "Username is required")
        email = _email(email)
        validate_password_change(password, password if confirm is None else confirm)
        return {"username": username, "email": email, "password": password}

    def perform(self, username: str, email: str, password: str):
        result = self.gateway.auth.register(username, email, password)
        self.gateway.token = result.token
        return result

    def succeeded(self, result) -> tuple[str, str]:
        return "Your account has been created.", "Welcome"


class ChangePassword(MutationController):
    success_title = "Password changed"
    success_message = "Your password has been updated successfully."
    failure_title = "Password change failed"

    def validate(self, current: str = "", new: str = "", confirm: str = "") -> dict:
        validate_password_change(new, confirm)
        return {"current": _required(current, "Current password is required"), "new": new}

    def perform(self, current: str, new: str) -> None:
        self.gateway.auth.change_password(current, new)


class EditProfile(MutationController):
    """Change the displayed name and email.

    The API has no profile endpoint, so this only updates the saved session.
    """

    success_title = "Profile updated"
    success_message = "Your profile information has been updated successfully."

    def __init__(self, session: Session, *args, path: Path | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.session = session
        self.path = path

    def validate(self, name: str = "", email: str = "") -> dict:
        return {"name": _required(name, "Name is required"), "email": _email(email)}

    def perform(self, name: str, email: str) -> dict:
        self.session.profile = {"name": name, "email": email}
        save_session(self.session, self.path)
        return self.session.profile
