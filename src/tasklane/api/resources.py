"""One class per API resource, one method per verb."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tasklane.api.transport import Transport
from tasklane.errors import RequestError
from tasklane.model.entities import (
    Action,
    ActivityLog,
    Board,
    Priority,
    Status,
    Task,
    TaskComment,
    User,
    activity_payload,
    board_payload,
    comment_payload,
    task_payload,
)


@dataclass
class LoginResult:
    token: str
    user: User | None


class Resource:
    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def _call(self, method: str, path: str, fallback: str, json: Any = None, auth: bool = True) -> Any:
        return self.transport.request(method, path, json=json, auth=auth, fallback=fallback)

    def _get_or_none(self, path: str, fallback: str) -> Any:
        """GET a single entity; a 404 means it is gone, not an error."""
        try:
            return self._call("GET", path, fallback)
        except RequestError as exc:
            if exc.status == 404:
                return None
            raise


def _login_result(data: dict[str, Any] | None) -> LoginResult:
    data = data or {}
    user = data.get("user")
    return LoginResult(token=data.get("token", ""), user=User.from_dict(user) if user else None)


class AuthApi(Resource):
    def register(self, username: str, email: str, password: str) -> LoginResult:
        body = {"username": username, "email": email, "password": password}
        return _login_result(self._call("POST", "/api/auth/register", "Registration failed", body, auth=False))

    def login(self, email: str, password: str) -> LoginResult:
        body = {"email": email, "password": password}
        return _login_result(self._call("POST", "/api/auth/login", "Login failed", body, auth=False))

    def me(self) -> User:
        return User.from_dict(self._call("GET", "/api/users/me", "Failed to get user info"))

    def change_password(self, current_password: str, new_password: str) -> None:
        body = {"currentPassword": current_password, "newPassword": new_password}
        self._call("POST", "/api/auth/change-password", "Password change failed", body)


class UsersApi(Resource):
    def list(self) -> list[User]:
        return [User.from_dict(u) for u in self._call("GET", "/api/users", "Failed to fetch users") or []]

    def get(self, user_id: str) -> User | None:
        data = self._get_or_none(f"/api/users/{user_id}", "Failed to fetch user")
        return User.from_dict(data) if data else None


class BoardsApi(Resource):
    def list(self) -> list[Board]:
        return [Board.from_dict(b) for b in self._call("GET", "/api/boards", "Failed to fetch boards") or []]

    def get(self, board_id: str) -> Board | None:
        data = self._get_or_none(f"/api/boards/{board_id}", "Failed to fetch board")
        return Board.from_dict(data) if data else None

    def create(self, name: str, description: str = "", members: list[str] | None = None) -> Board:
        body = board_payload(name=name, description=description, members=members)
        return Board.from_dict(self._call("POST", "/api/boards", "Failed to create board", body))

    def update(
        self,
        board_id: str,
        name: str | None = None,
        description: str | None = None,
        members: list[str] | None = None,
    ) -> Board:
        body = board_payload(name=name, description=description, members=members)
        return Board.from_dict(self._call("PUT", f"/api/boards/{board_id}", "Failed to update board", body))

    def delete(self, board_id: str) -> None:
        self._call("DELETE", f"/api/boards/{board_id}", "Failed to delete board")


class TasksApi(Resource):
    def list_for_board(self, board_id: str) -> list[Task]:
        data = self._call("GET", f"/api/boards/{board_id}/tasks", "Failed to fetch tasks")
        return [Task.from_dict(t) for t in data or []]

    def create(
        self,
        board_id: str,
        title: str,
        description: str = "",
        status: Status | str = Status.TODO,
        priority: Priority | str = Priority.MEDIUM,
        due_date: str | None = None,
        tags: list[str] | None = None,
    ) -> Task:
        body = task_payload(
            board_id=board_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date or None,
            tags=tags,
        )
        return Task.from_dict(self._call("POST", "/api/tasks", "Failed to create task", body))

    def update(
        self,
        task_id: str,
        title: str | None = None,
        description: str | None = None,
        status: Status | str | None = None,
        priority: Priority | str | None = None,
        due_date: str | None = None,
        tags: list[str] | None = None,
    ) -> Task:
        """Update a task. The owning board is fixed at creation and never sent."""
        body = task_payload(
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            tags=tags,
        )
        return Task.from_dict(self._call("PUT", f"/api/tasks/{task_id}", "Failed to update task", body))

    def delete(self, task_id: str) -> None:
        self._call("DELETE", f"/api/tasks/{task_id}", "Failed to delete task")

    def assign(self, task_id: str, user_id: str) -> Task:
        """Assign a task to a user; an empty user id unassigns it."""
        body = {"assignedTo": user_id}
        return Task.from_dict(self._call("POST", f"/api/tasks/{task_id}/assign", "Failed to assign task", body))


class CommentsApi(Resource):
    def list_for_task(self, task_id: str) -> list[TaskComment]:
        data = self._call("GET", f"/api/tasks/{task_id}/comments", "Failed to fetch comments")
        return [TaskComment.from_dict(c) for c in data or []]

    def create(self, task_id: str, content: str) -> TaskComment:
        body = comment_payload(content, task_id=task_id)
        return TaskComment.from_dict(self._call("POST", "/api/comments", "Failed to create comment", body))

    def update(self, comment_id: str, content: str) -> TaskComment:
        body = comment_payload(content)
        return TaskComment.from_dict(self._call("PUT", f"/api/comments/{comment_id}", "Failed to update comment", body))

    def delete(self, comment_id: str) -> None:
        self._call("DELETE", f"/api/comments/{comment_id}", "Failed to delete comment")


class ActivityApi(Resource):
    def list_for_board(self, board_id: str) -> list[ActivityLog]:
        data = self._call("GET", f"/api/boards/{board_id}/activities", "Failed to fetch activities")
        return [ActivityLog.from_dict(a) for a in data or []]

    def create(self, board_id: str, action: Action | str, details: str, task_id: str | None = None) -> ActivityLog:
        body = activity_payload(board_id, action, details, task_id=task_id)
        return ActivityLog.from_dict(self._call("POST", "/api/activities", "Failed to create activity", body))
