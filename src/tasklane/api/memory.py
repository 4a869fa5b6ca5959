"""In-process implementation of the task board API.

Serves the same routes, payloads and error bodies as the real backend so
the gateway, controllers and screens can run without a server: in tests,
and behind ``tasklane --demo``. All state belongs to a MemoryBackend
instance; there is nothing module-level to share between instances.
"""

from __future__ import annotations

import copy
import itertools
import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from tasklane.errors import RequestError
from tasklane.model.entities import Action, Priority, Role, Status


def utc_now() -> str:
    """ISO-8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class HttpError(Exception):
    """A non-success response from a route handler."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class Repository:
    """Records of one entity type, keyed by id.

    Records are stored in their wire (camelCase) shape. ``create`` assigns
    the id and timestamps; callers cannot supply them.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._records: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def list(self, **where: Any) -> list[dict[str, Any]]:
        return [r for r in self._records.values() if all(r.get(k) == v for k, v in where.items())]

    def get(self, record_id: str) -> dict[str, Any] | None:
        return self._records.get(record_id)

    def create(self, data: dict[str, Any], timestamps: bool = True) -> dict[str, Any]:
        record_id = str(next(self._ids))
        record = {k: v for k, v in data.items() if k not in ("id", "createdAt", "updatedAt")}
        record["id"] = record_id
        if timestamps:
            now = utc_now()
            record["createdAt"] = now
            record["updatedAt"] = now
        self._records[record_id] = record
        return record

    def update(self, record_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        record = self._records[record_id]
        for key, value in changes.items():
            if key in ("id", "createdAt", "updatedAt", "userId"):
                continue
            record[key] = value
        if "updatedAt" in record:
            record["updatedAt"] = utc_now()
        return record

    def delete(self, record_id: str) -> None:
        self._records.pop(record_id, None)

    def delete_where(self, **where: Any) -> list[str]:
        doomed = [r["id"] for r in self.list(**where)]
        for record_id in doomed:
            del self._records[record_id]
        return doomed

    def __len__(self) -> int:
        return len(self._records)


@dataclass
class Call:
    method: str
    path: str
    json: Any = None


@dataclass
class _Failure:
    method: str
    path: str
    status: int
    message: str
    times: int | None


Handler = Callable[..., Any]


class MemoryBackend:
    """The REST contract, answered from in-memory repositories."""

    def __init__(self) -> None:
        self.users = Repository("users")
        self.boards = Repository("boards")
        self.tasks = Repository("tasks")
        self.comments = Repository("comments")
        self.activities = Repository("activities")
        self.passwords: dict[str, str] = {}
        self.tokens: dict[str, str] = {}
        self.calls: list[Call] = []
        self._failures: list[_Failure] = []
        self._routes: list[tuple[str, re.Pattern, Handler, bool]] = []
        self._register_routes()

    # -- test and demo helpers --

    def add_user(self, username: str, email: str, password: str = "password", role: Role | None = None) -> dict:
        """Create a user directly, bypassing the register route."""
        user = self.users.create(
            {"username": username, "email": email, "role": role.value if role else Role.MEMBER.value},
            timestamps=False,
        )
        user["createdAt"] = utc_now()
        self.passwords[user["id"]] = password
        return user

    def issue_token(self, user_id: str) -> str:
        token = secrets.token_hex(16)
        self.tokens[token] = user_id
        return token

    def fail(self, method: str, path: str, message: str = "Internal server error", status: int = 500,
             times: int | None = None) -> None:
        """Make requests matching method and exact path fail."""
        self._failures.append(_Failure(method.upper(), path, status, message, times))

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [c for c in self.calls if c.method == method.upper() and c.path == path]

    # -- dispatch --

    def _route(self, method: str, pattern: str, handler: Handler, auth: bool = True) -> None:
        regex = re.compile("^" + re.sub(r":(\w+)", r"(?P<\1>[^/]+)", pattern) + "$")
        self._routes.append((method, regex, handler, auth))

    def _register_routes(self) -> None:
        self._route("POST", "/api/auth/register", self._register, auth=False)
        self._route("POST", "/api/auth/login", self._login, auth=False)
        self._route("POST", "/api/auth/change-password", self._change_password)
        self._route("GET", "/api/users/me", self._me)
        self._route("GET", "/api/users", self._list_users)
        self._route("GET", "/api/users/:id", self._get_user)
        self._route("GET", "/api/boards", self._list_boards)
        self._route("POST", "/api/boards", self._create_board)
        self._route("GET", "/api/boards/:id", self._get_board)
        self._route("PUT", "/api/boards/:id", self._update_board)
        self._route("DELETE", "/api/boards/:id", self._delete_board)
        self._route("GET", "/api/boards/:id/tasks", self._list_tasks)
        self._route("GET", "/api/boards/:id/activities", self._list_activities)
        self._route("POST", "/api/tasks", self._create_task)
        self._route("PUT", "/api/tasks/:id", self._update_task)
        self._route("DELETE", "/api/tasks/:id", self._delete_task)
        self._route("POST", "/api/tasks/:id/assign", self._assign_task)
        self._route("GET", "/api/tasks/:id/comments", self._list_comments)
        self._route("POST", "/api/comments", self._create_comment)
        self._route("PUT", "/api/comments/:id", self._update_comment)
        self._route("DELETE", "/api/comments/:id", self._delete_comment)
        self._route("POST", "/api/activities", self._create_activity)

    def handle(self, method: str, path: str, body: Any = None, token: str | None = None) -> tuple[int, Any]:
        """Answer one request. Returns (status, json body)."""
        method = method.upper()
        self.calls.append(Call(method, path, copy.deepcopy(body)))

        for failure in self._failures:
            if failure.method == method and failure.path == path and failure.times != 0:
                if failure.times is not None:
                    failure.times -= 1
                return failure.status, {"message": failure.message}

        for route_method, regex, handler, auth in self._routes:
            if route_method != method:
                continue
            match = regex.match(path)
            if match is None:
                continue
            try:
                user = self._authenticate(token) if auth else None
                result = handler(user, body or {}, **match.groupdict())
            except HttpError as exc:
                return exc.status, {"message": exc.message}
            return 200, copy.deepcopy(result)

        return 404, {"message": f"Cannot {method} {path}"}

    def _authenticate(self, token: str | None) -> dict:
        user_id = self.tokens.get(token or "")
        user = self.users.get(user_id) if user_id else None
        if user is None:
            raise HttpError(401, "Unauthorized")
        return user

    # -- helpers --

    def _require(self, repo: Repository, record_id: str, label: str) -> dict:
        record = repo.get(record_id)
        if record is None:
            raise HttpError(404, f"{label} not found")
        return record

    def _can_see(self, user: dict, board: dict) -> bool:
        return (
            board.get("userId") == user["id"]
            or user["id"] in (board.get("members") or [])
            or user.get("role") == Role.ADMIN.value
        )

    def _visible_board(self, user: dict, board_id: str) -> dict:
        board = self._require(self.boards, board_id, "Board")
        if not self._can_see(user, board):
            raise HttpError(404, "Board not found")
        return board

    @staticmethod
    def _check_enum(enum, value: Any, label: str) -> None:
        try:
            enum(value)
        except ValueError:
            raise HttpError(400, f"Invalid {label}: {value}") from None

    def _public_user(self, user: dict) -> dict:
        return {k: v for k, v in user.items()}

    # -- auth --

    def _register(self, _user, body, **_):
        username = (body.get("username") or "").strip()
        email = (body.get("email") or "").strip().lower()
        password = body.get("password") or ""
        if not username or not email or not password:
            raise HttpError(400, "Username, email and password are required")
        if self.users.list(email=email):
            raise HttpError(400, "User already exists")
        user = self.add_user(username, email, password)
        return {"token": self.issue_token(user["id"]), "user": self._public_user(user)}

    def _login(self, _user, body, **_):
        email = (body.get("email") or "").strip().lower()
        matches = self.users.list(email=email)
        if not matches or self.passwords.get(matches[0]["id"]) != body.get("password"):
            raise HttpError(401, "Invalid credentials")
        user = matches[0]
        return {"token": self.issue_token(user["id"]), "user": self._public_user(user)}

    def _change_password(self, user, body, **_):
        if self.passwords.get(user["id"]) != body.get("currentPassword"):
            raise HttpError(400, "Current password is incorrect")
        new_password = body.get("newPassword") or ""
        if len(new_password) < 6:
            raise HttpError(400, "Password must be at least 6 characters long")
        self.passwords[user["id"]] = new_password
        return {"message": "Password updated"}

    def _me(self, user, _body, **_):
        return self._public_user(user)

    # -- users --

    def _list_users(self, _user, _body, **_):
        return [self._public_user(u) for u in self.users.list()]

    def _get_user(self, _user, _body, id):
        return self._public_user(self._require(self.users, id, "User"))

    # -- boards --

    def _list_boards(self, user, _body, **_):
        return [b for b in self.boards.list() if self._can_see(user, b)]

    def _get_board(self, user, _body, id):
        return self._visible_board(user, id)

    def _create_board(self, user, body, **_):
        name = (body.get("name") or "").strip()
        if not name:
            raise HttpError(400, "Board name is required")
        return self.boards.create(
            {
                "name": name,
                "description": body.get("description") or "",
                "members": list(body.get("members") or []),
                "userId": user["id"],
            }
        )

    def _update_board(self, user, body, id):
        self._visible_board(user, id)
        if "name" in body and not (body["name"] or "").strip():
            raise HttpError(400, "Board name is required")
        changes = {k: body[k] for k in ("name", "description", "members") if k in body}
        return self.boards.update(id, changes)

    def _delete_board(self, user, _body, id):
        board = self._visible_board(user, id)
        if board["userId"] != user["id"] and user.get("role") != Role.ADMIN.value:
            raise HttpError(403, "Only the board owner can delete it")
        for task_id in self.tasks.delete_where(boardId=id):
            self.comments.delete_where(taskId=task_id)
        self.activities.delete_where(boardId=id)
        self.boards.delete(id)
        return {"message": "Board deleted"}

    # -- tasks --

    def _list_tasks(self, user, _body, id):
        self._visible_board(user, id)
        return self.tasks.list(boardId=id)

    def _create_task(self, user, body, **_):
        board_id = body.get("boardId")
        if not board_id or self.boards.get(board_id) is None:
            raise HttpError(404, "Board not found")
        self._visible_board(user, board_id)
        title = (body.get("title") or "").strip()
        if not title:
            raise HttpError(400, "Task title is required")
        status = body.get("status") or Status.TODO.value
        priority = body.get("priority") or Priority.MEDIUM.value
        self._check_enum(Status, status, "status")
        self._check_enum(Priority, priority, "priority")
        record = {
            "boardId": board_id,
            "title": title,
            "description": body.get("description") or "",
            "status": status,
            "priority": priority,
            "userId": user["id"],
            "tags": list(body.get("tags") or []),
            "attachments": list(body.get("attachments") or []),
        }
        if body.get("dueDate"):
            record["dueDate"] = body["dueDate"]
        return self.tasks.create(record)

    def _update_task(self, user, body, id):
        task = self._require(self.tasks, id, "Task")
        self._visible_board(user, task["boardId"])
        if "status" in body:
            self._check_enum(Status, body["status"], "status")
        if "priority" in body:
            self._check_enum(Priority, body["priority"], "priority")
        if "title" in body and not (body["title"] or "").strip():
            raise HttpError(400, "Task title is required")
        editable = ("title", "description", "status", "priority", "dueDate", "tags", "attachments")
        changes = {k: body[k] for k in editable if k in body}
        if changes.get("dueDate") == "":
            changes.pop("dueDate")
            task.pop("dueDate", None)
        return self.tasks.update(id, changes)

    def _delete_task(self, user, _body, id):
        task = self._require(self.tasks, id, "Task")
        self._visible_board(user, task["boardId"])
        self.comments.delete_where(taskId=id)
        self.tasks.delete(id)
        return {"message": "Task deleted"}

    def _assign_task(self, user, body, id):
        task = self._require(self.tasks, id, "Task")
        self._visible_board(user, task["boardId"])
        assignee = body.get("assignedTo") or ""
        if not assignee:
            task.pop("assignedTo", None)
            return self.tasks.update(id, {})
        self._require(self.users, assignee, "User")
        return self.tasks.update(id, {"assignedTo": assignee})

    # -- comments --

    def _list_comments(self, user, _body, id):
        task = self._require(self.tasks, id, "Task")
        self._visible_board(user, task["boardId"])
        return self.comments.list(taskId=id)

    def _create_comment(self, user, body, **_):
        task_id = body.get("taskId")
        task = self._require(self.tasks, task_id or "", "Task")
        self._visible_board(user, task["boardId"])
        content = (body.get("content") or "").strip()
        if not content:
            raise HttpError(400, "Comment content is required")
        return self.comments.create({"taskId": task_id, "userId": user["id"], "content": content})

    def _update_comment(self, user, body, id):
        comment = self._require(self.comments, id, "Comment")
        if comment["userId"] != user["id"]:
            raise HttpError(403, "You can only edit your own comments")
        content = (body.get("content") or "").strip()
        if not content:
            raise HttpError(400, "Comment content is required")
        return self.comments.update(id, {"content": content})

    def _delete_comment(self, user, _body, id):
        comment = self._require(self.comments, id, "Comment")
        if comment["userId"] != user["id"]:
            raise HttpError(403, "You can only delete your own comments")
        self.comments.delete(id)
        return {"message": "Comment deleted"}

    # -- activity --

    def _list_activities(self, user, _body, id):
        self._visible_board(user, id)
        return sorted(self.activities.list(boardId=id), key=lambda a: (a["createdAt"], int(a["id"])), reverse=True)

    def _create_activity(self, user, body, **_):
        board_id = body.get("boardId") or ""
        self._visible_board(user, board_id)
        self._check_enum(Action, body.get("action"), "action")
        record = {
            "boardId": board_id,
            "userId": user["id"],
            "action": body["action"],
            "details": body.get("details") or "",
        }
        if body.get("taskId"):
            record["taskId"] = body["taskId"]
        created = self.activities.create(record)
        created.pop("updatedAt", None)
        return created


class MemoryTransport:
    """Transport that hands requests to a MemoryBackend."""

    def __init__(self, backend: MemoryBackend, token: str | None = None) -> None:
        self.backend = backend
        self.token = token

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        auth: bool = True,
        fallback: str = "Request failed",
    ) -> Any:
        status, body = self.backend.handle(method, path, copy.deepcopy(json), self.token if auth else None)
        if status >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise RequestError(message or fallback, status=status)
        return body


def seed_demo(backend: MemoryBackend) -> str:
    """Load sample users, boards and tasks. Returns a token for the demo user."""
    demo = backend.add_user("demo", "demo@example.com", "demo123", role=Role.ADMIN)
    alice = backend.add_user("alice", "alice@example.com")
    bob = backend.add_user("bob", "bob@example.com")
    members = [alice["id"], bob["id"]]

    website = backend.boards.create(
        {
            "name": "Website Redesign",
            "description": "Complete overhaul of company website",
            "userId": demo["id"],
            "members": members,
        }
    )
    backend.boards.create(
        {
            "name": "Mobile App Development",
            "description": "Build iOS and Android applications",
            "userId": demo["id"],
            "members": members,
        }
    )

    samples = [
        ("Design Homepage", "Create mockups for the new homepage design", "todo", "high", "2025-01-15", alice),
        ("Update Navigation", "Improve navigation structure", "in-progress", "medium", None, bob),
        ("Optimize Images", "Compress and optimize all images", "done", "low", None, None),
    ]
    for title, description, status, priority, due, assignee in samples:
        record = {
            "boardId": website["id"],
            "title": title,
            "description": description,
            "status": status,
            "priority": priority,
            "userId": demo["id"],
            "tags": [],
            "attachments": [],
        }
        if due:
            record["dueDate"] = due
        if assignee:
            record["assignedTo"] = assignee["id"]
        backend.tasks.create(record)

    return backend.issue_token(demo["id"])
