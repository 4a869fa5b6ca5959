"""Entities exchanged with the task board API."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Status(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class Action(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ASSIGNED = "assigned"
    COMMENTED = "commented"
    STATUS_CHANGED = "status_changed"


# Column order on the board, left to right.
STATUSES = (Status.TODO, Status.IN_PROGRESS, Status.DONE)

STATUS_TITLES = {
    Status.TODO: "To Do",
    Status.IN_PROGRESS: "In Progress",
    Status.DONE: "Done",
}

PRIORITY_TITLES = {
    Priority.LOW: "Low",
    Priority.MEDIUM: "Medium",
    Priority.HIGH: "High",
}

# Fields the server owns; never sent in a create or update payload.
SERVER_FIELDS = frozenset({"id", "createdAt", "updatedAt", "userId"})


@dataclass
class User:
    """A registered user."""

    id: str
    username: str
    email: str
    avatar: str | None = None
    role: Role | None = None
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        role = data.get("role")
        return cls(
            id=str(data["id"]),
            username=data.get("username", ""),
            email=data.get("email", ""),
            avatar=data.get("avatar") or None,
            role=Role(role) if role else None,
            created_at=data.get("createdAt", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        data = {"id": self.id, "username": self.username, "email": self.email, "createdAt": self.created_at}
        if self.avatar:
            data["avatar"] = self.avatar
        if self.role:
            data["role"] = self.role.value
        return data

    @property
    def initials(self) -> str:
        return self.username[:2].upper() or "?"


@dataclass
class Board:
    """A named collection of tasks."""

    id: str
    name: str
    description: str = ""
    user_id: str = ""
    members: list[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Board:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            user_id=str(data.get("userId", "")),
            members=list(data.get("members") or []),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


@dataclass
class Task:
    """A unit of work belonging to one board."""

    id: str
    board_id: str
    title: str
    description: str = ""
    status: Status = Status.TODO
    priority: Priority = Priority.MEDIUM
    due_date: str | None = None
    assigned_to: str | None = None
    tags: list[str] = field(default_factory=list)
    attachments: list[str] = field(default_factory=list)
    user_id: str = ""
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        self.status = Status(self.status)
        self.priority = Priority(self.priority)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        return cls(
            id=str(data["id"]),
            board_id=str(data["boardId"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            status=Status(data.get("status", Status.TODO)),
            priority=Priority(data.get("priority", Priority.MEDIUM)),
            due_date=data.get("dueDate") or None,
            assigned_to=data.get("assignedTo") or None,
            tags=list(data.get("tags") or []),
            attachments=list(data.get("attachments") or []),
            user_id=str(data.get("userId", "")),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


@dataclass
class TaskComment:
    """A comment left by a user on exactly one task."""

    id: str
    task_id: str
    user_id: str
    content: str
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskComment:
        return cls(
            id=str(data["id"]),
            task_id=str(data["taskId"]),
            user_id=str(data.get("userId", "")),
            content=data.get("content", ""),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


@dataclass
class ActivityLog:
    """One entry of a board's append-only audit trail."""

    id: str
    user_id: str
    board_id: str
    action: Action
    details: str = ""
    task_id: str | None = None
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActivityLog:
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", "")),
            board_id=str(data["boardId"]),
            action=Action(data["action"]),
            details=data.get("details", ""),
            task_id=data.get("taskId") or None,
            created_at=data.get("createdAt", ""),
        )


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop unset values and anything the server assigns."""
    return {k: v for k, v in payload.items() if v is not None and k not in SERVER_FIELDS}


def _value(item: Enum | str | None) -> str | None:
    return item.value if isinstance(item, Enum) else item


def board_payload(
    name: str | None = None,
    description: str | None = None,
    members: list[str] | None = None,
) -> dict[str, Any]:
    """Build a create/update body for a board."""
    return _compact({"name": name, "description": description, "members": members})


def task_payload(
    board_id: str | None = None,
    title: str | None = None,
    description: str | None = None,
    status: Status | str | None = None,
    priority: Priority | str | None = None,
    due_date: str | None = None,
    assigned_to: str | None = None,
    tags: list[str] | None = None,
    attachments: list[str] | None = None,
) -> dict[str, Any]:
    """Build a create/update body for a task.

    Status and priority are checked against their enumerations so an
    invalid value never reaches the server. An empty ``due_date`` clears it.
    """
    if status is not None:
        status = Status(status)
    if priority is not None:
        priority = Priority(priority)
    return _compact(
        {
            "boardId": board_id,
            "title": title,
            "description": description,
            "status": _value(status),
            "priority": _value(priority),
            "dueDate": due_date,
            "assignedTo": assigned_to,
            "tags": tags,
            "attachments": attachments,
        }
    )


def comment_payload(content: str, task_id: str | None = None) -> dict[str, Any]:
    """Build a create/update body for a comment."""
    return _compact({"taskId": task_id, "content": content})


def activity_payload(
    board_id: str,
    action: Action | str,
    details: str,
    task_id: str | None = None,
) -> dict[str, Any]:
    """Build the body for a new activity log entry."""
    return _compact(
        {
            "boardId": board_id,
            "taskId": task_id,
            "action": Action(action).value,
            "details": details,
        }
    )
