"""Entities and the view cache."""

from tasklane.model.cache import ViewCache
from tasklane.model.entities import (
    STATUS_TITLES,
    STATUSES,
    Action,
    ActivityLog,
    Board,
    Priority,
    Role,
    Status,
    Task,
    TaskComment,
    User,
)

__all__ = [
    "STATUS_TITLES",
    "STATUSES",
    "Action",
    "ActivityLog",
    "Board",
    "Priority",
    "Role",
    "Status",
    "Task",
    "TaskComment",
    "User",
    "ViewCache",
]
