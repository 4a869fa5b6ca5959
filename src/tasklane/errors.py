"""Exception types shared by the gateway, loaders and controllers."""

from __future__ import annotations


class TasklaneError(Exception):
    """Base class for tasklane errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TasklaneError):
    """Raised before any network call when form input is invalid.

    ``title`` is a short heading for the notification, if the message
    needs one.
    """

    def __init__(self, message: str, title: str = "Invalid input") -> None:
        super().__init__(message)
        self.title = title


class RequestError(TasklaneError):
    """Raised when the backend answers with a non-success status.

    ``message`` is the server-supplied message, or a generic fallback for
    the operation. ``status`` is None when the request never got a response.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NotFound(TasklaneError):
    """Raised by loaders when the entity a view needs no longer exists."""
