"""Client for the task board REST API."""

from __future__ import annotations

from tasklane.api.resources import (
    ActivityApi,
    AuthApi,
    BoardsApi,
    CommentsApi,
    LoginResult,
    TasksApi,
    UsersApi,
)
from tasklane.api.transport import HttpTransport, Transport


class Gateway:
    """All API resources sharing one transport (and so one bearer token)."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport
        self.auth = AuthApi(transport)
        self.users = UsersApi(transport)
        self.boards = BoardsApi(transport)
        self.tasks = TasksApi(transport)
        self.comments = CommentsApi(transport)
        self.activities = ActivityApi(transport)

    @property
    def token(self) -> str | None:
        return self.transport.token

    @token.setter
    def token(self, value: str | None) -> None:
        self.transport.token = value


def connect(base_url: str | None = None, token: str | None = None) -> Gateway:
    """Build an HTTP gateway, defaulting the URL from configuration."""
    from tasklane.config import api_url

    return Gateway(HttpTransport(base_url or api_url(), token=token))


__all__ = [
    "ActivityApi",
    "AuthApi",
    "BoardsApi",
    "CommentsApi",
    "Gateway",
    "HttpTransport",
    "LoginResult",
    "TasksApi",
    "Transport",
    "UsersApi",
    "connect",
]
