"""HTTP transport for the task board API."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from tasklane.errors import RequestError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can carry a JSON request to the backend."""

    token: str | None

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        auth: bool = True,
        fallback: str = "Request failed",
    ) -> Any: ...


def _error_message(response: requests.Response, fallback: str) -> str:
    """Pull the server's ``message`` out of an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class HttpTransport:
    """Send JSON requests over a ``requests`` session.

    The bearer token is attached to every authenticated request. There are
    no retries and no explicit timeout: a failed call is reported once as
    a RequestError and the caller decides what to show.
    """

    def __init__(self, base_url: str, token: str | None = None, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session if session is not None else requests.Session()

    def headers(self, auth: bool = True) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        auth: bool = True,
        fallback: str = "Request failed",
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, json=json, headers=self.headers(auth))
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise RequestError(fallback) from exc

        if not response.ok:
            message = _error_message(response, fallback)
            logger.debug("%s %s -> %s %s", method, url, response.status_code, message)
            raise RequestError(message, status=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RequestError(fallback, status=response.status_code) from exc
