"""Tests for HttpTransport against a stub requests session."""

import json

import pytest
import requests

from tasklane.api import Gateway, connect
from tasklane.api.transport import HttpTransport
from tasklane.errors import RequestError


class StubResponse:
    def __init__(self, status=200, body=None, raw=None):
        self.status_code = status
        if raw is not None:
            self.content = raw
        else:
            self.content = b"" if body is None else json.dumps(body).encode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.content)


class StubSession:
    """Replays canned responses and records each request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, json=None, headers=None):
        self.requests.append({"method": method, "url": url, "json": json, "headers": headers})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def test_request_sends_json_and_bearer_token():
    session = StubSession(StubResponse(body={"id": "1"}))
    transport = HttpTransport("http://api.test/", token="abc", session=session)

    assert transport.request("POST", "/api/boards", json={"name": "Roadmap"}) == {"id": "1"}

    sent = session.requests[0]
    assert sent["url"] == "http://api.test/api/boards"
    assert sent["json"] == {"name": "Roadmap"}
    assert sent["headers"]["Authorization"] == "Bearer abc"
    assert sent["headers"]["Content-Type"] == "application/json"


def test_unauthenticated_request_has_no_bearer():
    session = StubSession(StubResponse(body={}))
    transport = HttpTransport("http://api.test", token="abc", session=session)
    transport.request("POST", "/api/auth/login", json={}, auth=False)
    assert "Authorization" not in session.requests[0]["headers"]


def test_no_token_no_bearer():
    session = StubSession(StubResponse(body=[]))
    HttpTransport("http://api.test", session=session).request("GET", "/api/boards")
    assert "Authorization" not in session.requests[0]["headers"]


def test_error_uses_server_message():
    session = StubSession(StubResponse(400, {"message": "Board name is required"}))
    transport = HttpTransport("http://api.test", session=session)

    with pytest.raises(RequestError) as exc_info:
        transport.request("POST", "/api/boards", json={}, fallback="Failed to create board")

    assert exc_info.value.message == "Board name is required"
    assert exc_info.value.status == 400


def test_error_without_message_uses_fallback():
    session = StubSession(StubResponse(502, raw=b"<html>Bad gateway</html>"))
    transport = HttpTransport("http://api.test", session=session)

    with pytest.raises(RequestError) as exc_info:
        transport.request("GET", "/api/boards", fallback="Failed to fetch boards")

    assert exc_info.value.message == "Failed to fetch boards"
    assert exc_info.value.status == 502


def test_connection_error_has_no_status():
    session = StubSession(requests.ConnectionError("refused"))
    transport = HttpTransport("http://api.test", session=session)

    with pytest.raises(RequestError) as exc_info:
        transport.request("GET", "/api/boards", fallback="Failed to fetch boards")

    assert exc_info.value.message == "Failed to fetch boards"
    assert exc_info.value.status is None


def test_empty_body_is_none():
    session = StubSession(StubResponse(204))
    assert HttpTransport("http://api.test", session=session).request("DELETE", "/api/tasks/1") is None


def test_undecodable_success_body():
    session = StubSession(StubResponse(200, raw=b"not json"))
    with pytest.raises(RequestError):
        HttpTransport("http://api.test", session=session).request("GET", "/api/boards")


def test_gateway_token_is_the_transport_token():
    transport = HttpTransport("http://api.test", session=StubSession())
    gateway = Gateway(transport)
    gateway.token = "xyz"
    assert transport.token == "xyz"
    assert transport.headers()["Authorization"] == "Bearer xyz"


def test_connect_reads_api_url_from_environment(monkeypatch):
    monkeypatch.setenv("TASKLANE_API_URL", "http://example.test:8080/")
    gateway = connect(token="t")
    assert gateway.transport.base_url == "http://example.test:8080"
    assert gateway.token == "t"


def test_connect_default_url():
    assert connect().transport.base_url == "http://localhost:5000"
