"""Fixtures for UI tests."""

import pytest
from textual.app import App

from tasklane.audit import AuditSink
from tasklane.session import Session


class HostApp(App):
    """Minimal app carrying what tasklane screens expect from ``self.app``.

    Every notification is recorded in ``notes`` as ``(severity, title, message)``.
    """

    def __init__(self, gateway, screen_factory=None, session=None):
        super().__init__()
        self.gateway = gateway
        self.session = session or Session()
        self.session_file = None
        self.audit = AuditSink(gateway.activities)
        self.notes = []
        self._screen_factory = screen_factory

    def on_mount(self) -> None:
        if self._screen_factory is not None:
            self.push_screen(self._screen_factory(self))

    def notify(self, message, *, title="", severity="information", **kwargs):
        self.notes.append((severity, title, message))
        super().notify(message, title=title, severity=severity, **kwargs)


async def _settle(app, pilot):
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()
    await pilot.pause()


@pytest.fixture
def settle():
    """Let workers finish and the DOM catch up with the cache."""
    return _settle


@pytest.fixture
def host(gateway):
    def make(screen_factory=None, session=None):
        return HostApp(gateway, screen_factory, session)

    return make
