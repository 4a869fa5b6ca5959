"""Main Textual application for tasklane."""

import logging
from pathlib import Path

from textual.app import App
from textual.binding import Binding
from textual.logging import TextualHandler
from textual.screen import Screen

from tasklane.api import Gateway, LoginResult
from tasklane.audit import AuditSink
from tasklane.session import Session, clear_session, save_session
from tasklane.ui.boards import BoardsScreen
from tasklane.ui.dashboard import DashboardScreen
from tasklane.ui.login import LoginScreen
from tasklane.ui.profile import ProfileScreen

logger = logging.getLogger(__name__)

SECTIONS = {
    "dashboard": DashboardScreen,
    "boards": BoardsScreen,
    "profile": ProfileScreen,
}


class TasklaneApp(App):
    """Task board TUI."""

    CSS = """
    Toast {
        padding: 0 1;
    }
    """

    TITLE = "tasklane"
    BINDINGS = [
        Binding("1", "show('dashboard')", "Dashboard"),
        Binding("2", "show('boards')", "Boards"),
        Binding("3", "show('profile')", "Profile"),
        Binding("ctrl+l", "logout", "Sign out"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        gateway: Gateway,
        session: Session,
        session_file: Path | None = None,
        audit: AuditSink | None = None,
    ):
        super().__init__()
        self.gateway = gateway
        self.session = session
        self.session_file = session_file
        self.audit = audit if audit is not None else AuditSink(gateway.activities)
        self.section: str | None = None

    async def on_mount(self) -> None:
        logging.getLogger("tasklane").addHandler(TextualHandler())
        if self.session.signed_in:
            self.gateway.token = self.session.token
            await self.show("dashboard")
        else:
            self.push_screen(LoginScreen(), self._on_signed_in)

    async def _on_signed_in(self, result: LoginResult | None) -> None:
        if result is None:
            self.exit()
            return
        self.session.token = result.token
        self.session.user = result.user.to_dict() if result.user else {}
        save_session(self.session, self.session_file)
        logger.info("signed in as %s", self.session.display_name)
        await self.show("dashboard")

    async def _reset_stack(self) -> None:
        while len(self.screen_stack) > 1:
            await self.pop_screen()

    async def show(self, section: str) -> None:
        """Replace whatever is on screen with a fresh top-level section."""
        await self._reset_stack()
        self.section = section
        screen: Screen = SECTIONS[section]()
        await self.push_screen(screen)

    async def action_show(self, section: str) -> None:
        if not self.session.signed_in or section == self.section and len(self.screen_stack) == 2:
            return
        await self.show(section)

    async def action_logout(self) -> None:
        if not self.session.signed_in:
            return
        if self.audit is not None:
            await self.audit.join()
        clear_session(self.session_file)
        self.session = Session()
        self.gateway.token = None
        self.section = None
        await self._reset_stack()
        self.notify("You have been signed out.", title="Signed out")
        self.push_screen(LoginScreen(), self._on_signed_in)

    async def action_quit(self) -> None:
        if self.audit is not None:
            await self.audit.join()
        self.exit()
