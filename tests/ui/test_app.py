"""Tests for the top-level app: sign in, sections and sign out."""

import pytest
from textual.widgets import Input, Static

from tasklane.api import Gateway
from tasklane.api.memory import MemoryTransport
from tasklane.session import Session, load_session, save_session
from tasklane.ui import TasklaneApp
from tasklane.ui.board import BoardScreen
from tasklane.ui.boards import BoardItem, BoardsScreen
from tasklane.ui.dashboard import DashboardScreen, StatTile
from tasklane.ui.login import LoginScreen
from tasklane.ui.profile import ProfileScreen


@pytest.fixture
def session_file(tmp_path):
    return tmp_path / "session.yaml"


@pytest.fixture
def signed_in(gateway, owner, session_file):
    session = Session(token=gateway.token, user=gateway.auth.me().to_dict())
    save_session(session, session_file)
    return TasklaneApp(gateway, session, session_file=session_file)


@pytest.fixture
def signed_out(backend, owner, session_file):
    return TasklaneApp(Gateway(MemoryTransport(backend)), Session(), session_file=session_file)


def _tile_values(screen):
    return {tile.label: str(tile.query_one(".tile-value", Static).content) for tile in screen.query(StatTile)}


@pytest.mark.asyncio
async def test_signed_in_starts_on_dashboard(signed_in, board, tasks, settle):
    app = signed_in
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        assert isinstance(screen, DashboardScreen)
        assert str(screen.query_one("#welcome", Static).content) == "Welcome back, owner"
        assert _tile_values(screen) == {"Total Boards": "1", "Total Tasks": "3", "Completed": "1", "Pending": "2"}
        assert "Roadmap" in str(screen.query_one("#recent", Static).content)


@pytest.mark.asyncio
async def test_dashboard_without_boards(signed_in, settle):
    app = signed_in
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert str(app.screen.query_one("#recent", Static).content) == "No boards yet."


@pytest.mark.asyncio
async def test_sections(signed_in, board, settle):
    app = signed_in
    async with app.run_test() as pilot:
        await settle(app, pilot)

        await pilot.press("2")
        await settle(app, pilot)
        assert isinstance(app.screen, BoardsScreen)
        assert [item.board.name for item in app.screen.query(BoardItem)] == ["Roadmap"]

        await pilot.press("3")
        await settle(app, pilot)
        assert isinstance(app.screen, ProfileScreen)
        assert app.section == "profile"
        assert len(app.screen_stack) == 2


@pytest.mark.asyncio
async def test_section_switch_leaves_board(signed_in, board, settle):
    app = signed_in
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("2")
        await settle(app, pilot)

        app.screen.open_board(board)
        await settle(app, pilot)
        assert isinstance(app.screen, BoardScreen)

        await pilot.press("1")
        await settle(app, pilot)
        assert isinstance(app.screen, DashboardScreen)
        assert len(app.screen_stack) == 2


@pytest.mark.asyncio
async def test_signed_out_starts_on_login(signed_out, settle):
    app = signed_out
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert isinstance(app.screen, LoginScreen)

        # Sections are unavailable until signed in.
        await app.action_show("boards")
        await settle(app, pilot)
        assert isinstance(app.screen, LoginScreen)


@pytest.mark.asyncio
async def test_sign_in_saves_session(signed_out, session_file, settle):
    app = signed_out
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        screen.query_one("#login-email", Input).value = "owner@example.com"
        screen.query_one("#login-password", Input).value = "secret1"

        await screen.sign_in()
        await settle(app, pilot)

        assert isinstance(app.screen, DashboardScreen)
        saved = load_session(session_file)
        assert saved.signed_in
        assert saved.current_user.username == "owner"
        assert app.gateway.token == saved.token


@pytest.mark.asyncio
async def test_bad_password_stays_on_login(signed_out, session_file, settle):
    app = signed_out
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        screen.query_one("#login-email", Input).value = "owner@example.com"
        screen.query_one("#login-password", Input).value = "wrong-password"

        await screen.sign_in()
        await settle(app, pilot)

        assert app.screen is screen
        assert not session_file.exists()
        assert any(n.severity == "error" for n in app._notifications)


@pytest.mark.asyncio
async def test_register_signs_in(signed_out, backend, session_file, settle):
    app = signed_out
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        screen.show("register")
        for field_id, value in [
            ("register-username", "carol"),
            ("register-email", "carol@example.com"),
            ("register-password", "abcdef"),
            ("register-confirm", "abcdef"),
        ]:
            screen.query_one(f"#{field_id}", Input).value = value

        await screen.sign_up()
        await settle(app, pilot)

        assert isinstance(app.screen, DashboardScreen)
        assert load_session(session_file).current_user.username == "carol"


@pytest.mark.asyncio
async def test_logout(signed_in, session_file, settle):
    app = signed_in
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("ctrl+l")
        await settle(app, pilot)

        assert isinstance(app.screen, LoginScreen)
        assert not app.session.signed_in
        assert app.gateway.token is None
        assert not session_file.exists()
