"""Tests for the board list screen."""

import pytest
from textual.widgets import Input, Static

from tasklane.ui.boards import BoardItem, BoardsScreen
from tasklane.ui.dialogs import BoardFormScreen, ConfirmDeleteScreen


@pytest.fixture
def app(host):
    return host(lambda app: BoardsScreen())


def _rows(screen):
    return [(item.board.name, item.task_count) for item in screen.query(BoardItem)]


@pytest.mark.asyncio
async def test_empty(app, settle):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert _rows(app.screen) == []
        assert app.screen.query_one("#empty", Static).display


@pytest.mark.asyncio
async def test_lists_boards_with_counts(app, settle, board, tasks, gateway):
    gateway.boards.create("Empty")
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert _rows(app.screen) == [("Roadmap", 3), ("Empty", 0)]
        assert not app.screen.query_one("#empty", Static).display
        assert app.screen.selected_board().name == "Roadmap"


@pytest.mark.asyncio
async def test_create_board(app, settle, gateway):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("n")
        await pilot.pause()

        form = app.screen
        assert isinstance(form, BoardFormScreen)
        form.query_one("#name", Input).value = "Launch"
        assert await form.submit(**form.fields()) is True
        await settle(app, pilot)

        assert isinstance(app.screen, BoardsScreen)
        assert _rows(app.screen) == [("Launch", 0)]
        assert [b.name for b in gateway.boards.list()] == ["Launch"]


@pytest.mark.asyncio
async def test_create_board_requires_name(app, settle, backend):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("n")
        await pilot.pause()

        form = app.screen
        assert await form.submit(**form.fields()) is False
        assert app.screen is form
        assert backend.calls_to("POST", "/api/boards") == []
        assert ("error", "Invalid input", "Board name is required") in app.notes


@pytest.mark.asyncio
async def test_delete_board(app, settle, board, tasks, gateway):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.screen.action_delete_board()
        await pilot.pause()

        dialog = app.screen
        assert isinstance(dialog, ConfirmDeleteScreen)
        assert await dialog.submit() is True
        await settle(app, pilot)

        assert _rows(app.screen) == []
        assert gateway.boards.list() == []
