"""Tests for the board screen."""

import pytest
from textual.widgets import Input, Static

from tasklane.model.entities import STATUS_TITLES, Status
from tasklane.modes import Idle
from tasklane.ui.board import BoardScreen
from tasklane.ui.card import TaskCard
from tasklane.ui.column import StatusColumn
from tasklane.ui.dialogs import ConfirmDeleteScreen, TaskFormScreen


def _column(screen, status):
    return screen.query_one(f"#column-{status.value}", StatusColumn)


def _titles(screen, status):
    return [card.item.title for card in _column(screen, status).cards]


@pytest.fixture
def app(host, board, tasks):
    return host(lambda app: BoardScreen(app.gateway, board.id, audit=app.audit))


@pytest.mark.asyncio
async def test_tasks_grouped_by_status(app, settle):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        assert isinstance(screen, BoardScreen)
        assert _titles(screen, Status.TODO) == ["Write docs"]
        assert _titles(screen, Status.IN_PROGRESS) == ["Fix login"]
        assert _titles(screen, Status.DONE) == ["Ship v1"]
        title = _column(screen, Status.TODO).query_one(".column-title", Static)
        assert str(title.content) == f"{STATUS_TITLES[Status.TODO]} (1)"


@pytest.mark.asyncio
async def test_header_shows_board(app, settle):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        name = app.screen.query_one("#board-name", Static)
        assert "Roadmap" in str(name.content)
        assert str(app.screen.query_one("#board-description", Static).content) == "Things to build"


@pytest.mark.asyncio
async def test_first_card_focused(app, settle):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert isinstance(app.focused, TaskCard)
        assert app.focused.item.title == "Write docs"
        for column in app.screen.query(StatusColumn):
            assert not column.query_one(".cards").can_focus


@pytest.mark.asyncio
async def test_keyboard_move_updates_backend_and_columns(app, settle, gateway, board):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("shift+right")
        await settle(app, pilot)

        moved = next(t for t in gateway.tasks.list_for_board(board.id) if t.title == "Write docs")
        assert moved.status is Status.IN_PROGRESS
        assert _titles(app.screen, Status.TODO) == []
        assert sorted(_titles(app.screen, Status.IN_PROGRESS)) == ["Fix login", "Write docs"]


@pytest.mark.asyncio
async def test_move_past_last_column_does_nothing(app, settle, backend, tasks):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        _column(app.screen, Status.DONE).cards[0].focus()
        await pilot.pause()
        await pilot.press("shift+right")
        await settle(app, pilot)

        assert backend.calls_to("PUT", f"/api/tasks/{tasks[2].id}") == []
        assert _titles(app.screen, Status.DONE) == ["Ship v1"]


@pytest.mark.asyncio
async def test_missing_board_goes_back(host, settle):
    app = host(lambda app: BoardScreen(app.gateway, "404"))
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert not isinstance(app.screen, BoardScreen)
        assert ("warning", "Board not found", "The board you're looking for doesn't exist.") in app.notes


@pytest.mark.asyncio
async def test_failed_create_keeps_form_open(app, settle, backend, board, gateway):
    backend.fail("POST", "/api/tasks", "Database unavailable", times=1)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("n")
        await pilot.pause()

        form = app.screen
        assert isinstance(form, TaskFormScreen)
        form.query_one("#title", Input).value = "Write release notes"

        assert await form.submit(**form.fields()) is False
        await pilot.pause()

        assert app.screen is form
        assert form.query_one("#title", Input).value == "Write release notes"
        assert ("error", "Failed to create task", "Database unavailable") in app.notes
        assert len(gateway.tasks.list_for_board(board.id)) == 3

        # Retrying the same form succeeds once the backend recovers.
        assert await form.submit(**form.fields()) is True
        await settle(app, pilot)

        assert isinstance(app.screen, BoardScreen)
        assert "Write release notes" in _titles(app.screen, Status.TODO)


@pytest.mark.asyncio
async def test_new_task_starts_in_focused_column(app, settle):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        _column(app.screen, Status.IN_PROGRESS).cards[0].focus()
        await pilot.pause()
        await pilot.press("n")
        await pilot.pause()

        assert app.screen.initial_status is Status.IN_PROGRESS


@pytest.mark.asyncio
async def test_delete_task(app, settle, gateway, board):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("delete")
        await pilot.pause()

        dialog = app.screen
        assert isinstance(dialog, ConfirmDeleteScreen)
        assert await dialog.submit() is True
        await settle(app, pilot)

        assert [t.title for t in gateway.tasks.list_for_board(board.id)] == ["Fix login", "Ship v1"]
        assert _titles(app.screen, Status.TODO) == []


@pytest.mark.asyncio
async def test_escape_cancels_dialog(app, settle, backend):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("n")
        await pilot.pause()
        before = len(backend.calls)

        await pilot.press("escape")
        await pilot.pause()

        assert isinstance(app.screen, BoardScreen)
        assert isinstance(app.screen.ui_mode, Idle)
        assert len(backend.calls) == before


@pytest.mark.asyncio
async def test_drag_card_to_another_column(app, settle, gateway, board):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        card = _column(screen, Status.TODO).cards[0]
        card.begin_drag(card.region.offset)
        await pilot.pause()
        assert screen.active_drag is card

        done = _column(screen, Status.DONE).region
        card.drag_to(done.x + 1, done.y + 1)
        card.release_at(done.x + 1, done.y + 1)
        await settle(app, pilot)

        assert screen.active_drag is None
        moved = next(t for t in gateway.tasks.list_for_board(board.id) if t.title == "Write docs")
        assert moved.status is Status.DONE
        assert sorted(_titles(screen, Status.DONE)) == ["Ship v1", "Write docs"]


@pytest.mark.asyncio
async def test_escape_cancels_drag(app, settle, backend):
    async with app.run_test() as pilot:
        await settle(app, pilot)
        screen = app.screen
        card = _column(screen, Status.TODO).cards[0]
        card.begin_drag(card.region.offset)
        await pilot.pause()

        await pilot.press("escape")
        await settle(app, pilot)

        assert app.screen is screen
        assert screen.active_drag is None
        assert screen.transitions.dragged is None
        assert not [c for c in backend.calls if c.method == "PUT"]
