"""Tests for 'tasklane board' commands."""

import json

import pytest

from tasklane.cli.board import board_add, board_edit, board_list, board_rm, board_show


def test_board_list_empty(signed_in, make_args, capsys):
    assert board_list(make_args()) == 0
    assert capsys.readouterr().out.strip() == "No boards yet."


def test_board_list(signed_in, board, tasks, gateway, make_args, capsys):
    gateway.boards.create("Empty")
    assert board_list(make_args()) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith(f"{board.id}  Roadmap")
    assert lines[0].endswith("3 tasks")
    assert lines[1].endswith("0 tasks")


def test_board_list_json(signed_in, board, tasks, make_args, capsys):
    assert board_list(make_args(json=True)) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == [{"id": board.id, "name": "Roadmap", "description": "Things to build", "tasks": 3}]


def test_board_list_requires_session(offline, make_args, capsys):
    with pytest.raises(SystemExit):
        board_list(make_args())
    assert capsys.readouterr().err.strip() == "error: Not signed in. Run 'tasklane login' first."


def test_board_show(signed_in, board, tasks, make_args, capsys):
    assert board_show(make_args(id=board.id)) == 0

    out = capsys.readouterr().out
    assert out.startswith("Roadmap\nThings to build\n")
    assert "To Do (1)" in out
    assert "In Progress (1)" in out
    assert "Done (1)" in out
    assert "Fix login" in out


def test_board_show_json(signed_in, board, tasks, make_args, capsys):
    assert board_show(make_args(json=True, id=board.id)) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["name"] == "Roadmap"
    assert [t["status"] for t in data["tasks"]] == ["todo", "in-progress", "done"]


def test_board_show_missing(signed_in, make_args, capsys):
    with pytest.raises(SystemExit):
        board_show(make_args(id="99"))
    assert capsys.readouterr().err.strip() == "error: Board '99' not found."


def test_board_add(signed_in, gateway, make_args, capsys):
    assert board_add(make_args(name="Launch", description="Go live")) == 0

    (board,) = gateway.boards.list()
    assert capsys.readouterr().out.strip() == f"Created board {board.id}: Launch"
    assert board.description == "Go live"


def test_board_add_blank_name(signed_in, make_args, capsys):
    with pytest.raises(SystemExit):
        board_add(make_args(name="  ", description=""))
    assert capsys.readouterr().err.strip() == "error: Board name is required"


def test_board_edit_keeps_unset_fields(signed_in, board, gateway, make_args, capsys):
    assert board_edit(make_args(id=board.id, name="Plan", description=None)) == 0

    updated = gateway.boards.get(board.id)
    assert updated.name == "Plan"
    assert updated.description == "Things to build"
    assert capsys.readouterr().out.strip() == f"Updated board {board.id}: Plan"


def test_board_rm(signed_in, board, tasks, gateway, make_args, capsys):
    assert board_rm(make_args(id=board.id)) == 0
    assert capsys.readouterr().out.strip() == f"Deleted board {board.id}: Roadmap"
    assert gateway.boards.list() == []
