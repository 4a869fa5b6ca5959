"""Handlers for 'tasklane board' commands."""

import asyncio

from tasklane.cli._common import (
    Notifications,
    call,
    error,
    find_board,
    format_task_line,
    output_json,
    output_result,
    require_session,
    run_controller,
)
from tasklane.controllers import CreateBoard, DeleteBoard, EditBoard
from tasklane.errors import RequestError
from tasklane.loaders import load_boards_with_counts
from tasklane.model.entities import STATUS_TITLES, STATUSES


def board_list(args) -> int:
    """List boards with their task counts."""
    gateway, _session = require_session(args)
    try:
        rows = asyncio.run(load_boards_with_counts(gateway))
    except RequestError as e:
        error(str(e), args.json)

    if args.json:
        output_json([{"id": b.id, "name": b.name, "description": b.description, "tasks": n} for b, n in rows])
    else:
        if not rows:
            print("No boards yet.")
        for board, count in rows:
            tasks = "task" if count == 1 else "tasks"
            print(f"{board.id}  {board.name:<24} {count} {tasks}")

    return 0


def board_show(args) -> int:
    """Show a board and its tasks grouped by status."""
    gateway, _session = require_session(args)
    board = find_board(gateway, args.id, args.json)
    tasks = call(args.json, gateway.tasks.list_for_board, board.id)

    if args.json:
        output_json({"id": board.id, "name": board.name, "description": board.description, "tasks": tasks})
    else:
        print(board.name)
        if board.description:
            print(board.description)
        for status in STATUSES:
            in_column = [t for t in tasks if t.status is status]
            print(f"\n{STATUS_TITLES[status]} ({len(in_column)})")
            for task in in_column:
                print(format_task_line(task, indent="  "))

    return 0


def board_add(args) -> int:
    """Create a board."""
    gateway, _session = require_session(args)
    board = run_controller(
        CreateBoard(gateway, Notifications()), args.json, name=args.name, description=args.description
    )
    output_result(board, f"Created board {board.id}: {board.name}", args.json)
    return 0


def board_edit(args) -> int:
    """Rename a board or change its description."""
    gateway, _session = require_session(args)
    board = find_board(gateway, args.id, args.json)
    updated = run_controller(
        EditBoard(board, gateway, Notifications()),
        args.json,
        name=args.name if args.name is not None else board.name,
        description=args.description if args.description is not None else board.description,
    )
    output_result(updated, f"Updated board {updated.id}: {updated.name}", args.json)
    return 0


def board_rm(args) -> int:
    """Delete a board and every task on it."""
    gateway, _session = require_session(args)
    board = find_board(gateway, args.id, args.json)
    run_controller(DeleteBoard(board, gateway, Notifications()), args.json)
    output_result({"id": board.id, "deleted": True}, f"Deleted board {board.id}: {board.name}", args.json)
    return 0
