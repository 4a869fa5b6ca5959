"""Handlers for 'tasklane task' commands."""

import asyncio

from tasklane.cli._common import (
    Notifications,
    audit_for,
    call,
    error,
    find_board,
    find_task_or_die,
    format_task_line,
    output_json,
    output_result,
    require_session,
    run_controller,
)
from tasklane.controllers import AssignTask, CreateTask, DeleteTask, EditTask
from tasklane.kanban import KanbanTransitions
from tasklane.model.entities import STATUS_TITLES, Status


def task_list(args) -> int:
    """List a board's tasks, optionally for one status."""
    gateway, _session = require_session(args)
    board = find_board(gateway, args.board, args.json)
    tasks = call(args.json, gateway.tasks.list_for_board, board.id)
    if args.status:
        tasks = [t for t in tasks if t.status is Status(args.status)]

    if args.json:
        output_json(tasks)
    else:
        users = {u.id: u.username for u in call(args.json, gateway.users.list)}
        for task in tasks:
            print(format_task_line(task, users.get(task.assigned_to or "", "")))

    return 0


def task_add(args) -> int:
    """Create a task on a board."""
    gateway, _session = require_session(args)
    board = find_board(gateway, args.board, args.json)
    task = run_controller(
        CreateTask(board.id, gateway, Notifications(), audit=audit_for(gateway)),
        args.json,
        title=args.title,
        description=args.description,
        status=args.status,
        priority=args.priority,
        due_date=args.due,
        tags=args.tag or [],
    )
    output_result(task, f"Created task {task.id} in {STATUS_TITLES[task.status]}", args.json)
    return 0


def task_edit(args) -> int:
    """Change a task's fields. Unspecified fields keep their values."""
    gateway, _session = require_session(args)
    task = find_task_or_die(gateway, args.id, args.json)

    def pick(value, current):
        return current if value is None else value

    updated = run_controller(
        EditTask(task, gateway, Notifications(), audit=audit_for(gateway)),
        args.json,
        title=pick(args.title, task.title),
        description=pick(args.description, task.description),
        status=pick(args.status, task.status),
        priority=pick(args.priority, task.priority),
        due_date=pick(args.due, task.due_date or ""),
        tags=pick(args.tag, task.tags),
    )
    output_result(updated, f"Updated task {updated.id}: {updated.title}", args.json)
    return 0


def task_move(args) -> int:
    """Move a task to another status column."""
    gateway, _session = require_session(args)
    task = find_task_or_die(gateway, args.id, args.json)
    target = Status(args.status)
    notes = Notifications()
    audit = audit_for(gateway)

    async def reload() -> None:
        pass

    async def _move() -> bool:
        moved = await KanbanTransitions(gateway, notes, reload, audit=audit).move(task, target)
        await audit.join()
        return moved

    moved = asyncio.run(_move())
    if notes.errors:
        error(notes.errors[-1], args.json)

    title = STATUS_TITLES[target]
    text = f"Moved task {task.id} to {title}" if moved else f"Task {task.id} is already in {title}"
    output_result({"id": task.id, "status": target, "moved": moved}, text, args.json)
    return 0


def task_assign(args) -> int:
    """Assign a task to a user (by id or username), or unassign it."""
    gateway, _session = require_session(args)
    task = find_task_or_die(gateway, args.id, args.json)
    users = call(args.json, gateway.users.list)

    user_id = ""
    if args.user:
        chosen = next((u for u in users if args.user in (u.id, u.username)), None)
        if chosen is None:
            error(f"User '{args.user}' not found.", args.json)
        user_id = chosen.id

    controller = AssignTask(task, gateway, Notifications(), users=users, audit=audit_for(gateway))
    updated = run_controller(controller, args.json, user_id=user_id)
    message, _title = controller.succeeded(updated)
    output_result(updated, message, args.json)
    return 0


def task_rm(args) -> int:
    """Delete a task."""
    gateway, _session = require_session(args)
    task = find_task_or_die(gateway, args.id, args.json)
    run_controller(DeleteTask(task, gateway, Notifications(), audit=audit_for(gateway)), args.json)
    output_result({"id": task.id, "deleted": True}, f"Deleted task {task.id}: {task.title}", args.json)
    return 0
