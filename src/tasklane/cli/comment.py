"""Handlers for 'tasklane comment' and 'tasklane activity' commands."""

import asyncio

from tasklane.cli._common import (
    Notifications,
    audit_for,
    call,
    find_board,
    find_task_or_die,
    output_json,
    output_result,
    require_session,
    run_controller,
)
from tasklane.controllers import AddComment, DeleteComment, EditComment
from tasklane.loaders import load_users_by_id
from tasklane.model.entities import TaskComment


def comment_list(args) -> int:
    """List a task's comments, oldest first."""
    gateway, _session = require_session(args)
    task = find_task_or_die(gateway, args.task, args.json)
    comments = call(args.json, gateway.comments.list_for_task, task.id)

    if args.json:
        output_json(comments)
        return 0

    authors = asyncio.run(load_users_by_id(gateway, (c.user_id for c in comments)))
    if not comments:
        print("No comments yet.")
    for comment in comments:
        author = authors.get(comment.user_id)
        print(f"{comment.id}  {author.username if author else 'Unknown'}  {comment.created_at}")
        for line in comment.content.splitlines():
            print(f"  {line}")

    return 0


def comment_add(args) -> int:
    """Comment on a task."""
    gateway, _session = require_session(args)
    task = find_task_or_die(gateway, args.task, args.json)
    comment = run_controller(
        AddComment(task, gateway, Notifications(), audit=audit_for(gateway)), args.json, content=args.text
    )
    output_result(comment, f"Added comment {comment.id} to task {task.id}", args.json)
    return 0


def _comment_ref(comment_id: str) -> TaskComment:
    # The server checks ownership; only the id is sent.
    return TaskComment(id=comment_id, task_id="", user_id="", content="")


def comment_edit(args) -> int:
    """Replace the text of one of your comments."""
    gateway, _session = require_session(args)
    comment = run_controller(
        EditComment(_comment_ref(args.id), gateway, Notifications()), args.json, content=args.text
    )
    output_result(comment, f"Updated comment {comment.id}", args.json)
    return 0


def comment_rm(args) -> int:
    """Delete one of your comments."""
    gateway, _session = require_session(args)
    run_controller(DeleteComment(_comment_ref(args.id), gateway, Notifications()), args.json)
    output_result({"id": args.id, "deleted": True}, f"Deleted comment {args.id}", args.json)
    return 0


def activity_list(args) -> int:
    """Show a board's activity log, newest first."""
    gateway, _session = require_session(args)
    board = find_board(gateway, args.board, args.json)
    entries = call(args.json, gateway.activities.list_for_board, board.id)

    if args.json:
        output_json(entries)
        return 0

    users = asyncio.run(load_users_by_id(gateway, (e.user_id for e in entries)))
    if not entries:
        print("No activity yet.")
    for entry in entries:
        user = users.get(entry.user_id)
        who = user.username if user else "Unknown"
        print(f"{entry.created_at}  {who:<12} {entry.action.value:<15} {entry.details}")

    return 0
