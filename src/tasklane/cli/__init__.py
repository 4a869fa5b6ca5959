"""CLI argument parser and dispatch for tasklane."""

import argparse

from tasklane.cli.auth import login, logout, passwd, register, whoami
from tasklane.cli.board import board_add, board_edit, board_list, board_rm, board_show
from tasklane.cli.comment import activity_list, comment_add, comment_edit, comment_list, comment_rm
from tasklane.cli.dashboard import dashboard
from tasklane.cli.task import task_add, task_assign, task_edit, task_list, task_move, task_rm
from tasklane.model.entities import Priority, Status

STATUS_CHOICES = [s.value for s in Status]
PRIORITY_CHOICES = [p.value for p in Priority]


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--api-url", dest="api_url", help="API base URL (default: $TASKLANE_API_URL)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")

    parser = argparse.ArgumentParser(
        prog="tasklane",
        description="Kanban boards for a task board API",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- account ---
    login_p = nouns.add_parser("login", help="Sign in", parents=[common])
    login_p.add_argument("email", help="Account email")
    login_p.add_argument("--password", help="Password (prompted if omitted)")
    login_p.set_defaults(func=login)

    register_p = nouns.add_parser("register", help="Create an account", parents=[common])
    register_p.add_argument("username", help="Username")
    register_p.add_argument("email", help="Account email")
    register_p.add_argument("--password", help="Password (prompted if omitted)")
    register_p.set_defaults(func=register)

    logout_p = nouns.add_parser("logout", help="Forget the saved session", parents=[common])
    logout_p.set_defaults(func=logout)

    whoami_p = nouns.add_parser("whoami", help="Show the signed-in user", parents=[common])
    whoami_p.set_defaults(func=whoami)

    passwd_p = nouns.add_parser("passwd", help="Change your password", parents=[common])
    passwd_p.set_defaults(func=passwd)

    # --- board ---
    board_p = nouns.add_parser("board", help="Board operations", parents=[common])
    board_verbs = board_p.add_subparsers(dest="verb")

    board_list_p = board_verbs.add_parser("list", help="List boards", parents=[common])
    board_list_p.set_defaults(func=board_list)

    board_show_p = board_verbs.add_parser("show", help="Show a board and its tasks", parents=[common])
    board_show_p.add_argument("id", help="Board ID")
    board_show_p.set_defaults(func=board_show)

    board_add_p = board_verbs.add_parser("add", help="Create a board", parents=[common])
    board_add_p.add_argument("name", help="Board name")
    board_add_p.add_argument("--description", default="", help="Board description")
    board_add_p.set_defaults(func=board_add)

    board_edit_p = board_verbs.add_parser("edit", help="Edit a board", parents=[common])
    board_edit_p.add_argument("id", help="Board ID")
    board_edit_p.add_argument("--name", help="New name")
    board_edit_p.add_argument("--description", help="New description")
    board_edit_p.set_defaults(func=board_edit)

    board_rm_p = board_verbs.add_parser("rm", help="Delete a board and its tasks", parents=[common])
    board_rm_p.add_argument("id", help="Board ID")
    board_rm_p.set_defaults(func=board_rm)

    # board with no verb = list
    board_p.set_defaults(func=board_list)

    # --- task ---
    task_p = nouns.add_parser("task", help="Task operations", parents=[common])
    task_verbs = task_p.add_subparsers(dest="verb")

    task_list_p = task_verbs.add_parser("list", help="List a board's tasks", parents=[common])
    task_list_p.add_argument("board", help="Board ID")
    task_list_p.add_argument("--status", choices=STATUS_CHOICES, help="Only tasks with this status")
    task_list_p.set_defaults(func=task_list)

    task_add_p = task_verbs.add_parser("add", help="Create a task", parents=[common])
    task_add_p.add_argument("board", help="Board ID")
    task_add_p.add_argument("title", help="Task title")
    task_add_p.add_argument("--description", default="", help="Task description")
    task_add_p.add_argument("--status", choices=STATUS_CHOICES, default=Status.TODO.value, help="Initial status")
    task_add_p.add_argument("--priority", choices=PRIORITY_CHOICES, default=Priority.MEDIUM.value, help="Priority")
    task_add_p.add_argument("--due", help="Due date (YYYY-MM-DD)")
    task_add_p.add_argument("--tag", action="append", help="Tag (repeatable)")
    task_add_p.set_defaults(func=task_add)

    task_edit_p = task_verbs.add_parser("edit", help="Edit a task", parents=[common])
    task_edit_p.add_argument("id", help="Task ID")
    task_edit_p.add_argument("--title", help="New title")
    task_edit_p.add_argument("--description", help="New description")
    task_edit_p.add_argument("--status", choices=STATUS_CHOICES, help="New status")
    task_edit_p.add_argument("--priority", choices=PRIORITY_CHOICES, help="New priority")
    task_edit_p.add_argument("--due", help="New due date (YYYY-MM-DD, empty to clear)")
    task_edit_p.add_argument("--tag", action="append", help="Replace tags (repeatable)")
    task_edit_p.set_defaults(func=task_edit)

    task_move_p = task_verbs.add_parser("move", help="Move a task to a status", parents=[common])
    task_move_p.add_argument("id", help="Task ID")
    task_move_p.add_argument("status", choices=STATUS_CHOICES, help="Target status")
    task_move_p.set_defaults(func=task_move)

    task_assign_p = task_verbs.add_parser("assign", help="Assign a task (omit user to unassign)", parents=[common])
    task_assign_p.add_argument("id", help="Task ID")
    task_assign_p.add_argument("user", nargs="?", help="User ID or username")
    task_assign_p.set_defaults(func=task_assign)

    task_rm_p = task_verbs.add_parser("rm", help="Delete a task", parents=[common])
    task_rm_p.add_argument("id", help="Task ID")
    task_rm_p.set_defaults(func=task_rm)

    # --- comment ---
    comment_p = nouns.add_parser("comment", help="Comment operations", parents=[common])
    comment_verbs = comment_p.add_subparsers(dest="verb")

    comment_list_p = comment_verbs.add_parser("list", help="List a task's comments", parents=[common])
    comment_list_p.add_argument("task", help="Task ID")
    comment_list_p.set_defaults(func=comment_list)

    comment_add_p = comment_verbs.add_parser("add", help="Comment on a task", parents=[common])
    comment_add_p.add_argument("task", help="Task ID")
    comment_add_p.add_argument("text", help="Comment text (markdown, @username mentions)")
    comment_add_p.set_defaults(func=comment_add)

    comment_edit_p = comment_verbs.add_parser("edit", help="Edit a comment", parents=[common])
    comment_edit_p.add_argument("id", help="Comment ID")
    comment_edit_p.add_argument("text", help="New comment text")
    comment_edit_p.set_defaults(func=comment_edit)

    comment_rm_p = comment_verbs.add_parser("rm", help="Delete a comment", parents=[common])
    comment_rm_p.add_argument("id", help="Comment ID")
    comment_rm_p.set_defaults(func=comment_rm)

    # --- activity ---
    activity_p = nouns.add_parser("activity", help="Board activity log", parents=[common])
    activity_verbs = activity_p.add_subparsers(dest="verb")

    activity_list_p = activity_verbs.add_parser("list", help="Show a board's activity", parents=[common])
    activity_list_p.add_argument("board", help="Board ID")
    activity_list_p.set_defaults(func=activity_list)

    # --- dashboard ---
    dashboard_p = nouns.add_parser("dashboard", help="Totals across all boards", parents=[common])
    dashboard_p.set_defaults(func=dashboard)

    return parser
