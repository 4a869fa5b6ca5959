"""Shared helpers for CLI command handlers."""

import asyncio
import json
import sys
from dataclasses import asdict, dataclass, field, is_dataclass
from enum import Enum
from typing import Any

from tasklane.api import Gateway, connect
from tasklane.audit import AuditSink
from tasklane.controllers import MutationController
from tasklane.errors import NotFound, RequestError
from tasklane.loaders import find_task
from tasklane.model.entities import Board, Task
from tasklane.session import Session, load_session


@dataclass
class Notifications:
    """Collects controller notifications so handlers can report them."""

    messages: list[tuple[str, str, str]] = field(default_factory=list)

    def __call__(self, message: str, *, title: str = "", severity: str = "information") -> None:
        self.messages.append((severity, title, message))

    @property
    def errors(self) -> list[str]:
        return [message for severity, _title, message in self.messages if severity == "error"]


def open_session(args) -> tuple[Gateway, Session]:
    """Gateway for ``--api-url`` carrying the saved token, if any."""
    session = load_session()
    return connect(args.api_url, token=session.token), session


def require_session(args) -> tuple[Gateway, Session]:
    """As open_session, but exit 1 unless signed in."""
    gateway, session = open_session(args)
    if not session.signed_in:
        error("Not signed in. Run 'tasklane login' first.", args.json)
    return gateway, session


def run_controller(controller: MutationController, json_mode: bool, **fields) -> Any:
    """Submit a controller, wait for its audit writes, and exit 1 on failure."""
    notes = controller.notify

    async def _submit() -> bool:
        ok = await controller.submit(**fields)
        if controller.audit is not None:
            await controller.audit.join()
        return ok

    if not asyncio.run(_submit()):
        errors = notes.errors if isinstance(notes, Notifications) else []
        error(errors[-1] if errors else "Request failed", json_mode)
    return controller.result


def audit_for(gateway: Gateway) -> AuditSink:
    return AuditSink(gateway.activities)


def find_board(gateway: Gateway, board_id: str, json_mode: bool) -> Board:
    """Lookup board by ID. Exit 1 if not found."""
    try:
        board = gateway.boards.get(board_id)
    except RequestError as e:
        error(str(e), json_mode)
    if board is None:
        error(f"Board '{board_id}' not found.", json_mode)
    return board


def find_task_or_die(gateway: Gateway, task_id: str, json_mode: bool) -> Task:
    """Lookup task by ID across all boards. Exit 1 if not found."""
    try:
        return asyncio.run(find_task(gateway, task_id))
    except (NotFound, RequestError) as e:
        error(str(e), json_mode)


def call(json_mode: bool, func, *args, **kwargs) -> Any:
    """Run a gateway call, turning a RequestError into exit 1."""
    try:
        return func(*args, **kwargs)
    except RequestError as e:
        error(str(e), json_mode)


def to_plain(obj: Any) -> Any:
    """Dataclasses and enums as JSON-ready values."""
    if is_dataclass(obj):
        return to_plain(asdict(obj))
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(v) for v in obj]
    return obj


def output_json(data: Any) -> None:
    """Write JSON to stdout."""
    print(json.dumps(to_plain(data), indent=2))


def output_result(data: Any, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


def format_task_line(task: Task, assignee: str = "", indent: str = "") -> str:
    """Format a task as a single text line."""
    who = f"  @{assignee}" if assignee else ""
    due = f"  due {task.due_date}" if task.due_date else ""
    return f"{indent}{task.id}  {task.status.value:<11} {task.priority.value:<6}  {task.title}{who}{due}"
