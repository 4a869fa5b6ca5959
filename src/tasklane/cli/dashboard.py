"""Handler for 'tasklane dashboard'."""

import asyncio

from tasklane.cli._common import error, output_json, require_session
from tasklane.errors import RequestError
from tasklane.loaders import load_dashboard
from tasklane.metrics import DashboardStats


def dashboard(args) -> int:
    """Totals and status distribution across every visible board."""
    gateway, session = require_session(args)
    try:
        boards, tasks = asyncio.run(load_dashboard(gateway))
    except RequestError as e:
        error(str(e), args.json)

    stats = DashboardStats.from_lists(boards, tasks)

    if args.json:
        output_json(
            {
                "boards": stats.boards,
                "tasks": stats.tasks.total,
                "completed": stats.tasks.completed,
                "pending": stats.tasks.pending,
                "distribution": stats.tasks.distribution,
            }
        )
    else:
        print(f"Welcome back, {session.display_name}")
        for label, value in stats.tiles():
            print(f"  {label:<14} {value}")
        print()
        for share in stats.tasks.distribution:
            print(f"  {share.title:<14} {share.count:>4}  {share.percent:5.1f}%")

    return 0
