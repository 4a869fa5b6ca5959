"""Entry point for tasklane CLI."""

import argparse
import logging
import sys
import tempfile
from pathlib import Path

NOUNS = {
    "login",
    "register",
    "logout",
    "whoami",
    "passwd",
    "board",
    "task",
    "comment",
    "activity",
    "dashboard",
}


def tui_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tasklane", description="Kanban boards for a task board API")
    parser.add_argument("--api-url", dest="api_url", help="API base URL (default: $TASKLANE_API_URL)")
    parser.add_argument("--demo", action="store_true", help="Use an in-memory backend with sample data")
    return parser


def run_tui(argv: list[str]) -> None:
    """Start the Textual app against the configured API, or the demo backend."""
    from tasklane.api import Gateway, connect
    from tasklane.api.memory import MemoryBackend, MemoryTransport, seed_demo
    from tasklane.session import Session, load_session
    from tasklane.ui import TasklaneApp

    args = tui_parser().parse_args(argv)

    if args.demo:
        backend = MemoryBackend()
        token = seed_demo(backend)
        gateway = Gateway(MemoryTransport(backend, token))
        session = Session(token=token, user=gateway.auth.me().to_dict())
        # The demo session never touches the real session file.
        with tempfile.TemporaryDirectory(prefix="tasklane-demo-") as tmp:
            TasklaneApp(gateway, session, session_file=Path(tmp) / "session.yaml").run()
        return

    session = load_session()
    gateway = connect(args.api_url, token=session.token)
    TasklaneApp(gateway, session).run()


def main():
    # No noun = TUI mode
    if len(sys.argv) < 2 or (sys.argv[1] not in NOUNS and sys.argv[1] not in ("-h", "--help")):
        run_tui(sys.argv[1:])
        return

    from tasklane.cli import build_parser

    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
        level=[logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)],
    )

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
