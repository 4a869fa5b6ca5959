"""Handlers for 'tasklane login', 'register', 'logout', 'whoami' and 'passwd'."""

import getpass

from tasklane.cli._common import (
    Notifications,
    call,
    open_session,
    output_json,
    output_result,
    require_session,
    run_controller,
)
from tasklane.controllers import ChangePassword, Login, Register
from tasklane.session import Session, clear_session, save_session


def _remember(result, json_mode: bool) -> None:
    session = Session(token=result.token, user=result.user.to_dict() if result.user else {})
    save_session(session)
    name = session.display_name
    output_result({"user": session.user}, f"Signed in as {name}", json_mode)


def login(args) -> int:
    """Sign in and save the session."""
    gateway, _session = open_session(args)
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    result = run_controller(Login(gateway, Notifications()), args.json, email=args.email, password=password)
    _remember(result, args.json)
    return 0


def register(args) -> int:
    """Create an account and sign in with it."""
    gateway, _session = open_session(args)
    if args.password is not None:
        password = confirm = args.password
    else:
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
    result = run_controller(
        Register(gateway, Notifications()),
        args.json,
        username=args.username,
        email=args.email,
        password=password,
        confirm=confirm,
    )
    _remember(result, args.json)
    return 0


def logout(args) -> int:
    """Forget the saved session."""
    clear_session()
    output_result({"signed_in": False}, "Signed out", args.json)
    return 0


def whoami(args) -> int:
    """Show the signed-in user as the server sees them."""
    gateway, session = require_session(args)
    user = call(args.json, gateway.auth.me)

    if args.json:
        output_json({**user.to_dict(), "name": session.display_name})
    else:
        role = user.role.value if user.role else "member"
        print(f"{user.username} <{user.email}> ({role})")
        if session.profile.get("name"):
            print(f"  display name: {session.display_name}")

    return 0


def passwd(args) -> int:
    """Change the signed-in user's password."""
    gateway, _session = require_session(args)
    current = getpass.getpass("Current password: ")
    new = getpass.getpass("New password: ")
    confirm = getpass.getpass("Confirm new password: ")
    run_controller(ChangePassword(gateway, Notifications()), args.json, current=current, new=new, confirm=confirm)
    output_result({"changed": True}, "Password changed", args.json)
    return 0
