"""The signed-in session, persisted between runs as YAML."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from tasklane.config import session_path
from tasklane.model.entities import User

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Bearer token, the user it belongs to, and local profile overrides."""

    token: str | None = None
    user: dict = field(default_factory=dict)
    profile: dict = field(default_factory=dict)

    @property
    def signed_in(self) -> bool:
        return bool(self.token)

    @property
    def current_user(self) -> User | None:
        return User.from_dict(self.user) if self.user.get("id") else None

    @property
    def display_name(self) -> str:
        return self.profile.get("name") or self.user.get("username") or "User"

    @property
    def email(self) -> str:
        return self.profile.get("email") or self.user.get("email") or ""

    def to_dict(self) -> dict:
        return {"token": self.token, "user": self.user, "profile": self.profile}


def load_session(path: Path | None = None) -> Session:
    """Read the session file. Missing or unreadable files give an empty session."""
    path = path or session_path()
    try:
        data = yaml.safe_load(path.read_text())
    except FileNotFoundError:
        return Session()
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("ignoring unreadable session file %s: %s", path, exc)
        return Session()
    if not isinstance(data, dict):
        return Session()
    return Session(
        token=data.get("token") or None,
        user=data.get("user") if isinstance(data.get("user"), dict) else {},
        profile=data.get("profile") if isinstance(data.get("profile"), dict) else {},
    )


def save_session(session: Session, path: Path | None = None) -> None:
    path = path or session_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(session.to_dict(), default_flow_style=False, sort_keys=False))
    path.chmod(0o600)


def clear_session(path: Path | None = None) -> None:
    path = path or session_path()
    path.unlink(missing_ok=True)
