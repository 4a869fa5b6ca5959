"""Runtime configuration from the environment and an optional .env file."""

import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:5000"

_loaded = False


def load_env() -> None:
    """Read ``.env`` from the working directory once. Real env vars win."""
    global _loaded
    if not _loaded:
        load_dotenv()
        _loaded = True


def api_url() -> str:
    load_env()
    return os.getenv("TASKLANE_API_URL", DEFAULT_API_URL).rstrip("/")


def config_dir() -> Path:
    """Directory holding the saved session."""
    load_env()
    explicit = os.getenv("TASKLANE_CONFIG_DIR")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / "tasklane"


def session_path() -> Path:
    return config_dir() / "session.yaml"
