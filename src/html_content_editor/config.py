"""Centralized configuration loaded from .env."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_USER_AGENT = "html-content-editor/0.1"


def _load_env() -> None:
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()


@dataclass(frozen=True)
class Settings:
    # Fetching HTML from a URL
    fetch_timeout: int = 30
    user_agent: str = DEFAULT_USER_AGENT

    # Saved editing sessions
    session_dir: str = ".editor_sessions"
    default_session: str = "default"

    @classmethod
    def from_env(cls) -> Settings:
        _load_env()
        timeout = os.getenv("FETCH_TIMEOUT", "30")
        try:
            fetch_timeout = int(timeout)
        except ValueError:
            raise ValueError(f"FETCH_TIMEOUT must be an integer, got {timeout!r}") from None
        return cls(
            fetch_timeout=fetch_timeout,
            user_agent=os.getenv("USER_AGENT", DEFAULT_USER_AGENT),
            session_dir=os.getenv("SESSION_DIR", ".editor_sessions"),
            default_session=os.getenv("DEFAULT_SESSION", "default"),
        )
