"""Save edited field values and replay them onto a fresh parse later."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from pydantic import ValidationError

from html_content_editor.editor import apply_edit
from html_content_editor.extractor import extract
from html_content_editor.models import ParseResult, SavedSession

logger = logging.getLogger(__name__)

DEFAULT_SESSION_DIR = Path(".editor_sessions")


def capture_session(result: ParseResult, original_html: str) -> SavedSession:
    """Snapshot the current value of every field."""
    return SavedSession(
        original_html=original_html,
        field_values={f.id: f.value for f in result.fields},
    )


def restore_session(session: SavedSession) -> ParseResult:
    """
    Re-parse the saved HTML and replay the saved values onto it.

    Element ids are assigned in document order, so a fresh parse of the
    same HTML gives the same field ids the values were saved under.
    """
    result = extract(session.original_html)
    replayed = 0
    for field_id, value in session.field_values.items():
        field = result.field(field_id)
        if field is None or field.value == value:
            continue
        if apply_edit(result, field_id, value):
            replayed += 1
    logger.info("Restored session: %d edits replayed", replayed)
    return result


class SessionStore:
    """
    Named editing sessions kept as JSON files under one directory.

    A session name maps to `session-<sha256 prefix>.json`, so any name is
    safe to use as a file name. Files that fail to read or validate load as
    None and are left on disk for inspection.
    """

    def __init__(self, session_dir: Path | None = None) -> None:
        self._dir = session_dir or DEFAULT_SESSION_DIR
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        digest = hashlib.sha256(name.encode("utf-8")).hexdigest()[:16]
        return self._dir / f"session-{digest}.json"

    def has(self, name: str) -> bool:
        """True when a session was saved under this name."""
        return self._path(name).exists()

    def load(self, name: str) -> SavedSession | None:
        path = self._path(name)
        if not path.exists():
            logger.debug("No saved session %r in %s", name, self._dir)
            return None
        try:
            session = SavedSession.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Unreadable session %r at %s: %s", name, path, exc)
            return None
        logger.debug("Loaded session %r with %d field values", name, len(session.field_values))
        return session

    def save(self, name: str, session: SavedSession) -> Path:
        """Write the session, replacing any earlier one with the same name."""
        path = self._path(name)
        path.write_text(session.model_dump_json(), encoding="utf-8")
        logger.info("Saved session %r (%d field values) to %s", name, len(session.field_values), path)
        return path

    def clear(self) -> int:
        """Delete every saved session; returns how many were removed."""
        removed = 0
        for path in self._dir.glob("session-*.json"):
            path.unlink()
            removed += 1
        logger.info("Removed %d saved sessions from %s", removed, self._dir)
        return removed
