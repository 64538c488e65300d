"""Apply field edits to the parsed document in place."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from html_content_editor.models import ContentField, ParseResult

logger = logging.getLogger(__name__)

URL_PROPERTIES = frozenset({"href", "src", "srcset"})
UNSAFE_URL_RE = re.compile(r"^(javascript|data|vbscript)\s*:", re.IGNORECASE)
LEADING_CONTROL_RE = re.compile(r"^[\x00-\x20]+")
URL_WHITESPACE_RE = re.compile(r"[\t\n\r]")


def normalize_url(value: str) -> str:
    """Drop what a browser ignores in a URL: leading C0 controls and spaces, any tab or newline."""
    return URL_WHITESPACE_RE.sub("", LEADING_CONTROL_RE.sub("", value))


def is_unsafe_url(value: str) -> bool:
    """True for values a browser resolves to a javascript:, data: or vbscript: URL."""
    return bool(UNSAFE_URL_RE.match(normalize_url(value)))


def apply_edit(result: ParseResult, field_id: str, value: str) -> bool:
    """
    Write a new value for one field into the document.

    Unsafe URLs are never written: the attribute is removed instead.
    Unknown field ids and elements that are no longer in the arena are
    ignored; returns whether the edit was applied.
    """
    field = result.field(field_id)
    if field is None:
        logger.debug("Ignoring edit for unknown field %r", field_id)
        return False

    element = result.document.lookup(field.element_id)
    if element is None:
        logger.debug("Ignoring edit for %s: element %d not found", field_id, field.element_id)
        return False

    prop = field.property
    if prop == "textContent":
        element.string = value
    elif prop in URL_PROPERTIES and is_unsafe_url(value):
        logger.warning("Removed unsafe %s on <%s> (field %s)", prop, field.tag, field_id)
        del element[prop]
    else:
        element[prop] = value

    field.value = value
    return True


def apply_edits(result: ParseResult, values: Mapping[str, str]) -> int:
    """Apply several edits; returns how many were applied."""
    applied = 0
    for field_id, value in values.items():
        if apply_edit(result, field_id, value):
            applied += 1
    return applied


def changed_fields(result: ParseResult) -> list[ContentField]:
    return [f for f in result.fields if f.changed]
