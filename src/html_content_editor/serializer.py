"""Render an edited document back to HTML for export or sandboxed preview."""

from __future__ import annotations

import copy
import logging
import re

from bs4 import Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from html_content_editor.document import Document

logger = logging.getLogger(__name__)

DEFAULT_DOCTYPE = "<!DOCTYPE html>"
DOCTYPE_RE = re.compile(r"^\s*(<!doctype[^>]*>)", re.IGNORECASE)

PREVIEW_CSP = "script-src 'none'; object-src 'none';"
PREVIEW_CSP_META = f'<meta http-equiv="Content-Security-Policy" content="{PREVIEW_CSP}">'


class SourceOrderFormatter(HTMLFormatter):
    """HTML5 output that keeps attributes in the order they were parsed."""

    def attributes(self, tag: Tag):
        if tag.attrs is None:
            return []
        return [
            (key, None if self.empty_attributes_are_booleans and value == "" else value)
            for key, value in tag.attrs.items()
        ]


FORMATTER = SourceOrderFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=True,
)


def _render(tag: Tag) -> str:
    return tag.decode(formatter=FORMATTER)


def _render_contents(tag: Tag) -> str:
    return tag.decode_contents(formatter=FORMATTER)


def original_doctype(original_html: str) -> str | None:
    """Return the doctype declaration at the start of the input, verbatim."""
    match = DOCTYPE_RE.match(original_html)
    return match.group(1) if match else None


def serialize(document: Document, is_full_document: bool, original_html: str) -> str:
    """
    Render the document as export HTML.

    Full documents keep the input's doctype (or get ``<!DOCTYPE html>``);
    fragments render as the inner markup of ``<body>``.
    """
    if is_full_document:
        doctype = original_doctype(original_html) or DEFAULT_DOCTYPE
        return doctype + "\n" + _render(document.root)
    return _render_contents(document.body)


def _csp_meta(document: Document) -> Tag:
    return document.soup.new_tag(
        "meta",
        attrs={"http-equiv": "Content-Security-Policy", "content": PREVIEW_CSP},
    )


def render_preview(document: Document, is_full_document: bool) -> str:
    """
    Render a self-contained HTML page for sandboxed display.

    A Content-Security-Policy meta tag blocking scripts and plugin objects
    goes first in ``<head>``. The live document is not modified.
    """
    if is_full_document:
        root = copy.copy(document.root)
        head = root.find("head", recursive=False)
        if head is None:
            head = document.soup.new_tag("head")
            root.insert(0, head)
        head.insert(0, _csp_meta(document))
        return DEFAULT_DOCTYPE + "\n" + _render(root)

    return "".join([
        f'{DEFAULT_DOCTYPE}<html><head><meta charset="UTF-8">{PREVIEW_CSP_META}</head><body>',
        _render_contents(document.body),
        "</body></html>",
    ])
