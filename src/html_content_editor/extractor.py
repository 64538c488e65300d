"""Walk a parsed document and emit its editable content fields.

Every element is classified once (see ``classify``) and the walk dispatches
on that category. Fields come out in document order; element ids come from
the document's arena, so walking the same tree twice yields the same ids.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from bs4 import Tag

from html_content_editor.document import Document
from html_content_editor.grouper import group_fields
from html_content_editor.models import ContentField, ParseResult

logger = logging.getLogger(__name__)

SKIP_TAGS = frozenset({
    "style", "script", "noscript", "svg", "head",
    "meta", "link", "title", "base", "template",
})

MEDIA_TAGS = frozenset({"picture", "img", "source"})

TEXT_TAGS = frozenset({
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "li", "td", "th", "dt", "dd",
    "blockquote", "figcaption", "label", "caption",
})

INLINE_TEXT_TAGS = frozenset({"span", "button"})

BLOCK_TAGS = frozenset({
    "div", "p", "h1", "h2", "h3", "h4", "h5", "h6",
    "section", "article", "aside", "main", "nav", "header", "footer",
    "ul", "ol", "li", "table", "form", "fieldset", "details", "figure",
    "blockquote", "pre", "dl", "address",
})

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

FULL_DOCUMENT_RE = re.compile(r"<html[\s>]", re.IGNORECASE)

_TEXT_LABELS = {
    "p": "Paragraph",
    "a": "Link Text",
    "button": "Button Text",
    "span": "Text",
    "li": "List Item",
    "td": "Table Cell",
    "th": "Table Cell",
    "label": "Label",
    "figcaption": "Caption",
}


class NodeCategory(Enum):
    SKIP = "skip"
    MEDIA = "media"
    LINK = "link"
    TEXT = "text"
    CONTAINER = "container"


def field_label(tag: str, prop: str) -> str:
    """Human-readable label for a tag/property pair."""
    tag = tag.lower()
    if prop == "href":
        return "Link URL"
    if prop == "src":
        return "Image URL"
    if prop == "srcset":
        return "Source URL" if tag == "source" else "Image URL"
    if prop == "alt":
        return "Image Alt Text"
    if tag in HEADING_TAGS:
        return f"Heading ({tag})"
    return _TEXT_LABELS.get(tag, "Text")


def _child_elements(tag: Tag) -> list[Tag]:
    return [c for c in tag.children if isinstance(c, Tag)]


def _has_block_child(tag: Tag) -> bool:
    return any(c.name in BLOCK_TAGS for c in _child_elements(tag))


def _text(tag: Tag) -> str:
    return tag.get_text().strip()


def classify(tag: Tag) -> NodeCategory:
    """Decide how the walk treats an element. First matching rule wins."""
    name = tag.name
    if name in SKIP_TAGS:
        return NodeCategory.SKIP
    if name in MEDIA_TAGS:
        return NodeCategory.MEDIA
    if name == "a":
        return NodeCategory.LINK
    if name in TEXT_TAGS:
        return NodeCategory.TEXT
    if name in INLINE_TEXT_TAGS and not _has_block_child(tag) and _text(tag):
        return NodeCategory.TEXT
    return NodeCategory.CONTAINER


class _FieldWalker:
    """Pre-order walk over an explicit stack that collects fields for one extraction pass."""

    def __init__(self, document: Document) -> None:
        self.document = document
        self.fields: list[ContentField] = []

    def add(self, tag: Tag, prop: str, value: str, label: str | None = None) -> None:
        eid = self.document.element_id(tag)
        self.fields.append(ContentField(
            id=f"{eid}-{prop}",
            element_id=eid,
            tag=tag.name.lower(),
            property=prop,
            label=label or field_label(tag.name, prop),
            original_value=value,
            value=value,
        ))

    def walk(self, root: Tag) -> None:
        stack = [root]
        while stack:
            tag = stack.pop()
            # reversed so the leftmost child is popped first
            stack.extend(reversed(self._visit(tag)))

    def _visit(self, tag: Tag) -> list[Tag]:
        """Emit the fields a tag owns; return the children still to walk."""
        category = classify(tag)
        if category is NodeCategory.SKIP:
            return []
        if category is NodeCategory.MEDIA:
            self._media(tag)
            return []
        if category is NodeCategory.LINK:
            return self._link(tag)
        if category is NodeCategory.TEXT:
            text = _text(tag)
            if text:
                self.add(tag, "textContent", text)
            return []
        return _child_elements(tag)

    def _media(self, tag: Tag) -> None:
        if tag.name == "picture":
            for child in _child_elements(tag):
                if child.name == "source":
                    self._picture_source(child)
                elif child.name == "img":
                    self._image(child)
        elif tag.name == "img":
            self._image(tag)
        else:
            srcset = tag.get("srcset")
            if srcset:
                self.add(tag, "srcset", srcset)

    def _picture_source(self, tag: Tag) -> None:
        srcset = tag.get("srcset")
        if not srcset:
            return
        media = tag.get("media")
        label = f"Image Source — {media}" if media else "Image Source"
        self.add(tag, "srcset", srcset, label=label)

    def _image(self, tag: Tag) -> None:
        src = tag.get("src")
        if src:
            self.add(tag, "src", src)
        else:
            srcset = tag.get("srcset")
            if srcset:
                self.add(tag, "srcset", srcset)
        # alt="" marks a decorative image and is still editable
        alt = tag.get("alt")
        if alt is not None:
            self.add(tag, "alt", alt)

    def _link(self, tag: Tag) -> list[Tag]:
        href = tag.get("href")
        if href:
            self.add(tag, "href", href)
        if not _has_block_child(tag):
            text = _text(tag)
            if text:
                self.add(tag, "textContent", text)
                return []
        return _child_elements(tag)


def extract_fields(document: Document) -> list[ContentField]:
    """Collect the editable fields of ``document`` in document order."""
    walker = _FieldWalker(document)
    walker.walk(document.body)
    return walker.fields


def extract(html: str) -> ParseResult:
    """
    Parse HTML and extract its editable fields, grouped.

    Raises:
        ParseFailure: when the tree cannot be built. A document with
            nothing to edit is not an error; check ``ParseResult.is_empty``.
    """
    document = Document.parse(html)
    is_full_document = bool(FULL_DOCUMENT_RE.search(html))
    fields = extract_fields(document)
    groups = group_fields(fields, document)

    if fields:
        logger.info("Extracted %d fields in %d groups", len(fields), len(groups))
    else:
        logger.info("No editable content found")

    return ParseResult(
        document=document,
        groups=groups,
        fields=fields,
        is_full_document=is_full_document,
    )
