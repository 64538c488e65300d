"""In-memory HTML document with a stable element-id arena.

The tree is a BeautifulSoup parse with the html5lib builder, which builds
the same tree a browser would, implied <html>, <head> and <body> included.
Element ids live in an arena on the Document instead of being written into
the markup, so the rendered HTML never carries bookkeeping attributes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

PARSER = "html5lib"


class ParseFailure(Exception):
    """Raised when the HTML tree cannot be constructed at all."""


class Document:
    """A parsed HTML tree plus the id arena shared by extraction, grouping and editing."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup
        self._nodes: dict[int, Tag] = {}
        # Keyed by id(tag): Tag.__eq__ compares markup, so equal-looking
        # siblings would collide as dict keys.
        self._ids: dict[int, int] = {}
        self._next_id = 0
        if self.root.find("body", recursive=False) is None:
            # frameset documents have no <body>
            self.root.append(soup.new_tag("body"))

    @classmethod
    def parse(cls, html: str) -> Document:
        if not isinstance(html, str):
            raise ParseFailure(f"Expected HTML text, got {type(html).__name__}")
        try:
            soup = BeautifulSoup(html, PARSER)
        except Exception as exc:
            logger.error("HTML parse failed: %s", exc)
            raise ParseFailure(f"Failed to parse HTML: {exc}") from exc
        return cls(soup)

    @property
    def root(self) -> Tag:
        return self.soup.find("html")

    @property
    def head(self) -> Tag | None:
        return self.root.find("head", recursive=False)

    @property
    def body(self) -> Tag:
        return self.root.find("body", recursive=False)

    def element_id(self, tag: Tag) -> int:
        """Return the tag's id, allocating the next one if it has none yet."""
        existing = self._ids.get(id(tag))
        if existing is not None:
            return existing
        eid = self._next_id
        self._next_id += 1
        self._ids[id(tag)] = eid
        self._nodes[eid] = tag
        return eid

    def peek_id(self, tag: Tag) -> int | None:
        """Return the tag's id without allocating one."""
        return self._ids.get(id(tag))

    def lookup(self, element_id: int) -> Tag | None:
        return self._nodes.get(element_id)

    def elements(self) -> Iterator[Tag]:
        """Yield <body> and every element below it in document (pre-)order."""
        body = self.body
        yield body
        for node in body.descendants:
            if isinstance(node, Tag):
                yield node
