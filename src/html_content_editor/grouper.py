"""Cluster extracted fields into repeated "card" sections and a general bucket.

A card is an element that holds at least two fields and has at least one
sibling that does too, e.g. each item of a product grid. Three linear passes
over the pre-ordered element list do the work:

1. subtree field counts (children add into their parent, in reverse order),
2. card detection per parent,
3. nearest-card propagation from parents down to their descendants.
"""

from __future__ import annotations

import logging
from collections import Counter

from bs4 import Tag

from html_content_editor.document import Document
from html_content_editor.models import ContentField, FieldGroup

logger = logging.getLogger(__name__)

GENERAL_GROUP_ID = "general"
GENERAL_GROUP_LABEL = "General"
MIN_CARD_FIELDS = 2
MIN_CARD_SIBLINGS = 2
MAX_LABEL_LENGTH = 60

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def _truncate(text: str) -> str:
    if len(text) > MAX_LABEL_LENGTH:
        return text[:MAX_LABEL_LENGTH] + "…"
    return text


def card_label(card: Tag, index: int) -> str:
    """Label a card from its first heading, image alt or link text."""
    heading = card.find(HEADING_TAGS)
    if heading is not None:
        text = heading.get_text().strip()
        if text:
            return _truncate(text)

    img = card.find("img", alt=True)
    if img is not None:
        alt = img["alt"].strip()
        if alt:
            return _truncate(alt)

    link = card.find("a")
    if link is not None:
        text = link.get_text().strip()
        if text:
            return _truncate(text)

    return f"Section {index}"


def _subtree_counts(elements: list[Tag], fields: list[ContentField], document: Document) -> dict[int, int]:
    """Number of fields owned by each element or any of its descendants, keyed by id(tag)."""
    own: Counter[int] = Counter()
    for field in fields:
        tag = document.lookup(field.element_id)
        if tag is not None:
            own[id(tag)] += 1

    counts = {id(el): own[id(el)] for el in elements}
    # Pre-order puts children after their parent, so walking backwards
    # finishes every child before it is added into the parent.
    for el in reversed(elements[1:]):
        counts[id(el.parent)] += counts[id(el)]
    return counts


def _find_cards(elements: list[Tag], counts: dict[int, int]) -> set[int]:
    cards: set[int] = set()
    seen_parents: set[int] = set()
    for el in elements:
        if counts[id(el)] < MIN_CARD_FIELDS:
            continue
        parent = el.parent
        if parent is None or id(parent) in seen_parents:
            continue
        seen_parents.add(id(parent))

        siblings = [
            child for child in parent.children
            if isinstance(child, Tag) and counts.get(id(child), 0) >= MIN_CARD_FIELDS
        ]
        if len(siblings) >= MIN_CARD_SIBLINGS:
            cards.update(id(sib) for sib in siblings)
    return cards


def _nearest_cards(elements: list[Tag], cards: set[int]) -> dict[int, Tag | None]:
    nearest: dict[int, Tag | None] = {}
    for el in elements:
        if id(el) in cards:
            nearest[id(el)] = el
        else:
            nearest[id(el)] = nearest.get(id(el.parent)) if el.parent is not None else None
    return nearest


def group_fields(fields: list[ContentField], document: Document) -> list[FieldGroup]:
    """
    Partition fields into groups and set each field's ``group_id``.

    The general group (if any) comes first, then one group per card in
    document order.
    """
    if not fields:
        return []

    elements = list(document.elements())
    counts = _subtree_counts(elements, fields, document)
    cards = _find_cards(elements, counts)
    nearest = _nearest_cards(elements, cards)

    general: list[ContentField] = []
    card_fields: dict[int, tuple[Tag, list[ContentField]]] = {}

    for field in fields:
        tag = document.lookup(field.element_id)
        card = nearest.get(id(tag)) if tag is not None else None
        if card is None:
            general.append(field)
            continue
        if id(card) not in card_fields:
            card_fields[id(card)] = (card, [])
        card_fields[id(card)][1].append(field)

    groups: list[FieldGroup] = []
    if general:
        for field in general:
            field.group_id = GENERAL_GROUP_ID
        groups.append(FieldGroup(id=GENERAL_GROUP_ID, label=GENERAL_GROUP_LABEL, fields=general))

    for index, (card, members) in enumerate(card_fields.values(), start=1):
        group_id = f"card-{index}"
        for field in members:
            field.group_id = group_id
        groups.append(FieldGroup(id=group_id, label=card_label(card, index), fields=members))

    logger.debug(
        "Grouped %d fields: %d general, %d cards",
        len(fields), len(general), len(card_fields),
    )
    return groups
