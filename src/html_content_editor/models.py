"""Pydantic models for extracted content fields."""

from __future__ import annotations

import time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from html_content_editor.document import Document

FieldProperty = Literal["textContent", "href", "src", "srcset", "alt"]


class ContentField(BaseModel):
    """One editable piece of content owned by a single element."""

    id: str = Field(description="'<element_id>-<property>', unique per parse")
    element_id: int = Field(description="Stable id of the owning element")
    tag: str = Field(description="Lower-cased tag name of the owning element")
    property: FieldProperty
    label: str
    original_value: str = Field(frozen=True, description="Snapshot taken at parse time")
    value: str = Field(description="Current, possibly edited, value")
    group_id: str = ""

    @property
    def changed(self) -> bool:
        return self.value != self.original_value


class FieldGroup(BaseModel):
    """Related fields, either one detected card or the general bucket."""

    id: str
    label: str
    fields: list[ContentField] = Field(default_factory=list)


class ParseResult(BaseModel):
    """Everything produced by one extraction pass."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    document: Document = Field(exclude=True)
    groups: list[FieldGroup] = Field(default_factory=list)
    fields: list[ContentField] = Field(
        default_factory=list,
        description="All fields in document order",
    )
    is_full_document: bool = False

    @property
    def is_empty(self) -> bool:
        """True when the HTML parsed fine but holds nothing editable."""
        return not self.fields

    def field(self, field_id: str) -> ContentField | None:
        for f in self.fields:
            if f.id == field_id:
                return f
        return None


class SavedSession(BaseModel):
    """Field values saved alongside the HTML they were extracted from."""

    original_html: str
    field_values: dict[str, str] = Field(default_factory=dict)
    timestamp: float = Field(default_factory=time.time)
