"""html-content-editor - edit the content of an HTML page as a flat set of fields."""

__version__ = "0.1.0"

from html_content_editor.document import Document, ParseFailure
from html_content_editor.editor import apply_edit, apply_edits
from html_content_editor.extractor import extract
from html_content_editor.grouper import group_fields
from html_content_editor.models import ContentField, FieldGroup, ParseResult, SavedSession
from html_content_editor.serializer import render_preview, serialize

__all__ = [
    "extract",
    "group_fields",
    "serialize",
    "render_preview",
    "apply_edit",
    "apply_edits",
    "Document",
    "ParseFailure",
    "ContentField",
    "FieldGroup",
    "ParseResult",
    "SavedSession",
]
