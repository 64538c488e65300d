"""Command-line interface for html-content-editor."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from html_content_editor.config import Settings
from html_content_editor.document import ParseFailure
from html_content_editor.editor import apply_edits
from html_content_editor.extractor import extract
from html_content_editor.fetcher import FetchError, fetch_html, is_url
from html_content_editor.models import ParseResult
from html_content_editor.serializer import render_preview, serialize
from html_content_editor.session import SessionStore, capture_session, restore_session

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_EMPTY = 3

NO_CONTENT_MESSAGE = (
    "No editable content found. Make sure your HTML contains text, images, or links."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="html-content-editor",
        description="Edit the text, links and images of an HTML page as plain fields.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--session-dir",
        default=None,
        help="Directory for saved sessions (default: from .env SESSION_DIR)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    source_help = "HTML file path, http(s) URL, or - for stdin"

    extract_cmd = sub.add_parser("extract", help="List the editable fields as JSON")
    extract_cmd.add_argument("source", help=source_help)
    extract_cmd.add_argument("-o", "--output", default=None, help="Output file path (default: stdout)")

    apply_cmd = sub.add_parser("apply", help="Apply field edits and print the updated HTML")
    apply_cmd.add_argument("source", help=source_help)
    apply_cmd.add_argument("edits", help="JSON file mapping field ids to new values")
    apply_cmd.add_argument("--preview", action="store_true", help="Print the sandboxed preview instead")
    apply_cmd.add_argument(
        "--session",
        default=None,
        help="Save the edited values under this session name",
    )
    apply_cmd.add_argument("-o", "--output", default=None, help="Output file path (default: stdout)")

    preview_cmd = sub.add_parser("preview", help="Print a sandboxed preview page")
    preview_cmd.add_argument("source", help=source_help)
    preview_cmd.add_argument("-o", "--output", default=None, help="Output file path (default: stdout)")

    resume_cmd = sub.add_parser("resume", help="Restore a saved session and print its HTML")
    resume_cmd.add_argument("name", nargs="?", default=None, help="Session name (default: from .env DEFAULT_SESSION)")
    resume_cmd.add_argument("--preview", action="store_true", help="Print the sandboxed preview instead")
    resume_cmd.add_argument("-o", "--output", default=None, help="Output file path (default: stdout)")

    return parser


def read_source(source: str, settings: Settings) -> str:
    """Load HTML from stdin, a URL or a file."""
    if source == "-":
        html = sys.stdin.read()
    elif is_url(source):
        html = fetch_html(source, settings)
    else:
        html = Path(source).read_text(encoding="utf-8")
    return html.strip()


def _write_output(text: str, output: str | None) -> None:
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Output written to {output}", file=sys.stderr)
    else:
        print(text)


def _render(result: ParseResult, html: str, preview: bool) -> str:
    if preview:
        return render_preview(result.document, result.is_full_document)
    return serialize(result.document, result.is_full_document, html)


def _cmd_extract(args: argparse.Namespace, settings: Settings) -> int:
    result = extract(read_source(args.source, settings))
    if result.is_empty:
        print(NO_CONTENT_MESSAGE, file=sys.stderr)
        return EXIT_EMPTY
    payload = result.model_dump(include={"is_full_document", "groups"})
    _write_output(json.dumps(payload, indent=2, ensure_ascii=False), args.output)
    return EXIT_OK


def _cmd_apply(args: argparse.Namespace, settings: Settings) -> int:
    html = read_source(args.source, settings)
    edits = json.loads(Path(args.edits).read_text(encoding="utf-8"))
    if not isinstance(edits, dict):
        print(f"Edits file must contain a JSON object, got {type(edits).__name__}", file=sys.stderr)
        return EXIT_ERROR

    result = extract(html)
    if result.is_empty:
        print(NO_CONTENT_MESSAGE, file=sys.stderr)
        return EXIT_EMPTY

    values: dict[str, str] = {}
    for field_id, value in edits.items():
        if not isinstance(value, str):
            logger.warning("Skipping edit for %s: expected a string, got %s", field_id, type(value).__name__)
            continue
        values[field_id] = value

    applied = apply_edits(result, values)
    logger.info("Applied %d of %d edits", applied, len(edits))

    if args.session:
        store = SessionStore(Path(settings.session_dir))
        store.save(args.session, capture_session(result, html))
        print(f"Session saved as {args.session!r}", file=sys.stderr)

    _write_output(_render(result, html, args.preview), args.output)
    return EXIT_OK


def _cmd_preview(args: argparse.Namespace, settings: Settings) -> int:
    result = extract(read_source(args.source, settings))
    _write_output(render_preview(result.document, result.is_full_document), args.output)
    return EXIT_OK


def _cmd_resume(args: argparse.Namespace, settings: Settings) -> int:
    name = args.name or settings.default_session
    session = SessionStore(Path(settings.session_dir)).load(name)
    if session is None:
        print(f"No saved session named {name!r}", file=sys.stderr)
        return EXIT_ERROR
    result = restore_session(session)
    _write_output(_render(result, session.original_html, args.preview), args.output)
    return EXIT_OK


_COMMANDS = {
    "extract": _cmd_extract,
    "apply": _cmd_apply,
    "preview": _cmd_preview,
    "resume": _cmd_resume,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    if args.session_dir is not None:
        settings = replace(settings, session_dir=args.session_dir)

    try:
        return _COMMANDS[args.command](args, settings)
    except (ParseFailure, FetchError, OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
