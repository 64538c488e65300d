"""Tests for html_content_editor.session module."""

from __future__ import annotations

from html_content_editor.editor import apply_edits
from html_content_editor.extractor import extract
from html_content_editor.models import SavedSession
from html_content_editor.serializer import serialize
from html_content_editor.session import SessionStore, capture_session, restore_session


class TestCaptureAndRestore:
    def test_capture_records_every_field(self, product_grid):
        result = extract(product_grid)
        session = capture_session(result, product_grid)
        assert session.original_html == product_grid
        assert set(session.field_values) == {f.id for f in result.fields}
        assert session.timestamp > 0

    def test_restore_replays_edits(self, sample_document):
        result = extract(sample_document)
        apply_edits(result, {"1-textContent": "Gadgets for everyone", "0-src": "new-logo.png"})
        session = capture_session(result, sample_document)

        restored = restore_session(session)

        assert restored.field("1-textContent").value == "Gadgets for everyone"
        assert restored.field("1-textContent").original_value == "Widgets for everyone"
        assert restored.field("0-src").value == "new-logo.png"
        assert serialize(restored.document, restored.is_full_document, sample_document) == serialize(
            result.document, result.is_full_document, sample_document
        )

    def test_restore_ignores_unknown_ids(self):
        session = SavedSession(
            original_html="<p>Hi</p>",
            field_values={"0-textContent": "Hello", "12-href": "/x"},
        )
        restored = restore_session(session)
        assert [f.value for f in restored.fields] == ["Hello"]

    def test_restore_keeps_unsafe_url_out(self):
        session = SavedSession(
            original_html='<a href="/safe">Go</a>',
            field_values={"0-href": "javascript:alert(1)"},
        )
        restored = restore_session(session)
        assert "href" not in restored.document.lookup(0).attrs


class TestSessionStore:
    def test_save_and_load(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        session = SavedSession(original_html="<p>Hi</p>", field_values={"0-textContent": "Yo"})
        store.save("landing", session)
        loaded = store.load("landing")
        assert loaded == session

    def test_has_returns_false_for_missing(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        assert store.has("missing") is False

    def test_load_returns_none_for_missing(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        assert store.load("missing") is None

    def test_has_returns_true_after_save(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        store.save("landing", SavedSession(original_html="<p>Hi</p>"))
        assert store.has("landing") is True

    def test_clear_removes_all(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        store.save("one", SavedSession(original_html="<p>1</p>"))
        store.save("two", SavedSession(original_html="<p>2</p>"))

        assert store.clear() == 2

        assert store.has("one") is False
        assert store.has("two") is False

    def test_clear_leaves_other_files(self, tmp_path):
        session_dir = tmp_path / "sessions"
        store = SessionStore(session_dir=session_dir)
        (session_dir / "notes.json").write_text("{}", encoding="utf-8")
        store.save("one", SavedSession(original_html="<p>1</p>"))

        assert store.clear() == 1
        assert (session_dir / "notes.json").exists()

    def test_save_returns_session_file(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        path = store.save("landing", SavedSession(original_html="<p>Hi</p>"))
        assert path.parent == tmp_path / "sessions"
        assert path.name.startswith("session-")
        assert path.suffix == ".json"

    def test_session_dir_created_on_init(self, tmp_path):
        session_dir = tmp_path / "new_sessions"
        assert not session_dir.exists()
        SessionStore(session_dir=session_dir)
        assert session_dir.exists()

    def test_corrupted_file_returns_none(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        store.save("landing", SavedSession(original_html="<p>Hi</p>"))
        store._path("landing").write_text("not valid json{{{", encoding="utf-8")
        assert store.load("landing") is None

    def test_non_utf8_file_returns_none(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        store._path("landing").write_bytes(b"\xff\xfe{")
        assert store.load("landing") is None

    def test_wrong_shape_returns_none(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        store._path("landing").write_text('{"field_values": {}}', encoding="utf-8")
        assert store.load("landing") is None

    def test_different_names_have_different_files(self, tmp_path):
        store = SessionStore(session_dir=tmp_path / "sessions")
        store.save("a", SavedSession(original_html="<p>a</p>"))
        store.save("b", SavedSession(original_html="<p>b</p>"))
        assert store.load("a").original_html == "<p>a</p>"
        assert store.load("b").original_html == "<p>b</p>"
