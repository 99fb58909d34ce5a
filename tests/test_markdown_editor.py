"""Tests for the line/cursor primitives and link insertion of MarkdownEditor."""
from __future__ import annotations

import json

import pytest

from wikipreserve.app import config
from wikipreserve.app.links import EditorPosition
from wikipreserve.app.ui.heading_utils import heading_anchor
from wikipreserve.app.ui.markdown_editor import (
    EditorFileInfo,
    MarkdownEditor,
    _index_from_utf16,
    _utf16_len,
)


@pytest.fixture
def editor(qapp):
    widget = MarkdownEditor()
    yield widget
    widget.deleteLater()


def test_utf16_helpers_count_non_bmp_as_two_units() -> None:
    text = "a🔧b"
    assert _utf16_len(text) == 4
    assert [_index_from_utf16(text, units) for units in range(5)] == [0, 1, 2, 2, 3]


def test_get_line_and_cursor(editor):
    editor.set_markdown("first\nsecond line")
    editor.set_cursor(EditorPosition(1, 3))

    assert editor.get_cursor() == EditorPosition(1, 3)
    assert editor.get_line(0) == "first"
    assert editor.get_line(1) == "second line"


def test_cursor_offsets_are_string_indices_after_emoji(editor):
    line = "🔧 [Note](Note.md)"
    editor.set_markdown(line)
    editor.set_cursor(EditorPosition(0, len(line)))

    assert editor.textCursor().positionInBlock() == len(line) + 1
    assert editor.get_cursor() == EditorPosition(0, len(line))


def test_replace_range_substitutes_span(editor):
    editor.set_markdown("intro\nSee [Note](Note.md) now")

    editor.replace_range("[[Note]]", EditorPosition(1, 4), EditorPosition(1, 19))

    assert editor.to_markdown() == "intro\nSee [[Note]] now"


def test_replace_range_after_emoji(editor):
    editor.set_markdown("🔧 [Note](Note.md)")

    editor.replace_range("[[Note]]", EditorPosition(0, 2), EditorPosition(0, 17))

    assert editor.to_markdown() == "🔧 [[Note]]"


def test_replace_range_notifies_once(editor):
    editor.set_markdown("[Note](Note.md)")
    seen = []
    editor.editorChange.connect(lambda ed, info: seen.append(info))

    editor.replace_range("[[Note]]", EditorPosition(0, 0), EditorPosition(0, 15))

    assert len(seen) == 1


def test_out_of_range_positions_raise(editor):
    editor.set_markdown("short")

    with pytest.raises(IndexError):
        editor.get_line(3)
    with pytest.raises(IndexError):
        editor.set_cursor(EditorPosition(0, 6))
    with pytest.raises(IndexError):
        editor.replace_range("x", EditorPosition(0, 0), EditorPosition(2, 0))
    assert editor.to_markdown() == "short"


def test_editor_change_carries_file_info(editor):
    seen = []
    editor.editorChange.connect(lambda ed, info: seen.append((ed, info)))
    editor.set_context("/notes/Today.md")

    editor.set_markdown("hello")

    assert seen
    source, info = seen[-1]
    assert source is editor
    assert info == EditorFileInfo(path="/notes/Today.md")


class TestInsertLink:
    def test_markdown_style_page(self, editor):
        editor.set_use_markdown_links(True)
        editor.insert_link("Note")
        assert editor.to_markdown() == "[Note](Note.md)"

    def test_markdown_style_page_in_folder(self, editor):
        editor.set_use_markdown_links(True)
        editor.insert_link("folder/Sub Note")
        assert editor.to_markdown() == "[Sub Note](folder/Sub%20Note.md)"

    def test_markdown_style_heading(self, editor):
        editor.set_use_markdown_links(True)
        editor.insert_link("Note", "Setup: Linux")
        assert editor.to_markdown() == "[Setup: Linux](Note#Setup%20Linux)"

    def test_wikilink_style(self, editor):
        editor.set_use_markdown_links(False)
        editor.insert_link("Note", "Intro")
        assert editor.to_markdown() == "[[Note#Intro]]"

    def test_inserts_at_cursor(self, editor):
        editor.set_use_markdown_links(False)
        editor.set_markdown("See ")
        editor.set_cursor(EditorPosition(0, 4))
        editor.insert_link("Note")
        assert editor.to_markdown() == "See [[Note]]"
        assert editor.get_cursor() == EditorPosition(0, 12)

    def test_blank_page_is_ignored(self, editor):
        editor.insert_link("   ")
        assert editor.to_markdown() == ""

    def test_style_comes_from_config(self, editor, tmp_path, monkeypatch):
        cfg = tmp_path / "config.json"
        cfg.write_text(json.dumps({"use_markdown_links": True}), encoding="utf-8")
        monkeypatch.setattr(config, "GLOBAL_CONFIG", cfg)
        editor.insert_link("Note")
        assert editor.to_markdown() == "[Note](Note.md)"

    def test_unreadable_config_falls_back_to_wikilinks(self, editor, tmp_path, monkeypatch):
        cfg = tmp_path / "config.json"
        cfg.write_text("{not json", encoding="utf-8")
        monkeypatch.setattr(config, "GLOBAL_CONFIG", cfg)
        editor.insert_link("Note")
        assert editor.to_markdown() == "[[Note]]"


@pytest.mark.parametrize(
    "title, anchor",
    [
        ("Intro", "Intro"),
        ("My Heading", "My Heading"),
        ("Setup: Linux", "Setup Linux"),
        ("a|b [c]", "a b c"),
        ("  spaced   out  ", "spaced out"),
    ],
)
def test_heading_anchor(title, anchor):
    assert heading_anchor(title) == anchor
