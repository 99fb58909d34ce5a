from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QTextEdit

from .heading_utils import heading_anchor
from ..links import EditorPosition
from ..path_utils import encode_link_target
from wikipreserve.app import config


logger = logging.getLogger(__name__)


def _utf16_len(text: str) -> int:
    """Length of text in UTF-16 code units, the unit Qt positions are counted in."""
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def _index_from_utf16(text: str, units: int) -> int:
    """Map a UTF-16 offset inside text back to a Python string index."""
    consumed = 0
    for index, ch in enumerate(text):
        if consumed >= units:
            return index
        consumed += 2 if ord(ch) > 0xFFFF else 1
    return len(text)


@dataclass(frozen=True)
class EditorFileInfo:
    """What the editor knows about the page behind a change notification."""

    path: Optional[str] = None


class MarkdownEditor(QTextEdit):
    """Plain-text markdown editor exposing line/cursor primitives for editor plugins."""

    editorChange = Signal(object, object)  # (editor, EditorFileInfo) after every text change

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._current_path: Optional[str] = None
        self._use_markdown_links_override: Optional[bool] = None
        self.setPlaceholderText("Open a Markdown file to begin editing…")
        self.setAcceptRichText(False)
        self.setTabStopDistance(4 * self.fontMetrics().horizontalAdvance(" "))
        self.setLineWrapMode(QTextEdit.LineWrapMode.WidgetWidth)
        self.textChanged.connect(self._emit_editor_change)

    def set_context(self, path: Optional[str]) -> None:
        self._current_path = path

    def file_info(self) -> EditorFileInfo:
        return EditorFileInfo(path=self._current_path)

    def set_markdown(self, text: str) -> None:
        self.setPlainText(text)

    def to_markdown(self) -> str:
        return self.toPlainText()

    def _emit_editor_change(self) -> None:
        self.editorChange.emit(self, self.file_info())

    # --- Link style ---

    def set_use_markdown_links(self, enabled: Optional[bool]) -> None:
        """Override the configured link style for this editor (None restores the config)."""
        self._use_markdown_links_override = enabled

    def use_markdown_links(self) -> bool:
        """Return the link style new links are written in. May raise ConfigUnavailable."""
        if self._use_markdown_links_override is not None:
            return self._use_markdown_links_override
        return config.load_use_markdown_links()

    def insert_link(self, page: str, heading: Optional[str] = None) -> None:
        """Insert a link to page (optionally to one of its headings) at the cursor.

        With markdown links the link is written as [label](target), the form a
        [[wikilink]] picked from completion ends up in; otherwise as a wikilink.
        """
        page = (page or "").strip()
        if not page:
            return
        try:
            markdown_style = self.use_markdown_links()
        except config.ConfigUnavailable as exc:
            logger.warning("Link style unavailable, inserting a wikilink: %s", exc)
            markdown_style = False
        if markdown_style:
            if heading:
                label = heading
                target = encode_link_target(page, heading_anchor(heading))
            else:
                label = page.rsplit("/", 1)[-1]
                target = encode_link_target(page)
            link_text = f"[{label}]({target})"
        else:
            link_text = f"[[{page}#{heading}]]" if heading else f"[[{page}]]"
        cursor = self.textCursor()
        cursor.insertText(link_text)
        self.setTextCursor(cursor)

    # --- Editor host primitives (offsets are Python string indices) ---

    def _block_for_line(self, line: int):
        block = self.document().findBlockByNumber(line)
        if line < 0 or not block.isValid():
            raise IndexError(f"line {line} out of range")
        return block

    def _document_position(self, pos: EditorPosition) -> int:
        block = self._block_for_line(pos.line)
        text = block.text()
        if not 0 <= pos.offset <= len(text):
            raise IndexError(f"offset {pos.offset} out of range for line {pos.line}")
        return block.position() + _utf16_len(text[: pos.offset])

    def get_cursor(self) -> EditorPosition:
        cursor = self.textCursor()
        block = cursor.block()
        offset = _index_from_utf16(block.text(), cursor.positionInBlock())
        return EditorPosition(line=block.blockNumber(), offset=offset)

    def get_line(self, line: int) -> str:
        return self._block_for_line(line).text()

    def replace_range(self, text: str, from_pos: EditorPosition, to_pos: EditorPosition) -> None:
        """Replace the span [from_pos, to_pos) with text as a single undoable edit."""
        start = self._document_position(from_pos)
        end = self._document_position(to_pos)
        cursor = QTextCursor(self.document())
        cursor.beginEditBlock()
        try:
            cursor.setPosition(start)
            cursor.setPosition(end, QTextCursor.KeepAnchor)
            cursor.insertText(text)
        finally:
            cursor.endEditBlock()

    def set_cursor(self, pos: EditorPosition) -> None:
        cursor = self.textCursor()
        cursor.setPosition(self._document_position(pos))
        self.setTextCursor(cursor)
