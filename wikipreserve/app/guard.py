"""Reverts editor auto-conversion of typed wikilinks into markdown links."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

from PySide6.QtCore import QTimer

from .links import ChangeContext, EditorPosition, RewriteInstruction, plan_rewrite


logger = logging.getLogger(__name__)


class EditorHost(Protocol):
    def get_cursor(self) -> EditorPosition: ...

    def get_line(self, line: int) -> str: ...

    def replace_range(self, text: str, from_pos: EditorPosition, to_pos: EditorPosition) -> None: ...

    def set_cursor(self, pos: EditorPosition) -> None: ...


class Scheduler(Protocol):
    def defer(self, callback: Callable[[], None]) -> None: ...


class QtScheduler:
    """Run callbacks once control returns to the Qt event loop."""

    def defer(self, callback: Callable[[], None]) -> None:
        QTimer.singleShot(0, callback)


class SuppressionLatch:
    """Flag that mutes the guard while its own edit is being dispatched."""

    def __init__(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def begin_suppression(self) -> None:
        self._active = True

    def end_suppression(self) -> None:
        self._active = False


class ConversionGuard:
    """Watches edits and restores [[wikilinks]] the editor turned into [label](target).

    The guard only acts when the editor's native link style is markdown, since
    that is the only mode in which the conversion happens. Its own rewrite
    re-enters the change stream synchronously; the latch stays set until the
    scheduler runs the reset on a later turn.
    """

    def __init__(
        self,
        preference: Callable[[], bool],
        scheduler: Scheduler,
        latch: Optional[SuppressionLatch] = None,
    ) -> None:
        self._preference = preference
        self._scheduler = scheduler
        self.latch = latch if latch is not None else SuppressionLatch()

    def handle_editor_change(self, editor: EditorHost, info: Any = None) -> Optional[RewriteInstruction]:
        """Change handler registered with the host editor."""
        if self.latch.active:
            return None
        try:
            use_markdown_links = bool(self._preference())
        except Exception:
            logger.error(
                "Cannot read the link style preference; leaving the edit untouched", exc_info=True
            )
            return None
        if not use_markdown_links:
            return None
        cursor = editor.get_cursor()
        context = ChangeContext(
            line_text=editor.get_line(cursor.line),
            cursor_offset=cursor.offset,
            link_style_preference=use_markdown_links,
            line=cursor.line,
        )
        return self.on_change(context, editor)

    def on_change(self, context: ChangeContext, editor: EditorHost) -> Optional[RewriteInstruction]:
        if self.latch.active:
            return None
        instruction = plan_rewrite(context)
        if instruction is None:
            return None
        self._apply(instruction, editor)
        logger.debug(
            "Reverted %r to %r on line %d",
            context.line_text[instruction.from_pos.offset : instruction.to_pos.offset],
            instruction.replacement_text,
            context.line,
        )
        return instruction

    def _apply(self, instruction: RewriteInstruction, editor: EditorHost) -> None:
        self.latch.begin_suppression()
        try:
            editor.replace_range(instruction.replacement_text, instruction.from_pos, instruction.to_pos)
            editor.set_cursor(instruction.new_cursor)
        finally:
            self._scheduler.defer(self.latch.end_suppression)
