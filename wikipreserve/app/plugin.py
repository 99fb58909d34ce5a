from __future__ import annotations

import logging
from typing import Callable, Optional

from wikipreserve.app import config
from .guard import ConversionGuard, QtScheduler, Scheduler, SuppressionLatch


logger = logging.getLogger(__name__)


class WikilinkPreserverPlugin:
    """Attaches a ConversionGuard to an editor's change notifications.

    The editor must provide an ``editorChange`` signal emitting
    ``(editor, info)`` along with the EditorHost primitives.
    """

    def __init__(
        self,
        editor,
        preference: Optional[Callable[[], bool]] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.editor = editor
        self._preference = preference or config.load_use_markdown_links
        self._scheduler = scheduler or QtScheduler()
        self.guard: Optional[ConversionGuard] = None

    @property
    def loaded(self) -> bool:
        return self.guard is not None

    def load(self) -> None:
        if self.loaded:
            return
        logger.info("Loading Wikilink Preserver")
        self.guard = ConversionGuard(self._preference, self._scheduler, SuppressionLatch())
        self.editor.editorChange.connect(self.guard.handle_editor_change)

    def unload(self) -> None:
        if self.guard is None:
            return
        logger.info("Unloading Wikilink Preserver")
        self.editor.editorChange.disconnect(self.guard.handle_editor_change)
        self.guard = None
