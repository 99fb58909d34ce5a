from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QApplication

from wikipreserve.app import config
from wikipreserve.app.plugin import WikilinkPreserverPlugin
from wikipreserve.app.ui.markdown_editor import MarkdownEditor


# ============================================================================
# DEBUG CONFIGURATION - Environment Variables
# ============================================================================
# WIKIPRESERVE_DEBUG_GUARD - Log every link the guard reverts
#
# Example:
#   WIKIPRESERVE_DEBUG_GUARD=1 wikipreserve notes/today.md
# ============================================================================

def _debug_enabled(var_name: str) -> bool:
    """Check if a debug flag is enabled."""
    return os.getenv(var_name, "0") not in ("0", "false", "False", "", None)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Markdown editor that keeps typed [[wikilinks]] as wikilinks.")
    parser.add_argument("path", nargs="?", help="Markdown file to open.")
    style = parser.add_mutually_exclusive_group()
    style.add_argument(
        "--markdown-links",
        dest="markdown_links",
        action="store_const",
        const=True,
        help="Write new links as [label](target) for this session.",
    )
    style.add_argument(
        "--wikilinks",
        dest="markdown_links",
        action="store_const",
        const=False,
        help="Write new links as [[target]] for this session.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug or _debug_enabled("WIKIPRESERVE_DEBUG_GUARD") else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _load_page(editor: MarkdownEditor, path: Optional[str]) -> None:
    if not path:
        return
    file_path = Path(path)
    editor.set_context(str(file_path))
    if file_path.exists():
        editor.set_markdown(file_path.read_text(encoding="utf-8"))


def main() -> None:
    args = _parse_args(sys.argv[1:])
    _configure_logging(args.debug)
    config.init_settings()
    qt_app = QApplication(sys.argv)
    editor = MarkdownEditor()
    editor.setWindowTitle(args.path or "Untitled")
    editor.resize(900, 700)
    editor.set_use_markdown_links(args.markdown_links)
    plugin: Optional[WikilinkPreserverPlugin] = None
    if config.load_preserve_wikilinks():
        plugin = WikilinkPreserverPlugin(editor, preference=editor.use_markdown_links)
    # Load the page before the guard so existing links are left alone
    _load_page(editor, args.path)
    if plugin is not None:
        plugin.load()
        qt_app.aboutToQuit.connect(plugin.unload)
    editor.show()
    sys.exit(qt_app.exec())


if __name__ == "__main__":  # pragma: no cover - manual entry point
    main()
