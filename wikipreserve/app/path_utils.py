"""Utilities for converting between page names and markdown link targets."""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote, unquote

PAGE_SUFFIX = ".md"


def strip_md_suffix(name: str) -> str:
    """Remove a trailing .md (any case) from a page file name."""
    if name.lower().endswith(PAGE_SUFFIX):
        return name[: -len(PAGE_SUFFIX)]
    return name


def split_link_target(target: str) -> tuple[str, Optional[str]]:
    """Split ``Page#anchor`` into its page and anchor parts.

    The anchor is None when no '#' is present and may be empty when the
    target ends in '#'.
    """
    if "#" not in target:
        return target, None
    page, anchor = target.split("#", 1)
    return page, anchor


def decode_link_path(raw: str) -> str:
    """Percent-decode a link target. Malformed escapes are kept verbatim."""
    return unquote(raw)


def encode_link_target(page: str, anchor: Optional[str] = None) -> str:
    """Build the target of a parenthetical link for a page.

    Without an anchor the page file name is used (``Sub%20Note.md``); with an
    anchor the bare page name is followed by the encoded anchor
    (``Note#My%20Heading``). Folder separators stay readable.
    """
    cleaned = (page or "").strip().strip("/")
    if anchor is None:
        return quote(f"{cleaned}{PAGE_SUFFIX}", safe="/")
    return f"{quote(cleaned, safe='/')}#{quote(anchor, safe='')}"
