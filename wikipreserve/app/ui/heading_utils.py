from __future__ import annotations

import re

_ANCHOR_FORBIDDEN = re.compile(r"[#^\[\]|:\\]")
_SPACES = re.compile(r"\s+")


def heading_anchor(text: str) -> str:
    """Return the link anchor a markdown-style link uses for a heading title."""
    cleaned = _ANCHOR_FORBIDDEN.sub(" ", (text or "").strip())
    return _SPACES.sub(" ", cleaned).strip()
