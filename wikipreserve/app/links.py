"""Detection of parenthetical links that were auto-converted from wikilinks."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .path_utils import decode_link_path, split_link_target, strip_md_suffix

# [label](path) where the path may end in one literal ')' of its own
MARKDOWN_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+\)?)\)")


@dataclass(frozen=True)
class EditorPosition:
    line: int
    offset: int


@dataclass(frozen=True)
class ChangeContext:
    """Snapshot of the edited line taken right after a change notification."""

    line_text: str
    cursor_offset: int
    link_style_preference: bool
    line: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.cursor_offset <= len(self.line_text):
            raise ValueError(
                f"cursor offset {self.cursor_offset} outside line of length {len(self.line_text)}"
            )


@dataclass(frozen=True)
class LinkMatch:
    match_start: int
    match_end: int
    display_text: str
    raw_path: str


@dataclass(frozen=True)
class DecodedPath:
    base_name: str
    fragment: Optional[str] = None

    @property
    def has_fragment(self) -> bool:
        return self.fragment is not None


@dataclass(frozen=True)
class RewriteInstruction:
    from_pos: EditorPosition
    to_pos: EditorPosition
    replacement_text: str
    new_cursor_offset: int

    @property
    def new_cursor(self) -> EditorPosition:
        return EditorPosition(self.from_pos.line, self.new_cursor_offset)


def find_link_before_cursor(line_text: str, cursor_offset: int) -> Optional[LinkMatch]:
    """Return the leftmost markdown link in the text before the cursor.

    Only the first match is considered. A link further right on the line is
    never looked at, so a stale link earlier on the line shadows it.
    """
    prefix = line_text[:cursor_offset]
    match = MARKDOWN_LINK_PATTERN.search(prefix)
    if match is None:
        return None
    return LinkMatch(
        match_start=match.start(),
        match_end=match.end(),
        display_text=match.group(1),
        raw_path=match.group(2),
    )


def decode_path(raw_path: str) -> DecodedPath:
    """Reduce a link path to its page name and optional heading/block fragment.

    >>> decode_path("folder/Sub%20Note.md")
    DecodedPath(base_name='Sub Note', fragment=None)
    >>> decode_path("Note#title1")
    DecodedPath(base_name='Note', fragment='title1')
    """
    decoded = decode_link_path(raw_path)
    name = decoded.rsplit("/", 1)[-1]
    page, fragment = split_link_target(name)
    return DecodedPath(base_name=strip_md_suffix(page), fragment=fragment)


def is_auto_converted(display_text: str, path: DecodedPath) -> bool:
    """Decide whether a link looks like the editor's rendering of a wikilink.

    A label equal to the page name is the plain case. Any link with a fragment
    counts as well: the label is either the heading itself or the heading
    before the editor slugified it, and a hand-written link with a fragment
    and an unrelated label is rare enough to accept the misfire.
    """
    if display_text == path.base_name:
        return True
    return path.has_fragment


def wikilink_text(display_text: str, path: DecodedPath) -> str:
    content = path.base_name
    if path.has_fragment:
        # The label, not the fragment, carries the heading as the user typed it
        content = f"{content}#{display_text}"
    return f"[[{content}]]"


def plan_rewrite(context: ChangeContext) -> Optional[RewriteInstruction]:
    """Return the rewrite that restores the wikilink ending at the cursor, if any."""
    if not context.link_style_preference:
        return None
    link = find_link_before_cursor(context.line_text, context.cursor_offset)
    if link is None or link.match_end != context.cursor_offset:
        return None
    path = decode_path(link.raw_path)
    if not is_auto_converted(link.display_text, path):
        return None
    replacement = wikilink_text(link.display_text, path)
    return RewriteInstruction(
        from_pos=EditorPosition(context.line, link.match_start),
        to_pos=EditorPosition(context.line, context.cursor_offset),
        replacement_text=replacement,
        new_cursor_offset=link.match_start + len(replacement),
    )
