"""Width, clipping, and padding helpers for strings carrying SGR escapes.

Everything here measures what the terminal will show, not the string length.
The renderer relies on these to keep every frame line exactly terminal-wide.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "..."


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return visible column count of ``text``; escape sequences count as zero."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut a styled line down to ``max_cols`` visible columns.

    Escapes are kept as-is and take no columns.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def pad_ansi_line(text: str, width: int, align: str = "left") -> str:
    """Pad a styled line with spaces to exactly ``width`` columns.

    Lines that are already too wide are clipped. ``align`` is one of
    ``left``, ``center`` or ``right``.
    """
    if width <= 0:
        return ""
    visible = display_width(text)
    if visible > width:
        return clip_ansi_line(text, width)
    padding = width - visible
    if align == "center":
        left = padding // 2
        return " " * left + text + " " * (padding - left)
    if align == "right":
        return " " * padding + text
    return text + " " * padding


def truncate_text(text: str, max_cols: int) -> str:
    """Shorten plain ``text`` to ``max_cols`` columns, ending with an ellipsis when cut."""
    if max_cols <= 0:
        return ""
    if display_width(text) <= max_cols:
        return text
    if max_cols <= len(ELLIPSIS):
        return clip_ansi_line(text, max_cols)
    return clip_ansi_line(text, max_cols - len(ELLIPSIS)) + ELLIPSIS
