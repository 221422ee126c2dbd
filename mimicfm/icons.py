"""Icon blocks and extension lookup tables for the icon grid.

Every block is ``BLOCK_WIDTH`` columns wide and ``BLOCK_HEIGHT`` rows tall:
three icon rows followed by up to two centered name rows.
"""

from __future__ import annotations

from pathlib import PurePath

from .ansi import display_width, pad_ansi_line, truncate_text
from .model import KIND_DIRECTORY
from .ui_theme import UITheme, category_style

LABEL_WIDTH = 9
MARGIN = 2
BLOCK_WIDTH = LABEL_WIDTH + 2 * MARGIN
NAME_LINES = 2
BLOCK_HEIGHT = 3 + NAME_LINES
BADGE_WIDTH = 5

SELECTED_LEFT = "►"
SELECTED_RIGHT = "◄"

FOLDER_ICON = ("╭´‾`──╮", "│     │", "╰─────╯")
FILE_ICON = ("┌━━━━━╮", "│     │", "╰─────╯")

_EXTENSIONS: dict[str, tuple[str, str]] = {
    ".txt": ("TXT", "document"),
    ".md": ("MD", "document"),
    ".rst": ("RST", "document"),
    ".pdf": ("PDF", "document"),
    ".doc": ("DOC", "document"),
    ".docx": ("DOC", "document"),
    ".xls": ("XLS", "document"),
    ".xlsx": ("XLS", "document"),
    ".ppt": ("PPT", "document"),
    ".pptx": ("PPT", "document"),
    ".py": ("PY", "code"),
    ".js": ("JS", "code"),
    ".ts": ("TS", "code"),
    ".html": ("HTML", "code"),
    ".htm": ("HTML", "code"),
    ".css": ("CSS", "code"),
    ".java": ("JAVA", "code"),
    ".c": ("C", "code"),
    ".h": ("H", "code"),
    ".cpp": ("C++", "code"),
    ".go": ("GO", "code"),
    ".rs": ("RUST", "code"),
    ".php": ("PHP", "code"),
    ".rb": ("RUBY", "code"),
    ".sh": ("SH", "code"),
    ".json": ("JSON", "data"),
    ".xml": ("XML", "data"),
    ".yml": ("YAML", "data"),
    ".yaml": ("YAML", "data"),
    ".toml": ("TOML", "data"),
    ".csv": ("CSV", "data"),
    ".png": ("IMG", "image"),
    ".jpg": ("IMG", "image"),
    ".jpeg": ("IMG", "image"),
    ".gif": ("IMG", "image"),
    ".bmp": ("IMG", "image"),
    ".svg": ("SVG", "image"),
    ".zip": ("ZIP", "archive"),
    ".tar": ("TAR", "archive"),
    ".gz": ("GZ", "archive"),
    ".rar": ("RAR", "archive"),
    ".7z": ("7Z", "archive"),
    ".mp3": ("MP3", "audio"),
    ".wav": ("WAV", "audio"),
    ".flac": ("FLAC", "audio"),
    ".mp4": ("MP4", "video"),
    ".avi": ("AVI", "video"),
    ".mkv": ("MKV", "video"),
    ".exe": ("EXE", "executable"),
    ".bin": ("BIN", "executable"),
    ".deb": ("DEB", "archive"),
    ".rpm": ("RPM", "archive"),
}


def extension_label(name: str) -> str:
    """Return the short badge drawn inside a file icon, or ``""`` when unknown."""
    return _EXTENSIONS.get(PurePath(name).suffix.lower(), ("", ""))[0]


def file_category(name: str) -> str:
    return _EXTENSIONS.get(PurePath(name).suffix.lower(), ("", "other"))[1]


def wrap_name(name: str, width: int = LABEL_WIDTH, max_lines: int = NAME_LINES) -> list[str]:
    """Word-wrap ``name`` into at most ``max_lines`` centered lines of ``width`` columns.

    Words longer than ``width`` and overflow beyond the last line are cut
    with an ellipsis.
    """
    lines: list[str] = []
    current = ""
    words = name.split(" ")
    for idx, word in enumerate(words):
        if len(lines) == max_lines - 1:
            rest = " ".join(([current] if current else []) + words[idx:])
            current = truncate_text(rest, width)
            break
        candidate = f"{current} {word}" if current else word
        if display_width(candidate) <= width:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = word if display_width(word) <= width else truncate_text(word, width)
    if current or not lines:
        lines.append(current)
    lines = lines[:max_lines]
    return [pad_ansi_line(line, width, "center") for line in lines]


def create_file_item(name: str, kind: str, selected: bool, theme: UITheme) -> list[str]:
    """Build the styled multi-line block for one grid entry."""
    is_dir = kind == KIND_DIRECTORY
    if is_dir:
        icon = list(FOLDER_ICON)
        icon_style = theme.folder_selected if selected else theme.folder_icon
        name_style = theme.folder_selected if selected else theme.folder_name
    else:
        icon = list(FILE_ICON)
        badge = extension_label(name)
        if badge:
            icon[1] = f"│{pad_ansi_line(badge, BADGE_WIDTH, 'center')}│"
        icon_style = theme.file_selected if selected else category_style(theme, file_category(name))
        name_style = theme.file_selected if selected else theme.file_name

    inner: list[str] = []
    for line in icon:
        inner.append(theme.paint(icon_style, pad_ansi_line(line, LABEL_WIDTH, "center")))
    name_lines = wrap_name(name)
    while len(name_lines) < NAME_LINES:
        name_lines.append(" " * LABEL_WIDTH)
    for line in name_lines:
        inner.append(theme.paint(name_style, line))

    if selected:
        left = theme.paint(theme.selection_marker, SELECTED_LEFT) + " "
        right = " " + theme.paint(theme.selection_marker, SELECTED_RIGHT)
    else:
        left = right = " " * MARGIN
    return [f"{left}{line}{right}" for line in inner]


__all__ = [
    "BLOCK_HEIGHT",
    "BLOCK_WIDTH",
    "create_file_item",
    "extension_label",
    "file_category",
    "wrap_name",
]
