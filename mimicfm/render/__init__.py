"""Full-frame renderer for the windowed icon view.

Every frame is recomputed from ``(AppState, terminal size)``; nothing is
diffed against the previous frame. Lines are exactly terminal-wide in visible
columns, and the context menu is painted last with absolute cursor moves.
"""

from __future__ import annotations

from pathlib import Path

from ..ansi import ELLIPSIS, display_width, pad_ansi_line, truncate_text
from ..layout import calculate_layout, render_file_grid
from ..state import STATUS_ERROR, AppState
from ..ui_theme import UITheme
from .menu import layout_context_menu, menu_items_for, render_context_menu_overlay

WINDOW_TITLE = "File Manager"
PATH_PREFIX = "Path: "
EMPTY_MESSAGE_LINES = ("[ ]", "", "No files found", "", "This directory is empty")

CLEAR_AND_HOME = "\033[H\033[J"

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_file_size(size: int) -> str:
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    if unit == 0:
        return f"{int(value)} {_SIZE_UNITS[0]}"
    return f"{value:.1f} {_SIZE_UNITS[unit]}"


def _fit(line: str, width: int, theme: UITheme) -> str:
    """Clip or pad ``line`` to exactly ``width`` visible columns."""
    if display_width(line) > width:
        return pad_ansi_line(line, width) + theme.reset
    return pad_ansi_line(line, width)


def _bordered(inner: str, width: int, theme: UITheme) -> str:
    if width < 2:
        return " " * max(0, width)
    side = theme.paint(theme.window_border, "│")
    return side + _fit(inner, max(0, width - 2), theme) + side


def render_title_bar(width: int, theme: UITheme, title: str = WINDOW_TITLE) -> str:
    """Top border with ``title`` centered between the corners."""
    label = f" {truncate_text(title, max(0, width - 4))} "
    fill = max(0, width - 2 - len(label))
    left = fill // 2
    border = theme.window_border
    line = (
        theme.paint(border, f"╭{'─' * left}")
        + theme.paint(theme.window_title, label)
        + theme.paint(border, f"{'─' * (fill - left)}╮")
    )
    return _fit(line, width, theme)


def colorize_path(text: str, theme: UITheme) -> str:
    """Color each path segment, highlighting the last one, joined by a colored separator."""
    parts = text.split("/")
    separator = theme.paint(theme.path_separator, "/")
    colored = [
        theme.paint(theme.path_current if idx == len(parts) - 1 else theme.path_folder, part)
        for idx, part in enumerate(parts)
    ]
    return separator.join(colored)


def truncate_path(text: str, max_cols: int) -> str:
    """Shorten ``text`` from the left so the deepest segments stay visible."""
    if max_cols <= 0:
        return ""
    if len(text) <= max_cols:
        return text
    if max_cols <= len(ELLIPSIS):
        return text[-max_cols:]
    return ELLIPSIS + text[len(text) - max_cols + len(ELLIPSIS):]


def render_path_bar(path: Path, width: int, theme: UITheme) -> str:
    available = max(0, width - 4 - len(PATH_PREFIX))
    shown = colorize_path(truncate_path(str(path), available), theme)
    return _bordered(f" {PATH_PREFIX}{pad_ansi_line(shown, available)} ", width, theme)


def render_separator(width: int, theme: UITheme) -> str:
    return _fit(theme.paint(theme.window_border, f"│{'─' * max(0, width - 2)}│"), width, theme)


def render_blank_row(width: int, theme: UITheme) -> str:
    return _bordered("", width, theme)


def render_empty_message(width: int, theme: UITheme) -> list[str]:
    available = max(0, width - 4)
    out: list[str] = []
    for text in EMPTY_MESSAGE_LINES:
        centered = pad_ansi_line(text, available, "center")
        if text:
            centered = theme.paint(theme.status_info, centered)
        out.append(_bordered(f" {centered} ", width, theme))
    return out


def status_text(state: AppState) -> str:
    """Return the status-bar text: a live status message, else the selection summary."""
    if state.status.message:
        return state.status.message
    count = len(state.viewport.entries)
    selection = state.selection
    if selection.selected_index < 0 or selection.selected_entry is None:
        return f"{count} items"
    text = f"{selection.selected_index + 1}/{count} items"
    if not selection.selected_entry.is_dir and selection.selected_entry.size is not None:
        text += f" - {format_file_size(selection.selected_entry.size)}"
    return text


def render_status_bar(state: AppState, width: int, theme: UITheme) -> str:
    available = max(0, width - 4)
    style = theme.status_error if state.status.message and state.status.level == STATUS_ERROR else theme.status_info
    centered = pad_ansi_line(truncate_text(status_text(state), available), available, "center")
    return _bordered(f" {theme.paint(style, centered)} ", width, theme)


def render_bottom_border(width: int, theme: UITheme) -> str:
    return _fit(theme.paint(theme.window_border, f"╰{'─' * max(0, width - 2)}╯"), width, theme)


def render_frame(state: AppState, theme: UITheme) -> list[str]:
    """Compose the background frame as exactly ``height`` lines of ``width`` columns.

    Order: title bar, path bar, separator, spacer rows up to the content
    start row, then the grid (or the empty placeholder), filler rows, status
    bar, bottom border. Content rows are trimmed first when the terminal is
    too short to hold everything.
    """
    viewport = state.viewport
    width = viewport.terminal_size.width
    height = viewport.terminal_size.height
    layout = calculate_layout(viewport.terminal_size)

    header = [
        render_title_bar(width, theme),
        render_path_bar(viewport.current_path, width, theme),
        render_separator(width, theme),
    ]
    while len(header) < layout.content_start_row:
        header.append(render_blank_row(width, theme))

    if not viewport.entries:
        body = render_empty_message(width, theme)
    else:
        grid = render_file_grid(
            viewport.entries,
            state.selection.selected_index,
            layout,
            width,
            theme,
            scroll_offset=viewport.scroll_offset,
        )
        body = [_bordered(row, width, theme) for row in grid]

    footer = [render_status_bar(state, width, theme), render_bottom_border(width, theme)]
    filler = height - len(header) - len(body) - len(footer)
    if filler < 0:
        body = body[: max(0, len(body) + filler)]
        filler = 0
    lines = header + body + [render_blank_row(width, theme)] * filler + footer
    return lines[: max(0, height)]


def render_overlay(state: AppState, theme: UITheme) -> str:
    menu = state.context_menu
    if not menu.visible:
        return ""
    size = state.viewport.terminal_size
    box = layout_context_menu(menu_items_for(menu.target_entry), menu.position, size)
    return render_context_menu_overlay(box, size, theme)


def render_screen(state: AppState, theme: UITheme) -> str:
    """Return the complete terminal write for one frame, overlay included."""
    return CLEAR_AND_HOME + "\r\n".join(render_frame(state, theme)) + theme.reset + render_overlay(state, theme)


__all__ = [
    "EMPTY_MESSAGE_LINES",
    "WINDOW_TITLE",
    "colorize_path",
    "format_file_size",
    "render_frame",
    "render_overlay",
    "render_path_bar",
    "render_screen",
    "render_status_bar",
    "status_text",
    "truncate_path",
]
