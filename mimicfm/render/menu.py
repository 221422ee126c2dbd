"""Context-menu overlay: item tables, box geometry, and hit-testing."""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import clip_ansi_line, pad_ansi_line
from ..model import FileEntry, Position, TerminalSize
from ..ui_theme import UITheme

MIN_MENU_WIDTH = 20
MENU_CHROME_WIDTH = 6

ACTION_OPEN = "open"
ACTION_OPEN_EDITOR = "open-editor"
ACTION_COPY = "copy"
ACTION_CUT = "cut"
ACTION_PASTE = "paste"
ACTION_DELETE = "delete"
ACTION_REFRESH = "refresh"


@dataclass(frozen=True)
class MenuItem:
    label: str = ""
    action: str = ""
    shortcut: str = ""
    separator: bool = False


SEPARATOR = MenuItem(separator=True)

ENTRY_MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("Open", ACTION_OPEN, "Enter"),
    MenuItem("Open with Editor", ACTION_OPEN_EDITOR, "Ctrl+O"),
    SEPARATOR,
    MenuItem("Copy", ACTION_COPY, "Ctrl+C"),
    MenuItem("Cut", ACTION_CUT, "Ctrl+X"),
    MenuItem("Paste", ACTION_PASTE, "Ctrl+V"),
    SEPARATOR,
    MenuItem("Delete", ACTION_DELETE, "Del"),
)

EMPTY_SPACE_MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("Paste", ACTION_PASTE, "Ctrl+V"),
    SEPARATOR,
    MenuItem("Refresh", ACTION_REFRESH, "F5"),
)


def menu_items_for(target: FileEntry | None) -> tuple[MenuItem, ...]:
    return ENTRY_MENU_ITEMS if target is not None else EMPTY_SPACE_MENU_ITEMS


@dataclass(frozen=True)
class ContextMenuBox:
    x: int
    y: int
    width: int
    height: int
    items: tuple[MenuItem, ...]


def layout_context_menu(items: tuple[MenuItem, ...], position: Position, terminal_size: TerminalSize) -> ContextMenuBox:
    """Size the box for ``items`` and shift it left/up so it stays on screen."""
    max_label = max((len(item.label) for item in items), default=0)
    max_shortcut = max((len(item.shortcut) for item in items), default=0)
    width = max(MIN_MENU_WIDTH, max_label + max_shortcut + MENU_CHROME_WIDTH)
    height = len(items) + 2

    x, y = position.x, position.y
    if x + width > terminal_size.width:
        x = terminal_size.width - width
    if y + height > terminal_size.height:
        y = terminal_size.height - height
    return ContextMenuBox(x=max(0, x), y=max(0, y), width=width, height=height, items=items)


def render_menu_lines(box: ContextMenuBox, theme: UITheme) -> list[str]:
    inner = box.width - 2
    max_label = max((len(item.label) for item in box.items), default=0)
    max_shortcut = max((len(item.shortcut) for item in box.items), default=0)
    border = theme.menu_border

    lines = [theme.paint(border, f"╭{'─' * inner}╮")]
    for item in box.items:
        if item.separator:
            lines.append(theme.paint(border, f"├{'─' * inner}┤"))
            continue
        gap = inner - 2 - max_label - max_shortcut
        body = (
            " "
            + theme.paint(theme.menu_item, item.label.ljust(max_label))
            + " " * gap
            + theme.paint(theme.menu_shortcut, item.shortcut.rjust(max_shortcut))
            + " "
        )
        lines.append(theme.paint(border, "│") + pad_ansi_line(body, inner) + theme.paint(border, "│"))
    lines.append(theme.paint(border, f"╰{'─' * inner}╯"))
    return lines


def render_context_menu_overlay(box: ContextMenuBox, terminal_size: TerminalSize, theme: UITheme) -> str:
    """Return cursor-addressed writes that paint the menu over the current frame."""
    out: list[str] = []
    visible_cols = terminal_size.width - box.x
    for idx, line in enumerate(render_menu_lines(box, theme)):
        row = box.y + idx
        if row >= terminal_size.height or visible_cols <= 0:
            break
        if box.width > visible_cols:
            line = clip_ansi_line(line, visible_cols) + theme.reset
        out.append(f"\x1b[{row + 1};{box.x + 1}H{line}")
    return "".join(out)


def context_menu_action_at(box: ContextMenuBox, x: int, y: int) -> str | None:
    """Return the action of the menu row under ``(x, y)``; borders and separators yield ``None``."""
    if not box.x <= x < box.x + box.width:
        return None
    row = y - box.y - 1
    if not 0 <= row < len(box.items):
        return None
    item = box.items[row]
    if item.separator or not item.action:
        return None
    return item.action


__all__ = [
    "ACTION_COPY",
    "ACTION_CUT",
    "ACTION_DELETE",
    "ACTION_OPEN",
    "ACTION_OPEN_EDITOR",
    "ACTION_PASTE",
    "ACTION_REFRESH",
    "EMPTY_SPACE_MENU_ITEMS",
    "ENTRY_MENU_ITEMS",
    "ContextMenuBox",
    "MenuItem",
    "context_menu_action_at",
    "layout_context_menu",
    "menu_items_for",
    "render_context_menu_overlay",
    "render_menu_lines",
]
