"""Grid geometry for the icon view.

Pure functions only: terminal size and item counts in, geometry out. Pointer
hit-testing goes through ``get_item_index_from_position`` exclusively so the
renderer and the click handlers can never disagree about where an item is.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .ansi import clip_ansi_line, display_width
from .icons import BLOCK_HEIGHT, BLOCK_WIDTH, create_file_item
from .model import FileEntry, TerminalSize
from .ui_theme import UITheme

ITEM_WIDTH = BLOCK_WIDTH
ITEM_HEIGHT = BLOCK_HEIGHT
HEADER_HEIGHT = 3
FOOTER_HEIGHT = 2
BORDER_ROWS = 2
SIDE_WIDTH = 4
LEFT_OFFSET = 2
MIN_ITEMS_PER_ROW = 1
MIN_ROWS = 1


@dataclass(frozen=True)
class LayoutInfo:
    items_per_row: int
    total_rows: int
    item_width: int = ITEM_WIDTH
    item_height: int = ITEM_HEIGHT
    content_start_row: int = HEADER_HEIGHT + 1

    @property
    def items_per_page(self) -> int:
        return self.items_per_row * self.total_rows

    @property
    def content_height(self) -> int:
        return self.total_rows * self.item_height


@dataclass(frozen=True)
class ItemPosition:
    x: int
    y: int
    row: int
    col: int
    index: int


@dataclass(frozen=True)
class VisibleRange:
    start: int
    end: int

    @property
    def count(self) -> int:
        return self.end - self.start


def calculate_layout(terminal_size: TerminalSize) -> LayoutInfo:
    """Derive grid geometry from terminal dimensions.

    Terminals too small for a single cell still get a 1x1 grid.
    """
    available_width = terminal_size.width - SIDE_WIDTH
    available_height = terminal_size.height - HEADER_HEIGHT - FOOTER_HEIGHT - BORDER_ROWS
    items_per_row = max(MIN_ITEMS_PER_ROW, available_width // ITEM_WIDTH)
    total_rows = max(MIN_ROWS, available_height // ITEM_HEIGHT)
    return LayoutInfo(items_per_row=items_per_row, total_rows=total_rows)


def get_item_position(index: int, layout: LayoutInfo, scroll_offset: int = 0) -> ItemPosition:
    """Return the screen cell where the block for ``index`` starts."""
    row = index // layout.items_per_row
    col = index % layout.items_per_row
    return ItemPosition(
        x=col * layout.item_width + LEFT_OFFSET,
        y=layout.content_start_row + (row - scroll_offset) * layout.item_height,
        row=row,
        col=col,
        index=index,
    )


def get_item_index_from_position(
    x: int,
    y: int,
    layout: LayoutInfo,
    total_items: int,
    scroll_offset: int = 0,
) -> int:
    """Map a screen cell to an item index, or ``-1`` when no item is there."""
    if y < layout.content_start_row or x < LEFT_OFFSET:
        return -1
    col = (x - LEFT_OFFSET) // layout.item_width
    row = (y - layout.content_start_row) // layout.item_height
    if col >= layout.items_per_row or row >= layout.total_rows:
        return -1
    index = (row + scroll_offset) * layout.items_per_row + col
    return index if index < total_items else -1


def get_visible_items(total_items: int, layout: LayoutInfo, scroll_offset: int = 0) -> VisibleRange:
    start = min(total_items, max(0, scroll_offset) * layout.items_per_row)
    end = min(total_items, start + layout.items_per_page)
    return VisibleRange(start=start, end=end)


def get_scroll_offset_for_item(item_index: int, layout: LayoutInfo, current_offset: int = 0) -> int:
    """Return the smallest scroll change that brings ``item_index``'s row on screen."""
    if item_index < 0:
        return current_offset
    item_row = item_index // layout.items_per_row
    last_visible_row = current_offset + layout.total_rows - 1
    if item_row < current_offset:
        return item_row
    if item_row > last_visible_row:
        return item_row - layout.total_rows + 1
    return current_offset


def render_file_grid(
    entries: Sequence[FileEntry],
    selected_index: int,
    layout: LayoutInfo,
    terminal_width: int,
    theme: UITheme,
    scroll_offset: int = 0,
) -> list[str]:
    """Render the visible page of the grid as content rows between the side borders.

    Returns ``layout.content_height`` rows, each ``terminal_width - 2`` columns
    wide. Row 0 is screen row ``layout.content_start_row`` and column 0 is
    screen column 1, so blocks land exactly where ``get_item_position`` says.
    """
    row_width = max(0, terminal_width - 2)
    cells = [[" "] * row_width for _ in range(layout.content_height)]
    visible = get_visible_items(len(entries), layout, scroll_offset)

    for index in range(visible.start, visible.end):
        entry = entries[index]
        position = get_item_position(index, layout, scroll_offset)
        block = create_file_item(entry.name, entry.kind, index == selected_index, theme)
        start_col = position.x - 1
        top = position.y - layout.content_start_row
        for line_idx, line in enumerate(block):
            row = top + line_idx
            if not 0 <= row < len(cells):
                continue
            available = row_width - start_col
            if available <= 0:
                continue
            width = display_width(line)
            if width > available:
                line = clip_ansi_line(line, available) + theme.reset
                width = display_width(line)
            target = cells[row]
            target[start_col] = line
            for col in range(start_col + 1, start_col + width):
                target[col] = ""

    return ["".join(row) for row in cells]


__all__ = [
    "FOOTER_HEIGHT",
    "HEADER_HEIGHT",
    "ITEM_HEIGHT",
    "ITEM_WIDTH",
    "ItemPosition",
    "LayoutInfo",
    "VisibleRange",
    "calculate_layout",
    "get_item_index_from_position",
    "get_item_position",
    "get_scroll_offset_for_item",
    "get_visible_items",
    "render_file_grid",
]
