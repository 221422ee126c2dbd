"""Application state tree and the store that owns it.

State values are frozen dataclasses replaced field-by-field on every action;
the previous snapshot is never mutated, so a reference obtained from
``get_state`` stays valid and consistent forever.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from .layout import LayoutInfo, get_scroll_offset_for_item
from .model import FileEntry, Position, TerminalSize
from .subscriptions import SubscriberList

CLIPBOARD_COPY = "copy"
CLIPBOARD_CUT = "cut"
CLIPBOARD_OPERATIONS = (CLIPBOARD_COPY, CLIPBOARD_CUT)

STATUS_INFO = "info"
STATUS_ERROR = "error"

MOVE_DIRECTIONS = ("up", "down", "left", "right")


@dataclass(frozen=True)
class ViewportState:
    current_path: Path
    entries: tuple[FileEntry, ...]
    terminal_size: TerminalSize
    layout: LayoutInfo
    scroll_offset: int = 0

    @property
    def items_per_row(self) -> int:
        return self.layout.items_per_row

    @property
    def total_rows(self) -> int:
        return self.layout.total_rows


@dataclass(frozen=True)
class SelectionState:
    selected_index: int = -1
    selected_entry: FileEntry | None = None

    def __post_init__(self) -> None:
        if (self.selected_index == -1) != (self.selected_entry is None):
            raise ValueError("selected_index and selected_entry must both be set or both be empty")


@dataclass(frozen=True)
class ContextMenuState:
    visible: bool = False
    position: Position = field(default_factory=lambda: Position(0, 0))
    target_entry: FileEntry | None = None


@dataclass(frozen=True)
class ClipboardState:
    entry: FileEntry | None = None
    operation: str | None = None

    def __post_init__(self) -> None:
        if (self.entry is None) != (self.operation is None):
            raise ValueError("clipboard entry and operation must both be set or both be empty")
        if self.operation is not None and self.operation not in CLIPBOARD_OPERATIONS:
            raise ValueError(f"unknown clipboard operation: {self.operation!r}")


@dataclass(frozen=True)
class StatusState:
    message: str = ""
    level: str = STATUS_INFO
    expires_at: float = 0.0


@dataclass(frozen=True)
class AppState:
    viewport: ViewportState
    selection: SelectionState = field(default_factory=SelectionState)
    context_menu: ContextMenuState = field(default_factory=ContextMenuState)
    clipboard: ClipboardState = field(default_factory=ClipboardState)
    status: StatusState = field(default_factory=StatusState)


def initial_state(current_path: Path, terminal_size: TerminalSize, layout: LayoutInfo) -> AppState:
    """Return the startup state: no entries, nothing selected, menu hidden, clipboard empty."""
    return AppState(
        viewport=ViewportState(
            current_path=current_path,
            entries=(),
            terminal_size=terminal_size,
            layout=layout,
        )
    )


def _derive_selection(entries: Sequence[FileEntry], index: int) -> SelectionState:
    if 0 <= index < len(entries):
        return SelectionState(selected_index=index, selected_entry=entries[index])
    return SelectionState()


def _follow_selection(viewport: ViewportState, selection: SelectionState) -> ViewportState:
    offset = get_scroll_offset_for_item(selection.selected_index, viewport.layout, viewport.scroll_offset)
    max_offset = max(0, -(-len(viewport.entries) // viewport.items_per_row) - viewport.total_rows)
    offset = max(0, min(offset, max_offset))
    if offset == viewport.scroll_offset:
        return viewport
    return replace(viewport, scroll_offset=offset)


class StateStore:
    """Single owner of ``AppState``.

    Every action builds a new snapshot from the current one, installs it, and
    then calls each listener once, in subscription order, with no arguments.
    """

    def __init__(self, state: AppState) -> None:
        self._state = state
        self._listeners: SubscriberList[Callable[[], None]] = SubscriberList()

    def get_state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        return self._listeners.add(listener)

    def _commit(self, state: AppState) -> None:
        self._state = state
        for listener in self._listeners.snapshot():
            listener()

    def _commit_viewport(self, viewport: ViewportState, selection: SelectionState, **changes) -> None:
        viewport = _follow_selection(viewport, selection)
        self._commit(replace(self._state, viewport=viewport, selection=selection, **changes))

    def set_current_path(self, path: Path) -> None:
        state = self._state
        self._commit(replace(state, viewport=replace(state.viewport, current_path=path)))

    def set_entries(self, entries: Sequence[FileEntry]) -> None:
        """Replace the listing; the selection is re-derived from the new entries."""
        state = self._state
        entries = tuple(entries)
        viewport = replace(state.viewport, entries=entries, scroll_offset=0)
        self._commit_viewport(viewport, _derive_selection(entries, state.selection.selected_index))

    def show_directory(
        self,
        entries: Sequence[FileEntry],
        layout: LayoutInfo,
        status: StatusState | None = None,
    ) -> None:
        """Install a completed directory load (entries, layout, optional status) as one action."""
        state = self._state
        entries = tuple(entries)
        viewport = replace(state.viewport, entries=entries, layout=layout, scroll_offset=0)
        changes = {} if status is None else {"status": status}
        self._commit_viewport(viewport, _derive_selection(entries, state.selection.selected_index), **changes)

    def set_terminal_size(self, size: TerminalSize, layout: LayoutInfo | None = None) -> None:
        state = self._state
        viewport = replace(state.viewport, terminal_size=size)
        if layout is not None:
            viewport = replace(viewport, layout=layout)
        self._commit_viewport(viewport, state.selection)

    def set_layout(self, layout: LayoutInfo) -> None:
        state = self._state
        self._commit_viewport(replace(state.viewport, layout=layout), state.selection)

    def set_selection(self, index: int) -> None:
        """Select ``entries[index]``; ``-1`` clears the selection."""
        state = self._state
        if index != -1 and not 0 <= index < len(state.viewport.entries):
            raise IndexError(f"selection index {index} out of range")
        self._commit_viewport(state.viewport, _derive_selection(state.viewport.entries, index))

    def clear_selection(self) -> None:
        self.set_selection(-1)

    def move_selection(self, direction: str) -> None:
        """Move the selection one cell in ``direction``, clamped to the listing.

        A no-op when the listing is empty.
        """
        if direction not in MOVE_DIRECTIONS:
            raise ValueError(f"unknown direction: {direction!r}")
        state = self._state
        count = len(state.viewport.entries)
        if count == 0:
            return
        index = state.selection.selected_index
        per_row = state.viewport.items_per_row
        if direction == "left":
            index = max(0, index - 1)
        elif direction == "right":
            index = min(count - 1, index + 1)
        elif direction == "up":
            index = max(0, index - per_row)
        else:
            index = min(count - 1, index + per_row)
        self._commit_viewport(state.viewport, _derive_selection(state.viewport.entries, index))

    def show_context_menu(self, position: Position, target_entry: FileEntry | None) -> None:
        menu = ContextMenuState(visible=True, position=position, target_entry=target_entry)
        self._commit(replace(self._state, context_menu=menu))

    def hide_context_menu(self) -> None:
        state = self._state
        self._commit(replace(state, context_menu=replace(state.context_menu, visible=False)))

    def set_clipboard(self, entry: FileEntry | None, operation: str | None) -> None:
        self._commit(replace(self._state, clipboard=ClipboardState(entry=entry, operation=operation)))

    def clear_clipboard(self) -> None:
        self.set_clipboard(None, None)

    def show_status(self, message: str, level: str = STATUS_INFO, expires_at: float = 0.0) -> None:
        self._commit(replace(self._state, status=StatusState(message=message, level=level, expires_at=expires_at)))

    def clear_status(self) -> None:
        self._commit(replace(self._state, status=StatusState()))


__all__ = [
    "CLIPBOARD_COPY",
    "CLIPBOARD_CUT",
    "STATUS_ERROR",
    "STATUS_INFO",
    "AppState",
    "ClipboardState",
    "ContextMenuState",
    "SelectionState",
    "StateStore",
    "StatusState",
    "ViewportState",
    "initial_state",
]
