"""Application controller: lifecycle plus the event-topic handler table.

The controller owns the terminal, the decoders, the event bus, and the state
store. Input is decoded and published synchronously; handlers mutate the
store; every store notification triggers exactly one full-frame render.
Blocking filesystem and launcher calls run on ``BackgroundTaskRunner`` and
their completions re-enter here through ``tick``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from .. import events
from ..config import Settings
from ..errors import FileManagerError
from ..events import EventBus, MenuAction, Navigate, Resize
from ..fs import LocalFileSystem, parent_path, unique_destination
from ..input.bindings import InputRouter
from ..input.keyboard import KeyboardDecoder
from ..input.mouse import DoubleClickTracker, PointerDecoder, PointerEvent
from ..launcher import open_with_default_handler, open_with_editor
from ..layout import calculate_layout, get_item_index_from_position
from ..model import FileEntry, Position, TerminalSize
from ..render import render_screen
from ..render.menu import (
    ACTION_COPY,
    ACTION_CUT,
    ACTION_DELETE,
    ACTION_OPEN,
    ACTION_OPEN_EDITOR,
    ACTION_PASTE,
    ACTION_REFRESH,
    context_menu_action_at,
    layout_context_menu,
    menu_items_for,
)
from ..state import (
    CLIPBOARD_COPY,
    CLIPBOARD_CUT,
    STATUS_ERROR,
    STATUS_INFO,
    AppState,
    StateStore,
    StatusState,
    initial_state,
)
from ..ui_theme import UITheme, resolve_theme
from .tasks import BackgroundTaskRunner, TaskOutcome

logger = logging.getLogger(__name__)


class FileManagerController:
    def __init__(
        self,
        start_path: Path,
        terminal,
        *,
        settings: Settings | None = None,
        theme: UITheme | None = None,
        filesystem: LocalFileSystem | None = None,
        tasks: BackgroundTaskRunner | None = None,
        open_file: Callable[[Path], None] = open_with_default_handler,
        open_in_editor: Callable[[Path, str], None] = open_with_editor,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.terminal = terminal
        self.settings = settings if settings is not None else Settings()
        self.theme = theme if theme is not None else resolve_theme(self.settings.theme)
        self.filesystem = filesystem if filesystem is not None else LocalFileSystem()
        self.tasks = tasks if tasks is not None else BackgroundTaskRunner()
        self._open_file = open_file
        self._open_in_editor = open_in_editor
        self._clock = clock

        size = terminal.get_size()
        self.store = StateStore(initial_state(Path(start_path).absolute(), size, calculate_layout(size)))
        self.bus = EventBus()
        self.keyboard = KeyboardDecoder(terminal)
        self.pointer = PointerDecoder(terminal, DoubleClickTracker(self.settings.double_click_ms))
        self.router = InputRouter(self.bus, self.keyboard, self.pointer)

        self.running = False
        self.quit_requested = False
        self._load_generation = 0
        self._unsubscribers: list[Callable[[], None]] = []

    # Lifecycle

    def start(self) -> None:
        """Take over the terminal, wire handlers, and request the first directory load."""
        if self.running:
            return
        self.running = True
        self.quit_requested = False
        self.tasks.restart()
        try:
            self.terminal.enable_tui_mode()
            self.keyboard.start()
            self.pointer.start()
            self.router.register_default_bindings()
            self._subscribe_handlers()
            self._unsubscribers.append(self.store.subscribe(self.render))
            logger.info("Started in %s", self.state.viewport.current_path)
            self.render()
            self.load_directory()
        except BaseException:
            self.stop()
            raise

    def stop(self) -> None:
        """Restore the terminal; safe to call repeatedly and from ``finally`` blocks."""
        if not self.running:
            return
        self.running = False
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.bus.clear()
        self.router.clear_bindings()
        self.pointer.stop()
        self.keyboard.stop()
        self.terminal.clear()
        self.terminal.disable_tui_mode()
        self.tasks.shutdown(wait=False)
        logger.info("Stopped")

    @property
    def state(self) -> AppState:
        return self.store.get_state()

    def _subscribe_handlers(self) -> None:
        table: dict[str, Callable[[object], None]] = {
            events.NAVIGATION: self._on_navigation,
            events.POINTER_CLICK: self._on_click,
            events.POINTER_DOUBLE_CLICK: self._on_double_click,
            events.POINTER_RIGHT_CLICK: self._on_right_click,
            events.FILE_OPENED: lambda _payload: self.open_selection(),
            events.FILE_OPEN_EDITOR: lambda _payload: self.open_selection_in_editor(),
            events.FILE_COPY: lambda _payload: self.copy_selection(CLIPBOARD_COPY),
            events.FILE_CUT: lambda _payload: self.copy_selection(CLIPBOARD_CUT),
            events.FILE_PASTE: lambda _payload: self.paste(),
            events.FILE_DELETE: lambda _payload: self.delete_selection(),
            events.CONTEXT_MENU_ACTION: self._on_menu_action,
            events.REFRESH: lambda _payload: self.load_directory(),
            events.RESIZE: self._on_resize,
            events.QUIT: self._on_quit,
        }
        for topic, handler in table.items():
            self._unsubscribers.append(self.bus.subscribe(topic, handler))

    # Loop hooks

    def render(self) -> None:
        if not self.running:
            return
        self.terminal.write(render_screen(self.state, self.theme))

    def handle_input(self, chunk: bytes, now_ms: float | None = None) -> None:
        self.router.feed(chunk, now_ms)

    def tick(self) -> None:
        """Deliver finished background work, expire the status message, and poll for resize."""
        self.tasks.drain()
        if not self.running:
            return
        status = self.state.status
        if status.message and self._clock() >= status.expires_at:
            self.store.clear_status()
        size = self.terminal.get_size()
        if size != self.state.viewport.terminal_size:
            self.bus.publish(events.RESIZE, Resize(size.width, size.height))

    # Status messages

    def show_status(self, message: str, level: str = STATUS_INFO) -> None:
        self.store.show_status(message, level, self._clock() + self.settings.status_message_seconds)

    def _status_for(self, message: str, level: str) -> StatusState:
        return StatusState(message=message, level=level, expires_at=self._clock() + self.settings.status_message_seconds)

    def _report_failure(self, outcome: TaskOutcome, what: str) -> bool:
        """Log and surface a failed task; return whether it failed."""
        if outcome.ok:
            return False
        error = outcome.error
        if isinstance(error, FileManagerError):
            logger.warning("%s failed: %s", what, error)
        else:
            logger.error("%s failed", what, exc_info=error)
        self.show_status(str(error) or f"{what} failed", STATUS_ERROR)
        return True

    # Directory loading

    def load_directory(self) -> None:
        """Scan the current path in the background; only the newest request may land."""
        self._load_generation += 1
        generation = self._load_generation
        path = self.state.viewport.current_path
        logger.debug("Loading %s (generation %d)", path, generation)
        self.tasks.submit(
            lambda: self.filesystem.list_entries(path),
            lambda outcome: self._finish_load(generation, path, outcome),
        )

    def _finish_load(self, generation: int, path: Path, outcome: TaskOutcome) -> None:
        if generation != self._load_generation:
            logger.info("Discarding stale listing of %s (generation %d)", path, generation)
            return
        if not self.running:
            return
        layout = calculate_layout(self.state.viewport.terminal_size)
        if outcome.ok:
            self.store.show_directory(outcome.result, layout)
            return
        logger.warning("Directory load failed: %s", outcome.error)
        self.store.show_directory((), layout, status=self._status_for(str(outcome.error), STATUS_ERROR))

    def navigate_to(self, path: Path) -> None:
        self.store.set_current_path(path)
        self.load_directory()

    # Handlers

    def _on_navigation(self, payload: Navigate) -> None:
        if payload.direction != "back":
            self.store.move_selection(payload.direction)
            return
        if self.state.context_menu.visible:
            self.store.hide_context_menu()
            return
        current = self.state.viewport.current_path
        parent = parent_path(current)
        if parent != current:
            self.navigate_to(parent)

    def _index_at(self, event: PointerEvent) -> int:
        viewport = self.state.viewport
        layout = calculate_layout(viewport.terminal_size)
        return get_item_index_from_position(
            event.x,
            event.y,
            layout,
            len(viewport.entries),
            viewport.scroll_offset,
        )

    def _on_click(self, event: PointerEvent) -> None:
        menu = self.state.context_menu
        if menu.visible:
            box = layout_context_menu(menu_items_for(menu.target_entry), menu.position, self.state.viewport.terminal_size)
            action = context_menu_action_at(box, event.x, event.y)
            if action is None:
                self.store.hide_context_menu()
            else:
                self.bus.publish(events.CONTEXT_MENU_ACTION, MenuAction(action))
            return
        self.store.set_selection(self._index_at(event))

    def _on_double_click(self, event: PointerEvent) -> None:
        if self.state.context_menu.visible:
            self.store.hide_context_menu()
            return
        index = self._index_at(event)
        if index < 0:
            return
        self.store.set_selection(index)
        self.open_selection()

    def _on_right_click(self, event: PointerEvent) -> None:
        index = self._index_at(event)
        target: FileEntry | None = None
        if index >= 0:
            self.store.set_selection(index)
            target = self.state.selection.selected_entry
        self.store.show_context_menu(Position(event.x, event.y), target)

    def _on_menu_action(self, payload: MenuAction) -> None:
        self.store.hide_context_menu()
        action = payload.action
        if action == ACTION_OPEN:
            self.open_selection()
        elif action == ACTION_OPEN_EDITOR:
            self.open_selection_in_editor()
        elif action == ACTION_COPY:
            self.copy_selection(CLIPBOARD_COPY)
        elif action == ACTION_CUT:
            self.copy_selection(CLIPBOARD_CUT)
        elif action == ACTION_PASTE:
            self.paste()
        elif action == ACTION_DELETE:
            self.delete_selection()
        elif action == ACTION_REFRESH:
            self.load_directory()
        else:
            logger.warning("Unknown context-menu action %r", action)

    def _on_resize(self, payload: Resize) -> None:
        size = TerminalSize(payload.width, payload.height)
        self.store.set_terminal_size(size, calculate_layout(size))

    def _on_quit(self, _payload: object) -> None:
        self.quit_requested = True

    # File operations

    def open_selection(self) -> None:
        entry = self.state.selection.selected_entry
        if entry is None:
            return
        if entry.is_dir:
            self.navigate_to(entry.path)
            return
        self.tasks.submit(
            lambda: self._open_file(entry.path),
            lambda outcome: self._report_failure(outcome, "Open"),
        )

    def open_selection_in_editor(self) -> None:
        entry = self.state.selection.selected_entry
        if entry is None:
            return
        editor = self.settings.editor
        self.tasks.submit(
            lambda: self._open_in_editor(entry.path, editor),
            lambda outcome: self._report_failure(outcome, "Open with editor"),
        )

    def copy_selection(self, operation: str) -> None:
        entry = self.state.selection.selected_entry
        if entry is None:
            return
        self.store.set_clipboard(entry, operation)

    def paste(self) -> None:
        clipboard = self.state.clipboard
        if clipboard.entry is None:
            return
        source = clipboard.entry.path
        operation = clipboard.operation
        directory = self.state.viewport.current_path

        def run() -> Path:
            destination = unique_destination(directory, source.name)
            if operation == CLIPBOARD_COPY:
                self.filesystem.copy(source, destination)
            else:
                self.filesystem.move(source, destination)
            return destination

        def done(outcome: TaskOutcome) -> None:
            if self._report_failure(outcome, "Paste"):
                return
            if operation == CLIPBOARD_CUT:
                self.store.clear_clipboard()
            self.load_directory()

        self.tasks.submit(run, done)

    def delete_selection(self) -> None:
        entry = self.state.selection.selected_entry
        if entry is None:
            return

        def done(outcome: TaskOutcome) -> None:
            if self._report_failure(outcome, "Delete"):
                return
            self.load_directory()

        self.tasks.submit(lambda: self.filesystem.delete(entry.path), done)


__all__ = ["FileManagerController"]
