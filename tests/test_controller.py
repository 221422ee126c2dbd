"""End-to-end controller tests: raw input in, state and frames out.

Uses a fake terminal, a temporary directory, and the real background runner;
``settle`` drains every pending completion on the test thread.
"""

from __future__ import annotations

from pathlib import Path
import shutil
import tempfile
import unittest

from mimicfm import events
from mimicfm.config import Settings
from mimicfm.errors import LaunchError
from mimicfm.layout import calculate_layout, get_item_position
from mimicfm.model import Position, TerminalSize
from mimicfm.render.menu import ENTRY_MENU_ITEMS, layout_context_menu
from mimicfm.runtime.controller import FileManagerController
from mimicfm.state import CLIPBOARD_COPY, STATUS_ERROR
from mimicfm.ui_theme import PLAIN_THEME


class FakeTerminal:
    def __init__(self, size: TerminalSize = TerminalSize(80, 24)) -> None:
        self.size = size
        self.frames: list[str] = []
        self.calls: list[object] = []

    def get_size(self) -> TerminalSize:
        return self.size

    def write(self, text: str) -> None:
        self.frames.append(text)

    def enable_tui_mode(self) -> None:
        self.calls.append("enable")

    def clear(self) -> None:
        self.calls.append("clear")

    def disable_tui_mode(self) -> None:
        self.calls.append("disable")

    def set_raw_mode(self, enabled: bool) -> None:
        self.calls.append(("raw", enabled))

    def set_mouse_reporting(self, enabled: bool) -> None:
        self.calls.append(("mouse", enabled))


def _press(button: int, x: int, y: int) -> bytes:
    return f"\x1b[<{button};{x + 1};{y + 1}M".encode("ascii")


class ControllerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        (self.root / "sub").mkdir()
        (self.root / "sub" / "inner.txt").write_text("inner", encoding="utf-8")
        (self.root / "b.bin").write_bytes(b"\x00" * 10)
        (self.root / "report.txt").write_text("report", encoding="utf-8")

        self.now = [100.0]
        self.opened: list[Path] = []
        self.edited: list[tuple[Path, str]] = []
        self.open_error: Exception | None = None
        self.terminal = FakeTerminal()
        self.controller = FileManagerController(
            self.root,
            self.terminal,
            settings=Settings(editor="vim"),
            theme=PLAIN_THEME,
            open_file=self._open_file,
            open_in_editor=lambda path, editor: self.edited.append((path, editor)),
            clock=lambda: self.now[0],
        )
        self.addCleanup(self.controller.stop)

    def _open_file(self, path: Path) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.opened.append(path)

    def settle(self) -> None:
        self.controller.tasks.wait_idle()

    def start(self) -> None:
        self.controller.start()
        self.settle()

    @property
    def state(self):
        return self.controller.state

    def names(self) -> list[str]:
        return [entry.name for entry in self.state.viewport.entries]

    def item_cell(self, index: int) -> tuple[int, int]:
        position = get_item_position(index, calculate_layout(self.terminal.size))
        return position.x, position.y

    def select(self, name: str) -> None:
        self.controller.store.set_selection(self.names().index(name))


class LifecycleTests(ControllerTestCase):
    def test_start_loads_directory_and_renders(self) -> None:
        self.start()
        self.assertEqual(self.names(), ["sub", "b.bin", "report.txt"])
        self.assertIn(("raw", True), self.terminal.calls)
        self.assertIn(("mouse", True), self.terminal.calls)
        self.assertGreaterEqual(len(self.terminal.frames), 2)
        self.assertIn("report.txt", self.terminal.frames[-1])

    def test_start_and_stop_are_idempotent(self) -> None:
        self.start()
        self.controller.start()
        self.controller.stop()
        self.controller.stop()
        self.assertEqual(self.terminal.calls.count("enable"), 1)
        self.assertEqual(self.terminal.calls.count("disable"), 1)
        self.assertIn(("raw", False), self.terminal.calls)
        self.assertIn(("mouse", False), self.terminal.calls)
        self.assertLess(self.terminal.calls.index("clear"), self.terminal.calls.index("disable"))

        self.controller.bus.publish(events.REFRESH)
        self.assertEqual(self.controller.tasks.pending, 0)

    def test_restart_after_stop_reloads_listing(self) -> None:
        self.start()
        self.controller.stop()
        (self.root / "added.txt").write_text("new", encoding="utf-8")

        self.start()

        self.assertTrue(self.controller.running)
        self.assertEqual(self.terminal.calls.count("enable"), 2)
        self.assertEqual(self.names(), ["sub", "added.txt", "b.bin", "report.txt"])
        self.controller.handle_input(b"\x1b[C")
        self.assertEqual(self.state.selection.selected_index, 0)

    def test_input_after_stop_is_ignored(self) -> None:
        self.start()
        self.controller.stop()
        frames = len(self.terminal.frames)
        self.controller.handle_input(b"\x1b[C")
        self.assertEqual(self.state.selection.selected_index, -1)
        self.assertEqual(len(self.terminal.frames), frames)

    def test_every_store_change_renders_once(self) -> None:
        self.start()
        frames = len(self.terminal.frames)
        self.controller.handle_input(b"\x1b[C")
        self.assertEqual(len(self.terminal.frames), frames + 1)
        self.assertEqual(self.state.selection.selected_index, 0)

    def test_quit_key_requests_exit(self) -> None:
        self.start()
        self.controller.handle_input(b"q")
        self.assertTrue(self.controller.quit_requested)


class PointerTests(ControllerTestCase):
    def test_click_selects_and_click_on_empty_space_clears(self) -> None:
        self.start()
        x, y = self.item_cell(2)
        self.controller.handle_input(_press(0, x, y), now_ms=0)
        self.assertEqual(self.state.selection.selected_entry.name, "report.txt")

        self.controller.handle_input(_press(0, 70, 20), now_ms=1000)
        self.assertEqual(self.state.selection.selected_index, -1)

    def test_double_click_on_directory_navigates_into_it(self) -> None:
        self.start()
        x, y = self.item_cell(0)
        self.controller.handle_input(_press(0, x, y), now_ms=0)
        self.controller.handle_input(_press(0, x, y + 1), now_ms=100)
        self.settle()
        self.assertEqual(self.state.viewport.current_path, self.root / "sub")
        self.assertEqual(self.names(), ["inner.txt"])

    def test_double_click_on_file_launches_default_handler(self) -> None:
        self.start()
        x, y = self.item_cell(1)
        self.controller.handle_input(_press(0, x, y), now_ms=0)
        self.controller.handle_input(_press(0, x, y), now_ms=150)
        self.settle()
        self.assertEqual(self.opened, [self.root / "b.bin"])

    def test_right_click_opens_entry_menu_and_menu_click_runs_action(self) -> None:
        self.start()
        x, y = self.item_cell(2)
        self.controller.handle_input(_press(2, x, y), now_ms=0)
        menu = self.state.context_menu
        self.assertTrue(menu.visible)
        self.assertEqual(menu.position, Position(x, y))
        self.assertEqual(menu.target_entry.name, "report.txt")

        box = layout_context_menu(ENTRY_MENU_ITEMS, menu.position, self.terminal.size)
        copy_row = box.y + 1 + 3
        self.controller.handle_input(_press(0, box.x + 2, copy_row), now_ms=5000)

        self.assertFalse(self.state.context_menu.visible)
        self.assertEqual(self.state.clipboard.operation, CLIPBOARD_COPY)
        self.assertEqual(self.state.clipboard.entry.name, "report.txt")

    def test_right_click_on_empty_space_opens_empty_space_menu(self) -> None:
        self.start()
        self.controller.handle_input(_press(2, 70, 20), now_ms=0)
        self.assertTrue(self.state.context_menu.visible)
        self.assertIsNone(self.state.context_menu.target_entry)
        self.assertIn("Refresh", self.terminal.frames[-1])

    def test_click_outside_menu_only_hides_it(self) -> None:
        self.start()
        x, y = self.item_cell(2)
        self.controller.handle_input(_press(2, x, y), now_ms=0)
        first_x, first_y = self.item_cell(0)
        self.controller.handle_input(_press(0, first_x, first_y + 14), now_ms=5000)
        self.assertFalse(self.state.context_menu.visible)
        self.assertEqual(self.state.selection.selected_entry.name, "report.txt")

    def test_escape_hides_menu_instead_of_going_back(self) -> None:
        self.start()
        self.controller.handle_input(_press(2, 70, 20), now_ms=0)
        self.controller.handle_input(b"\x1b")
        self.assertFalse(self.state.context_menu.visible)
        self.assertEqual(self.state.viewport.current_path, self.root)


class FileOperationTests(ControllerTestCase):
    def test_copy_paste_into_same_directory_uses_unique_name(self) -> None:
        self.start()
        self.select("report.txt")
        self.controller.handle_input(b"\x03")
        self.controller.handle_input(b"\x16")
        self.settle()
        self.assertTrue((self.root / "report (1).txt").exists())
        self.assertIn("report (1).txt", self.names())
        self.assertEqual(self.state.clipboard.operation, CLIPBOARD_COPY)

    def test_cut_paste_moves_and_clears_clipboard(self) -> None:
        self.start()
        self.select("report.txt")
        self.controller.handle_input(b"\x18")
        self.select("sub")
        self.controller.handle_input(b"\r")
        self.settle()
        self.controller.handle_input(b"\x16")
        self.settle()
        self.assertTrue((self.root / "sub" / "report.txt").exists())
        self.assertFalse((self.root / "report.txt").exists())
        self.assertIsNone(self.state.clipboard.entry)
        self.assertEqual(self.names(), ["inner.txt", "report.txt"])

    def test_paste_with_empty_clipboard_does_nothing(self) -> None:
        self.start()
        self.controller.handle_input(b"\x16")
        self.settle()
        self.assertEqual(self.names(), ["sub", "b.bin", "report.txt"])

    def test_delete_removes_selection_and_reloads(self) -> None:
        self.start()
        self.select("sub")
        self.controller.handle_input(b"\x1b[3~")
        self.settle()
        self.assertFalse((self.root / "sub").exists())
        self.assertEqual(self.names(), ["b.bin", "report.txt"])

    def test_open_with_editor_uses_configured_command(self) -> None:
        self.start()
        self.select("report.txt")
        self.controller.handle_input(b"\x0f")
        self.settle()
        self.assertEqual(self.edited, [(self.root / "report.txt", "vim")])

    def test_launch_failure_shows_transient_error(self) -> None:
        self.start()
        self.open_error = LaunchError("no handler for b.bin")
        self.select("b.bin")
        self.controller.handle_input(b"\r")
        self.settle()
        self.assertEqual(self.state.status.message, "no handler for b.bin")
        self.assertEqual(self.state.status.level, STATUS_ERROR)
        self.assertIn("no handler for b.bin", self.terminal.frames[-1])

        self.controller.tick()
        self.assertEqual(self.state.status.message, "no handler for b.bin")
        self.now[0] += 10
        self.controller.tick()
        self.assertEqual(self.state.status.message, "")


class NavigationTests(ControllerTestCase):
    def test_back_goes_to_parent(self) -> None:
        self.start()
        self.select("sub")
        self.controller.handle_input(b"\r")
        self.settle()
        self.controller.handle_input(b"\x7f")
        self.settle()
        self.assertEqual(self.state.viewport.current_path, self.root)
        self.assertEqual(len(self.names()), 3)

    def test_unreadable_directory_shows_empty_listing_and_error(self) -> None:
        self.start()
        self.select("sub")
        self.controller.handle_input(b"\r")
        self.settle()
        shutil.rmtree(self.root / "sub")
        self.controller.handle_input(b"r")
        self.settle()
        self.assertEqual(self.state.viewport.entries, ())
        self.assertEqual(self.state.status.level, STATUS_ERROR)
        self.assertIn("Cannot read directory", self.state.status.message)
        self.assertIn("No files found", self.terminal.frames[-1])

    def test_stale_directory_load_is_discarded(self) -> None:
        self.controller.start()
        self.controller.navigate_to(self.root / "sub")
        with self.assertLogs("mimicfm.runtime.controller", level="INFO") as logs:
            self.settle()
        self.assertTrue(any("Discarding stale" in line for line in logs.output))
        self.assertEqual(self.state.viewport.current_path, self.root / "sub")
        self.assertEqual(self.names(), ["inner.txt"])

    def test_resize_is_picked_up_by_tick(self) -> None:
        self.start()
        self.terminal.size = TerminalSize(120, 40)
        self.controller.tick()
        viewport = self.state.viewport
        self.assertEqual(viewport.terminal_size, TerminalSize(120, 40))
        self.assertEqual(viewport.items_per_row, 8)
        self.assertEqual(self.terminal.frames[-1].count("\r\n"), 39)


if __name__ == "__main__":
    unittest.main()
