"""Terminal control surface for the full-screen session.

Owns raw-mode lifecycle, alternate-screen switching, cursor visibility, and
mouse-report toggles. Every switch is idempotent, so ``stop`` paths can call
them unconditionally.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

from .model import TerminalSize


ENTER_ALTERNATE_SCREEN = b"\x1b[?1049h"
EXIT_ALTERNATE_SCREEN = b"\x1b[?1049l"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
ENABLE_MOUSE = b"\x1b[?1000h\x1b[?1006h"
DISABLE_MOUSE = b"\x1b[?1000l\x1b[?1006l"
CLEAR_SCREEN = b"\x1b[2J\x1b[H"

DEFAULT_SIZE = TerminalSize(80, 24)


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state: list | None = None
        self._raw = False
        self._mouse_reporting_enabled = False
        self._alternate_screen = False
        self._cursor_hidden = False

    @property
    def raw(self) -> bool:
        return self._raw

    @property
    def mouse_reporting(self) -> bool:
        return self._mouse_reporting_enabled

    def _emit(self, payload: bytes) -> None:
        os.write(self.stdout_fd, payload)

    def write(self, text: str) -> None:
        self._emit(text.encode("utf-8", errors="replace"))

    def get_size(self) -> TerminalSize:
        term = shutil.get_terminal_size((DEFAULT_SIZE.width, DEFAULT_SIZE.height))
        return TerminalSize(max(1, term.columns), max(1, term.lines))

    def set_raw_mode(self, enabled: bool) -> None:
        desired = bool(enabled)
        if desired == self._raw:
            return
        if desired:
            self._saved_tty_state = termios.tcgetattr(self.stdin_fd)
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        elif self._saved_tty_state is not None:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        self._raw = desired

    def set_mouse_reporting(self, enabled: bool) -> None:
        """Toggle press reporting (1000) in SGR encoding (1006)."""
        desired = bool(enabled)
        if desired == self._mouse_reporting_enabled:
            return
        self._emit(ENABLE_MOUSE if desired else DISABLE_MOUSE)
        self._mouse_reporting_enabled = desired

    def enter_alternate_screen(self) -> None:
        if self._alternate_screen:
            return
        self._emit(ENTER_ALTERNATE_SCREEN)
        self._alternate_screen = True

    def exit_alternate_screen(self) -> None:
        if not self._alternate_screen:
            return
        self._emit(EXIT_ALTERNATE_SCREEN)
        self._alternate_screen = False

    def hide_cursor(self) -> None:
        if self._cursor_hidden:
            return
        self._emit(HIDE_CURSOR)
        self._cursor_hidden = True

    def show_cursor(self) -> None:
        if not self._cursor_hidden:
            return
        self._emit(SHOW_CURSOR)
        self._cursor_hidden = False

    def clear(self) -> None:
        self._emit(CLEAR_SCREEN)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with a hidden cursor."""
        self.set_raw_mode(True)
        self.enter_alternate_screen()
        self.hide_cursor()

    def disable_tui_mode(self) -> None:
        """Undo everything ``enable_tui_mode`` and mouse reporting changed."""
        self.set_mouse_reporting(False)
        self.show_cursor()
        self.exit_alternate_screen()
        self.set_raw_mode(False)

    @contextlib.contextmanager
    def tui_mode(self):
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()


__all__ = ["DEFAULT_SIZE", "TerminalController"]
