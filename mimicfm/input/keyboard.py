"""Keyboard decoding for raw-mode terminal input.

``decode_key`` turns one stdin chunk into one ``KeyEvent``. It is stateless:
each chunk is assumed to hold exactly one key press or one escape sequence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

ESC = 0x1B

_NAMED_CONTROL_BYTES = {
    0x03: "ctrl+c",
    0x0D: "enter",
    0x09: "tab",
    0x20: "space",
    0x08: "backspace",
    0x7F: "backspace",
}

_CSI_KEYS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "2~": "insert",
    "3~": "delete",
    "5~": "pageup",
    "6~": "pagedown",
}

_FUNCTION_KEY_RE = re.compile(r"(\d+)~")


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False


def _decode_escape_sequence(chunk: bytes) -> KeyEvent:
    body = chunk[1:].decode("latin-1")
    if body.startswith("["):
        command = body[1:]
        if not command:
            return KeyEvent("escape")
        named = _CSI_KEYS.get(command)
        if named is not None:
            return KeyEvent(named)
        match = _FUNCTION_KEY_RE.fullmatch(command)
        if match:
            return KeyEvent(f"f{match.group(1)}")
        return KeyEvent(f"ansi:{command}")
    return KeyEvent(f"escape:{body}", alt=True)


def decode_key(chunk: bytes) -> KeyEvent:
    """Decode one raw input chunk into a symbolic key.

    Multi-byte chunks that start with ESC are checked first so arrow letters
    are never mistaken for printable keys. Unrecognised bytes become an
    opaque ``unknown:<code>`` key that the bindings simply ignore.
    """
    if not chunk:
        return KeyEvent("unknown:0")

    code = chunk[0]
    if code == ESC:
        if len(chunk) == 1:
            return KeyEvent("escape")
        return _decode_escape_sequence(chunk)

    named = _NAMED_CONTROL_BYTES.get(code)
    if named is not None:
        return KeyEvent(named, ctrl=code == 0x03)
    if 0x01 <= code <= 0x1A:
        return KeyEvent(f"ctrl+{chr(code + 96)}", ctrl=True)
    if 0x20 <= code <= 0x7E:
        text = chunk.decode("ascii", errors="replace")
        return KeyEvent(text, shift=len(text) == 1 and text.isupper())
    return KeyEvent(f"unknown:{code}")


class KeyboardDecoder:
    """Raw-mode lifecycle plus per-chunk decoding for keyboard input."""

    def __init__(self, terminal) -> None:
        self._terminal = terminal
        self.listening = False

    def start(self) -> None:
        if self.listening:
            return
        self._terminal.set_raw_mode(True)
        self.listening = True

    def stop(self) -> None:
        if not self.listening:
            return
        self._terminal.set_raw_mode(False)
        self.listening = False

    def feed(self, chunk: bytes) -> KeyEvent:
        return decode_key(chunk)


__all__ = [
    "KeyEvent",
    "KeyboardDecoder",
    "decode_key",
]
