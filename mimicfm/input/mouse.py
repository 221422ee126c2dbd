"""Pointer decoding for SGR and legacy X10 mouse reports.

Both wire formats normalize to ``PointerEvent`` with 0-based cell coordinates.
``DoubleClickTracker`` reclassifies a quick second left click as a double click.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..errors import ProtocolDecodeError

logger = logging.getLogger(__name__)

DOUBLE_CLICK_MS = 300
DOUBLE_CLICK_DISTANCE = 1

BUTTON_LEFT = "left"
BUTTON_MIDDLE = "middle"
BUTTON_RIGHT = "right"
CLICK = "click"
DOUBLE_CLICK = "double-click"

_BUTTONS = {0: BUTTON_LEFT, 1: BUTTON_MIDDLE, 2: BUTTON_RIGHT}
_MOTION_FLAG = 0b0010_0000
_WHEEL_FLAG = 0b0100_0000

SGR_PREFIX = b"\x1b[<"
LEGACY_PREFIX = b"\x1b[M"
_SGR_RE = re.compile(rb"\x1b\[<([^Mm]*)([Mm])")


@dataclass(frozen=True)
class PointerEvent:
    x: int
    y: int
    button: str
    type: str = CLICK


def is_pointer_sequence(chunk: bytes) -> bool:
    return chunk.startswith(SGR_PREFIX) or chunk.startswith(LEGACY_PREFIX)


def _button_name(code: int) -> str | None:
    if code & (_MOTION_FLAG | _WHEEL_FLAG):
        return None
    return _BUTTONS.get(code & 0b11)


def _parse_sgr_payload(payload: bytes) -> tuple[int, int, int]:
    try:
        button_s, x_s, y_s = payload.decode("ascii").split(";")
        return int(button_s), int(x_s), int(y_s)
    except (UnicodeDecodeError, ValueError) as exc:
        raise ProtocolDecodeError(f"malformed SGR mouse payload {payload!r}") from exc


def _decode_sgr(chunk: bytes) -> list[PointerEvent]:
    events: list[PointerEvent] = []
    for match in _SGR_RE.finditer(chunk):
        if match.group(2) == b"m":
            continue
        try:
            code, col, row = _parse_sgr_payload(match.group(1))
        except ProtocolDecodeError as exc:
            logger.debug("Dropping pointer report: %s", exc)
            continue
        button = _button_name(code)
        if button is None:
            continue
        events.append(PointerEvent(x=col - 1, y=row - 1, button=button))
    return events


def _decode_legacy(chunk: bytes) -> list[PointerEvent]:
    events: list[PointerEvent] = []
    start = chunk.find(LEGACY_PREFIX)
    while start != -1:
        report = chunk[start + len(LEGACY_PREFIX) : start + len(LEGACY_PREFIX) + 3]
        if len(report) < 3:
            logger.debug("Dropping truncated legacy pointer report %r", chunk[start:])
            break
        button = _button_name(report[0] - 32)
        if button is not None:
            events.append(PointerEvent(x=report[1] - 33, y=report[2] - 33, button=button))
        start = chunk.find(LEGACY_PREFIX, start + len(LEGACY_PREFIX) + 3)
    return events


def decode_pointer(chunk: bytes) -> list[PointerEvent]:
    """Decode every press report in ``chunk``; releases, motion, and wheel are dropped."""
    if chunk.startswith(SGR_PREFIX):
        return _decode_sgr(chunk)
    if chunk.startswith(LEGACY_PREFIX):
        return _decode_legacy(chunk)
    return []


class DoubleClickTracker:
    """Merge two nearby left clicks into one double click.

    After a double click the tracker forgets the pair, so a third rapid click
    starts a new window instead of producing a triple click. Middle and right
    clicks pass through without touching the timer.
    """

    def __init__(
        self,
        threshold_ms: int = DOUBLE_CLICK_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.threshold_ms = threshold_ms
        self._clock = clock
        self._last_click_ms: float | None = None
        self._last_x = 0
        self._last_y = 0

    def classify(self, event: PointerEvent, now_ms: float | None = None) -> PointerEvent:
        if event.button != BUTTON_LEFT:
            return event
        if now_ms is None:
            now_ms = self._clock() * 1000.0
        if (
            self._last_click_ms is not None
            and now_ms - self._last_click_ms < self.threshold_ms
            and abs(event.x - self._last_x) <= DOUBLE_CLICK_DISTANCE
            and abs(event.y - self._last_y) <= DOUBLE_CLICK_DISTANCE
        ):
            self._last_click_ms = None
            return replace(event, type=DOUBLE_CLICK)
        self._last_click_ms = now_ms
        self._last_x = event.x
        self._last_y = event.y
        return event

    def reset(self) -> None:
        self._last_click_ms = None


class PointerDecoder:
    """Mouse-tracking lifecycle plus decoding with double-click synthesis."""

    def __init__(self, terminal, tracker: DoubleClickTracker | None = None) -> None:
        self._terminal = terminal
        self.tracker = tracker if tracker is not None else DoubleClickTracker()
        self.listening = False

    def start(self) -> None:
        if self.listening:
            return
        self._terminal.set_mouse_reporting(True)
        self.listening = True

    def stop(self) -> None:
        if not self.listening:
            return
        self._terminal.set_mouse_reporting(False)
        self.tracker.reset()
        self.listening = False

    def feed(self, chunk: bytes, now_ms: float | None = None) -> list[PointerEvent]:
        return [self.tracker.classify(event, now_ms) for event in decode_pointer(chunk)]


__all__ = [
    "BUTTON_LEFT",
    "BUTTON_MIDDLE",
    "BUTTON_RIGHT",
    "CLICK",
    "DOUBLE_CLICK",
    "DOUBLE_CLICK_MS",
    "DoubleClickTracker",
    "PointerDecoder",
    "PointerEvent",
    "decode_pointer",
    "is_pointer_sequence",
]
