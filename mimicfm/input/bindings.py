"""Default mapping from decoded keys and pointer events to event-bus topics."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .. import events
from ..events import EventBus
from .keyboard import KeyboardDecoder
from .mouse import BUTTON_LEFT, BUTTON_RIGHT, DOUBLE_CLICK, PointerDecoder, PointerEvent, is_pointer_sequence


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key names to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], None]


class KeyComboRegistry:
    """Small exact-match key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> bool:
        """Invoke the handler bound to ``key``; return whether one existed."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler()
        return True

    def clear(self) -> None:
        self._handlers.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._handlers


def _publisher(bus: EventBus, topic: str, payload: object = events.EMPTY) -> Callable[[], None]:
    def publish() -> None:
        bus.publish(topic, payload)

    return publish


def default_key_bindings(bus: EventBus) -> tuple[KeyComboBinding, ...]:
    return (
        KeyComboBinding(("up",), _publisher(bus, events.NAVIGATION, events.Navigate("up"))),
        KeyComboBinding(("down",), _publisher(bus, events.NAVIGATION, events.Navigate("down"))),
        KeyComboBinding(("left",), _publisher(bus, events.NAVIGATION, events.Navigate("left"))),
        KeyComboBinding(("right",), _publisher(bus, events.NAVIGATION, events.Navigate("right"))),
        KeyComboBinding(("escape", "backspace"), _publisher(bus, events.NAVIGATION, events.Navigate("back"))),
        KeyComboBinding(("enter",), _publisher(bus, events.FILE_OPENED)),
        KeyComboBinding(("ctrl+o",), _publisher(bus, events.FILE_OPEN_EDITOR)),
        KeyComboBinding(("ctrl+c",), _publisher(bus, events.FILE_COPY)),
        KeyComboBinding(("ctrl+x",), _publisher(bus, events.FILE_CUT)),
        KeyComboBinding(("ctrl+v",), _publisher(bus, events.FILE_PASTE)),
        KeyComboBinding(("delete",), _publisher(bus, events.FILE_DELETE)),
        # F5 arrives as CSI 15~.
        KeyComboBinding(("f15", "r"), _publisher(bus, events.REFRESH)),
        KeyComboBinding(("q", "ctrl+q"), _publisher(bus, events.QUIT)),
    )


class InputRouter:
    """Feed raw chunks through the decoders and publish the bound topics.

    Pointer reports are recognised by prefix and never reach the keyboard
    decoder; everything else is decoded as exactly one key.
    """

    def __init__(self, bus: EventBus, keyboard: KeyboardDecoder, pointer: PointerDecoder) -> None:
        self.bus = bus
        self.keyboard = keyboard
        self.pointer = pointer
        self.keys = KeyComboRegistry()

    def register_default_bindings(self) -> None:
        self.keys.register_bindings(*default_key_bindings(self.bus))

    def clear_bindings(self) -> None:
        self.keys.clear()

    def feed(self, chunk: bytes, now_ms: float | None = None) -> None:
        if not chunk:
            return
        if is_pointer_sequence(chunk):
            for pointer_event in self.pointer.feed(chunk, now_ms):
                self._publish_pointer(pointer_event)
            return
        self.keys.dispatch(self.keyboard.feed(chunk).key)

    def _publish_pointer(self, event: PointerEvent) -> None:
        if event.type == DOUBLE_CLICK:
            self.bus.publish(events.POINTER_DOUBLE_CLICK, event)
        elif event.button == BUTTON_LEFT:
            self.bus.publish(events.POINTER_CLICK, event)
        elif event.button == BUTTON_RIGHT:
            self.bus.publish(events.POINTER_RIGHT_CLICK, event)


__all__ = [
    "InputRouter",
    "KeyComboBinding",
    "KeyComboRegistry",
    "default_key_bindings",
]
