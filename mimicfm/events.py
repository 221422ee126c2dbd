"""Synchronous topic-based event bus plus the topic/payload catalogue.

Each topic carries exactly one payload type (see ``TOPIC_PAYLOADS``); the bus
rejects mismatched payloads at publish time so handlers can rely on shape.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .input.mouse import PointerEvent
from .subscriptions import SubscriberList

logger = logging.getLogger(__name__)

NAVIGATION = "navigation"
POINTER_CLICK = "mouse:click"
POINTER_DOUBLE_CLICK = "mouse:double-click"
POINTER_RIGHT_CLICK = "mouse:right-click"
FILE_OPENED = "file:opened"
FILE_OPEN_EDITOR = "file:open-editor"
FILE_COPY = "file:copy"
FILE_CUT = "file:cut"
FILE_PASTE = "file:paste"
FILE_DELETE = "file:delete"
CONTEXT_MENU_ACTION = "context-menu:action"
REFRESH = "refresh"
RESIZE = "terminal:resize"
QUIT = "quit"

DIRECTIONS = ("up", "down", "left", "right", "back")


@dataclass(frozen=True)
class Empty:
    """Payload for topics that carry no data."""


EMPTY = Empty()


@dataclass(frozen=True)
class Navigate:
    direction: str

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"unknown navigation direction: {self.direction!r}")


@dataclass(frozen=True)
class MenuAction:
    action: str


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


TOPIC_PAYLOADS: dict[str, type] = {
    NAVIGATION: Navigate,
    POINTER_CLICK: PointerEvent,
    POINTER_DOUBLE_CLICK: PointerEvent,
    POINTER_RIGHT_CLICK: PointerEvent,
    FILE_OPENED: Empty,
    FILE_OPEN_EDITOR: Empty,
    FILE_COPY: Empty,
    FILE_CUT: Empty,
    FILE_PASTE: Empty,
    FILE_DELETE: Empty,
    CONTEXT_MENU_ACTION: MenuAction,
    REFRESH: Empty,
    RESIZE: Resize,
    QUIT: Empty,
}

EventHandler = Callable[[object], None]


class EventBus:
    """Named-topic publish/subscribe dispatcher running handlers on the caller's turn.

    A failing handler is logged and skipped; remaining handlers still run and
    the publisher never sees the exception.
    """

    def __init__(self) -> None:
        self._topics: dict[str, SubscriberList[EventHandler]] = {}

    def subscribe(self, topic: str, handler: EventHandler) -> Callable[[], None]:
        subscribers = self._topics.get(topic)
        if subscribers is None:
            subscribers = SubscriberList()
            self._topics[topic] = subscribers
        return subscribers.add(handler)

    def publish(self, topic: str, payload: object = EMPTY) -> None:
        expected = TOPIC_PAYLOADS.get(topic)
        if expected is not None and not isinstance(payload, expected):
            raise TypeError(f"topic {topic!r} expects {expected.__name__}, got {type(payload).__name__}")
        subscribers = self._topics.get(topic)
        if subscribers is None:
            return
        for handler in subscribers.snapshot():
            try:
                handler(payload)
            except Exception:
                logger.exception("Error in event handler for %r", topic)

    def unsubscribe_all(self, topic: str) -> None:
        self._topics.pop(topic, None)

    def clear(self) -> None:
        self._topics.clear()


__all__ = [
    "CONTEXT_MENU_ACTION",
    "DIRECTIONS",
    "EMPTY",
    "FILE_COPY",
    "FILE_CUT",
    "FILE_DELETE",
    "FILE_OPEN_EDITOR",
    "FILE_OPENED",
    "FILE_PASTE",
    "NAVIGATION",
    "POINTER_CLICK",
    "POINTER_DOUBLE_CLICK",
    "POINTER_RIGHT_CLICK",
    "QUIT",
    "REFRESH",
    "RESIZE",
    "TOPIC_PAYLOADS",
    "Empty",
    "EventBus",
    "MenuAction",
    "Navigate",
    "Resize",
]
