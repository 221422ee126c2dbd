"""Ordered callback registry with stable unsubscribe tokens.

Shared by the event bus and the state store. Removal goes through an integer
token issued at subscription time, so registering the same callable twice
yields two independent subscriptions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

HandlerT = TypeVar("HandlerT", bound=Callable[..., object])


class SubscriberList(Generic[HandlerT]):
    def __init__(self) -> None:
        self._handlers: dict[int, HandlerT] = {}
        self._next_token = 1

    def add(self, handler: HandlerT) -> Callable[[], None]:
        """Append ``handler`` and return a function that removes exactly this registration."""
        token = self._next_token
        self._next_token += 1
        self._handlers[token] = handler

        def unsubscribe() -> None:
            self._handlers.pop(token, None)

        return unsubscribe

    def snapshot(self) -> tuple[HandlerT, ...]:
        """Return handlers in subscription order, detached from later changes."""
        return tuple(self._handlers.values())

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[HandlerT]:
        return iter(self.snapshot())
