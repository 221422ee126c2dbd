"""Main dispatcher loop: read input, publish it, then run periodic upkeep."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..input.reader import read_chunk
from .controller import FileManagerController

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 50


def run_main_loop(
    controller: FileManagerController,
    stdin_fd: int,
    poll_interval_ms: int = POLL_INTERVAL_MS,
    read: Callable[[int, int | None], bytes | None] = read_chunk,
) -> None:
    """Run until the controller stops, a quit is requested, or stdin closes.

    Each turn waits up to ``poll_interval_ms`` for one input chunk, feeds it
    to the decoders, and then lets the controller deliver background results,
    expire status text, and notice terminal resizes.
    """
    while controller.running and not controller.quit_requested:
        chunk = read(stdin_fd, poll_interval_ms)
        if chunk == b"":
            logger.info("Input closed, leaving main loop")
            return
        if chunk is not None:
            controller.handle_input(chunk)
        controller.tick()


__all__ = ["POLL_INTERVAL_MS", "run_main_loop"]
