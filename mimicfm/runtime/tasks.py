"""Background execution for blocking filesystem and launcher calls.

Work runs on a small thread pool; outcomes are queued and only delivered when
the main loop calls ``drain``, so every completion callback runs on the
dispatcher thread alongside input handling and state mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from queue import Empty, Queue

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 2


@dataclass(frozen=True)
class TaskOutcome:
    """Result or exception of one background call, paired with its callback."""

    on_done: Callable[[TaskOutcome], None]
    result: object = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BackgroundTaskRunner:
    def __init__(self, max_workers: int = DEFAULT_WORKERS) -> None:
        self._max_workers = max_workers
        self._open()

    def _open(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="mimicfm-task")
        self._outcomes: Queue[TaskOutcome] = Queue()
        self._pending = 0
        self._closed = False

    @property
    def pending(self) -> int:
        """Number of submitted tasks whose callbacks have not run yet."""
        return self._pending

    @property
    def closed(self) -> bool:
        return self._closed

    def restart(self) -> None:
        """Accept work again after ``shutdown``.

        Outcomes of tasks still running from before the shutdown are never delivered.
        """
        if not self._closed:
            return
        self._open()

    def submit(self, fn: Callable[[], object], on_done: Callable[[TaskOutcome], None]) -> None:
        if self._closed:
            raise RuntimeError("task runner is shut down")
        outcomes = self._outcomes

        def run() -> None:
            try:
                outcome = TaskOutcome(on_done=on_done, result=fn())
            except Exception as exc:
                outcome = TaskOutcome(on_done=on_done, error=exc)
            outcomes.put(outcome)

        self._pending += 1
        self._executor.submit(run)

    def drain(self, timeout: float | None = None) -> int:
        """Run callbacks for every finished task; wait up to ``timeout`` for the first one.

        Returns the number of callbacks run.
        """
        handled = 0
        block = timeout is not None and timeout > 0
        while True:
            try:
                outcome = self._outcomes.get(block=block and handled == 0, timeout=timeout if block else None)
            except Empty:
                return handled
            self._pending -= 1
            handled += 1
            try:
                outcome.on_done(outcome)
            except Exception:
                logger.exception("Error in background task callback")

    def wait_idle(self, timeout: float = 5.0) -> None:
        """Drain until nothing is pending; used at shutdown and in tests."""
        while self._pending > 0:
            if self.drain(timeout=timeout) == 0:
                logger.warning("Timed out waiting for %d background task(s)", self._pending)
                return

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with ``wait=False`` queued tasks are cancelled."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=not wait)


__all__ = ["BackgroundTaskRunner", "TaskOutcome"]
