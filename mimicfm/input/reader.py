"""Low-level stdin reading for the dispatcher loop.

Reads whatever bytes are ready as one chunk so that an escape sequence sent
by the terminal in a single write arrives as a single decoder input.
"""

from __future__ import annotations

import os
import select

READ_CHUNK_SIZE = 1024


def read_chunk(fd: int, timeout_ms: int | None = None) -> bytes | None:
    """Return the next ready input chunk.

    ``None`` means nothing arrived within ``timeout_ms``; ``b""`` means the
    input reached end of file.
    """
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
    return os.read(fd, READ_CHUNK_SIZE)
