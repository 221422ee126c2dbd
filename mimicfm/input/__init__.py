"""Input-layer public API for raw chunk reading and decoding.

Bindings from decoded input to event-bus topics live in ``mimicfm.input.bindings``
and are imported from there directly.
"""

from .keyboard import KeyboardDecoder, KeyEvent, decode_key
from .mouse import DoubleClickTracker, PointerDecoder, PointerEvent, decode_pointer, is_pointer_sequence
from .reader import read_chunk

__all__ = [
    "DoubleClickTracker",
    "KeyEvent",
    "KeyboardDecoder",
    "PointerDecoder",
    "PointerEvent",
    "decode_key",
    "decode_pointer",
    "is_pointer_sequence",
    "read_chunk",
]
