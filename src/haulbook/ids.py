"""
haulbook.ids
~~~~~~~~~~~~
Entry identifiers.

An id is the base-36 millisecond timestamp followed by a base-36 random
suffix, e.g. ``"m1x9k2p04f8a7d3qz1c"``. The timestamp part never goes
backwards within a process (a wall-clock step back reuses the last value),
and the 64-bit random part keeps ids unique even when many are generated in
the same millisecond.
"""

from __future__ import annotations

import secrets
import threading
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_RANDOM_BITS = 64
_RANDOM_WIDTH = 13   # base-36 digits needed for 64 bits

_lock = threading.Lock()
_last_ms = 0


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("base-36 encoding requires a non-negative integer")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def _timestamp_ms() -> int:
    global _last_ms
    now = time.time_ns() // 1_000_000
    with _lock:
        if now < _last_ms:
            now = _last_ms
        _last_ms = now
    return now


def generate_id() -> str:
    """Return a new, practically collision-free entry id."""
    suffix = to_base36(secrets.randbits(_RANDOM_BITS)).zfill(_RANDOM_WIDTH)
    return to_base36(_timestamp_ms()) + suffix


__all__ = ["generate_id", "to_base36"]
