"""Block id generators for objfs."""

import random
import threading

from objfs.domain.inode import INT64_MAX, INT64_MIN
from objfs.interfaces.id_generator import BlockIdGenerator

# pylint: disable=too-few-public-methods


class RandomBlockIdGenerator(BlockIdGenerator):
    """Uniformly random signed 64-bit ids.

    Uses a ``random.SystemRandom`` by default so ids are not predictable
    across processes. Pass a seeded ``random.Random`` for reproducible runs.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.SystemRandom()
        self._lock = threading.Lock()

    def new_id(self) -> int:
        """Draw a new id in ``[-2**63, 2**63 - 1]``."""
        with self._lock:
            bits = self._rng.getrandbits(64)
        return bits - 2**64 if bits > INT64_MAX else bits


class SequentialBlockIdGenerator(BlockIdGenerator):
    """A simple generator that produces sequential ids.

    Note:
        Not suitable for production use; primarily for testing and demos.
    """

    def __init__(self, start: int = 1) -> None:
        if not INT64_MIN <= start <= INT64_MAX:
            raise ValueError(f"start out of signed 64-bit range: {start}")
        self._next = start
        self._lock = threading.Lock()

    def new_id(self) -> int:
        """Return the next id in sequence."""
        with self._lock:
            value = self._next
            self._next += 1
        return value
