"""Positional stream adapters over single store objects.

The object store only offers ranged reads and positional writes against
whole objects. These adapters present one object as a sequential byte
stream so larger-than-memory transfers can be expressed as repeated
bounded calls against one key.

Exports
-------
- ObjectInputStream: read-only, forward-only stream over one object.
- ObjectOutputStream: write-only stream over one object.

Both are ``io.RawIOBase`` subclasses, so ``read``/``readall``/``readinto``
and ``write`` behave like any raw binary file. Neither adapter owns the
client; closing a stream releases nothing on the store side.

Cursor semantics
----------------
Every read and write happens at the adapter's own cursor, which only moves
forward. The input stream caches the object's size on the first
``available()`` call and never observes later growth.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from objfs.interfaces.object_store import NotFound, StoreIOError, UnsupportedOperation

if TYPE_CHECKING:
    from collections.abc import Buffer

    from objfs.interfaces.object_store import ObjectStoreClient

__all__ = ["ObjectInputStream", "ObjectOutputStream", "close_quietly"]

logger = logging.getLogger(__name__)


class ObjectInputStream(io.RawIOBase):
    """Read-only stream over the object stored at *key*.

    Args:
        client: Store client used for every read.
        key: Object key.
        start: Initial cursor position (object offset).
        size: Object size already known to the caller. When given, the
            stream trusts it and never stats the object itself.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        key: str,
        start: int = 0,
        *,
        size: int | None = None,
    ) -> None:
        super().__init__()
        if start < 0:
            raise ValueError("start must be non-negative")
        self._client = client
        self._key = key
        self._pos = start
        self._size = size

    def _ensure_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")

    @property
    def key(self) -> str:
        return self._key

    @property
    def pos(self) -> int:
        """Current object offset of the read cursor."""
        return self._pos

    def readable(self) -> bool:
        return True

    def available(self) -> int:
        """Return how many bytes remain between the cursor and the object end.

        The object is stat-ed at most once (never when a size was given at
        construction); its size is cached for the lifetime of the stream.

        Raises:
            StoreIOError: If the object cannot be stat-ed (missing included).
        """
        self._ensure_open()
        if self._size is None:
            try:
                self._size = self._client.stat(self._key).size
            except NotFound as e:
                raise StoreIOError(f"Object {self._key!r} is missing") from e
        return max(self._size - self._pos, 0)

    def readinto(self, buffer: Buffer) -> int:
        """Read at the cursor into *buffer* with one bounded store read.

        Returns:
            int: Bytes read; 0 at end of stream.
        """
        self._ensure_open()
        view = memoryview(buffer).cast("B")
        want = min(len(view), self.available())
        if want == 0:
            return 0
        data = self._client.read(self._key, self._pos, want)
        n = len(data)
        view[:n] = data
        self._pos += n
        return n

    def tell(self) -> int:
        self._ensure_open()
        return self._pos

    def seekable(self) -> bool:
        return False

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        raise UnsupportedOperation("ObjectInputStream is forward-only")

    def mark(self, readlimit: int = 0) -> None:  # pylint: disable=unused-argument
        """Marking is not supported."""
        raise UnsupportedOperation("Mark not supported")

    def reset(self) -> None:
        """Rewinding to a mark is not supported."""
        raise UnsupportedOperation("Mark not supported")


class ObjectOutputStream(io.RawIOBase):
    """Write-only stream over the object stored at *key*.

    Each ``write`` lands at the cursor and advances it by the number of
    bytes written. A partial buffer is written by slicing it, e.g.
    ``write(memoryview(buf)[off:off + n])``.
    """

    def __init__(self, client: ObjectStoreClient, key: str) -> None:
        super().__init__()
        self._client = client
        self._key = key
        self._pos = 0

    def _ensure_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")

    @property
    def key(self) -> str:
        return self._key

    @property
    def pos(self) -> int:
        """Current object offset of the write cursor."""
        return self._pos

    def writable(self) -> bool:
        return True

    def write(self, b: Buffer) -> int:
        self._ensure_open()
        data = bytes(b)
        if data:
            self._client.write(self._key, data, self._pos)
        self._pos += len(data)
        return len(data)

    def tell(self) -> int:
        self._ensure_open()
        return self._pos

    def seekable(self) -> bool:
        return False


def close_quietly(stream: io.IOBase) -> None:
    """Close *stream*, logging instead of raising if closing fails.

    Used on error paths so a failing close does not mask the original error.
    """
    try:
        stream.close()
    except Exception:  # pylint: disable=broad-except
        logger.warning("Ignoring error while closing %r", stream, exc_info=True)
