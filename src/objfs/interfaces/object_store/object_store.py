"""Object store client contract.

The object store is a flat, key-addressed byte store. objfs needs only a
handful of primitives from it: stat, ranged read, positional write, whole
object replace, remove, and a flat key listing. Everything hierarchical is
built on top of these by the service layer.

Exports
-------
- ObjectStat: Immutable metadata for one object (key + size).
- ObjectStoreClient: Abstract, connection-scoped client.

Design
------
- **Synchronous**: every call blocks for one round trip; no retries.
- **Errors**: missing keys raise ``NotFound``; backend faults are wrapped in
  ``StoreIOError`` with the original exception chained.
- **Lifecycle**: a client owns its connection; ``close()`` is idempotent and
  clients are context managers.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from types import TracebackType

from .errors import NotFound

__all__ = ["ObjectStat", "ObjectStoreClient"]


@dataclass(frozen=True)
class ObjectStat:
    """Metadata about one stored object.

    Attributes:
        key: Object key.
        size: Object size in bytes.
    """

    key: str
    size: int


class ObjectStoreClient(abc.ABC):
    """Abstract client for a flat key/value object store."""

    @abc.abstractmethod
    def stat(self, key: str) -> ObjectStat:
        """Return metadata for *key*.

        Raises:
            NotFound: If *key* does not exist.
        """

    @abc.abstractmethod
    def read(self, key: str, offset: int, length: int) -> bytes:
        """Read up to *length* bytes of *key* starting at *offset*.

        Returns fewer bytes (possibly none) when the range runs past the
        end of the object.

        Raises:
            NotFound: If *key* does not exist.
        """

    @abc.abstractmethod
    def write(self, key: str, data: bytes, offset: int = 0) -> None:
        """Write *data* into *key* at *offset*.

        Creates the object if needed. Bytes outside the written range are
        kept; a gap between the current end and *offset* is zero-filled.
        """

    @abc.abstractmethod
    def write_full(self, key: str, data: bytes) -> None:
        """Replace the whole content of *key* with *data*."""

    @abc.abstractmethod
    def remove(self, key: str) -> None:
        """Remove *key*.

        Raises:
            NotFound: If *key* does not exist.
        """

    @abc.abstractmethod
    def list_keys(self) -> list[str]:
        """Return every key in the store, in implementation order."""

    @abc.abstractmethod
    def version(self) -> str:
        """Return a human-readable backend name and version."""

    def close(self) -> None:  # noqa: B027
        """Release the connection. Safe to call more than once."""

    # ---- Convenience -------------------------------------------------------

    def exists(self, key: str) -> bool:
        """Return True if *key* exists."""
        try:
            self.stat(key)
        except NotFound:
            return False
        return True

    def __enter__(self) -> ObjectStoreClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
