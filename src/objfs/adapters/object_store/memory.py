"""In-memory object store client.

Objects live in a ``dict[str, bytearray]`` guarded by a reentrant lock, so
each primitive call is atomic with respect to the others. Nothing survives
the process; use it for tests, examples, and scratch namespaces.

Typical usage
-------------
    client = MemoryObjectStore()
    client.write_full("/a", b"hello")
    client.read("/a", 1, 3)  # b"ell"
    client.stat("/a")        # ObjectStat(key="/a", size=5)
"""

from __future__ import annotations

import threading

from objfs.interfaces.object_store import NotFound, ObjectStat, ObjectStoreClient

__all__ = ["MemoryObjectStore"]


class MemoryObjectStore(ObjectStoreClient):
    """Object store client backed by an in-memory dict.

    Thread-safety
    -------------
    All reads and mutations take the same ``RLock``. ``list_keys()`` returns
    a snapshot copy, so callers may mutate the store while iterating.
    """

    def __init__(self) -> None:
        self._objects: dict[str, bytearray] = {}
        self._lock = threading.RLock()

    def stat(self, key: str) -> ObjectStat:
        with self._lock:
            try:
                return ObjectStat(key, len(self._objects[key]))
            except KeyError as e:
                raise NotFound(key) from e

    def read(self, key: str, offset: int, length: int) -> bytes:
        if offset < 0 or length < 0:
            raise ValueError("offset and length must be non-negative")
        with self._lock:
            try:
                obj = self._objects[key]
            except KeyError as e:
                raise NotFound(key) from e
            return bytes(obj[offset : offset + length])

    def write(self, key: str, data: bytes, offset: int = 0) -> None:
        if offset < 0:
            raise ValueError("offset must be non-negative")
        with self._lock:
            obj = self._objects.setdefault(key, bytearray())
            if offset > len(obj):
                obj.extend(bytes(offset - len(obj)))
            obj[offset : offset + len(data)] = data

    def write_full(self, key: str, data: bytes) -> None:
        with self._lock:
            self._objects[key] = bytearray(data)

    def remove(self, key: str) -> None:
        with self._lock:
            try:
                del self._objects[key]
            except KeyError as e:
                raise NotFound(key) from e

    def list_keys(self) -> list[str]:
        with self._lock:
            return list(self._objects)

    def version(self) -> str:
        return "memory"
