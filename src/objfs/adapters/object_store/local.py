"""Directory-backed object store client.

Each object is one regular file directly under the root directory. Keys
are percent-encoded (``urllib.parse.quote`` with no safe characters) and
prefixed with ``k`` so that any key, including ``"/"`` and the empty
string, maps to a single valid file name. Whole-object replacement goes
through a temporary file and ``os.replace`` so readers never see a
half-written object.
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path
from urllib.parse import quote, unquote

from objfs.interfaces.object_store import (
    NotFound,
    ObjectStat,
    ObjectStoreClient,
    StoreConnectionError,
    StoreIOError,
)

__all__ = ["LocalObjectStore"]

_NAME_PREFIX = "k"
_TMP_PREFIX = "tmp-"


class LocalObjectStore(ObjectStoreClient):
    """Object store client that keeps one file per key under *root*."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = Path(root)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreConnectionError(
                f"Cannot open object directory {self._root}"
            ) from e
        self._lock = threading.RLock()

    @property
    def root(self) -> Path:
        """Directory holding the object files."""
        return self._root

    def stat(self, key: str) -> ObjectStat:
        path = self._path_for(key)
        try:
            return ObjectStat(key, path.stat().st_size)
        except FileNotFoundError as e:
            raise NotFound(key) from e
        except OSError as e:
            raise StoreIOError(f"stat failed for {key!r}") from e

    def read(self, key: str, offset: int, length: int) -> bytes:
        if offset < 0 or length < 0:
            raise ValueError("offset and length must be non-negative")
        path = self._path_for(key)
        with self._lock:
            try:
                with path.open("rb") as fp:
                    fp.seek(offset)
                    return fp.read(length)
            except FileNotFoundError as e:
                raise NotFound(key) from e
            except OSError as e:
                raise StoreIOError(f"read failed for {key!r}") from e

    def write(self, key: str, data: bytes, offset: int = 0) -> None:
        if offset < 0:
            raise ValueError("offset must be non-negative")
        path = self._path_for(key)
        with self._lock:
            try:
                fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
                with os.fdopen(fd, "r+b") as fp:
                    fp.seek(offset)
                    fp.write(data)
            except OSError as e:
                raise StoreIOError(f"write failed for {key!r}") from e

    def write_full(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        with self._lock:
            try:
                with tempfile.NamedTemporaryFile(
                    dir=self._root, prefix=_TMP_PREFIX, delete=False
                ) as tmp:
                    tmp.write(data)
                os.replace(tmp.name, path)
            except OSError as e:
                raise StoreIOError(f"write_full failed for {key!r}") from e

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError as e:
                raise NotFound(key) from e
            except OSError as e:
                raise StoreIOError(f"remove failed for {key!r}") from e

    def list_keys(self) -> list[str]:
        try:
            names = os.listdir(self._root)
        except OSError as e:
            raise StoreIOError(f"cannot list {self._root}") from e
        return [
            unquote(name[len(_NAME_PREFIX) :])
            for name in names
            if name.startswith(_NAME_PREFIX)
        ]

    def version(self) -> str:
        return f"local directory {self._root}"

    def _path_for(self, key: str) -> Path:
        return self._root / (_NAME_PREFIX + quote(key, safe=""))
