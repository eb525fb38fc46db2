"""Build object store clients and filesystem stores from URLs.

Supported URLs:
    - ``memory://``                 in-process ``MemoryObjectStore``
    - ``file:///abs/dir``           ``LocalObjectStore`` rooted at ``/abs/dir``
    - any SQLAlchemy database URL   ``SqlAlchemyObjectStore`` (migrated DB)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlsplit

from sqlalchemy.exc import ArgumentError, NoSuchModuleError

from objfs import config
from objfs.adapters.db.engine import make_engine
from objfs.adapters.object_store import (
    LocalObjectStore,
    MemoryObjectStore,
    SqlAlchemyObjectStore,
)
from objfs.interfaces.object_store import StoreConnectionError
from objfs.service_layer import FileSystemStore

if TYPE_CHECKING:
    from objfs.interfaces.id_generator import BlockIdGenerator
    from objfs.interfaces.object_store import ObjectStoreClient

logger = logging.getLogger(__name__)


def build_object_store(url: str) -> ObjectStoreClient:
    """Open the object store client addressed by *url*.

    Raises:
        StoreConnectionError: If the URL is malformed, names an unknown
            backend, or the backend cannot be opened.
    """
    parts = urlsplit(url)
    match parts.scheme.lower():
        case "memory":
            logger.debug("Using in-memory object store")
            return MemoryObjectStore()
        case "file":
            if parts.netloc not in ("", "localhost") or not parts.path:
                raise StoreConnectionError(
                    f"file URLs must look like file:///absolute/dir, got {url!r}"
                )
            logger.debug("Using local object store at %s", unquote(parts.path))
            return LocalObjectStore(unquote(parts.path))
        case _:
            try:
                engine = make_engine(url)
            except (ArgumentError, NoSuchModuleError, ImportError) as e:
                raise StoreConnectionError(f"Unsupported store URL: {url!r}") from e
            logger.debug("Using SQL object store (%s)", engine.dialect.name)
            try:
                return SqlAlchemyObjectStore(engine, dispose_on_close=True)
            except StoreConnectionError:
                engine.dispose()
                raise


def build_filesystem_store(
    client: ObjectStoreClient, id_generator: BlockIdGenerator | None = None
) -> FileSystemStore:
    """Wrap *client* in a ``FileSystemStore``."""
    return FileSystemStore(client, id_generator=id_generator)


def bootstrap(
    url: str | None = None, *, id_generator: BlockIdGenerator | None = None
) -> FileSystemStore:
    """Connect to the store at *url* (default: ``OBJFS_STORE_URL``).

    Raises:
        StoreUrlNotSetError: If no URL is given and the env var is unset.
        StoreConnectionError: If the store cannot be opened.
    """
    client = build_object_store(url or config.get_store_url())
    return build_filesystem_store(client, id_generator)
