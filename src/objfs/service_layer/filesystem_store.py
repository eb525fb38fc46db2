"""Filesystem store: a hierarchical namespace over a flat object store.

``FileSystemStore`` is the single façade that turns namespace operations
into object store calls.

Layout in the store
-------------------
- Node records live under their canonical absolute path (``/a/b``); the
  root lives under ``/``.
- Block payloads live under ``block_<id>`` where ``id`` is a random signed
  64-bit integer.

Behavior worth knowing
----------------------
- **Root auto-vivification**: ``path_exists(ROOT)`` and
  ``retrieve_node(ROOT)`` persist a directory record for the root the first
  time they find it missing, so the namespace always has a root.
- **No cascade**: deleting a node never deletes its blocks. Callers delete
  blocks explicitly with ``delete_block``.
- **Listing is a scan**: the store has no hierarchy, so sub-path listing
  sorts the flat key list and takes the range of keys under ``path + "/"``.
  Cost is linear in the number of objects.
- **Concurrency**: only block allocation is serialized (per instance).
  Everything else is last-writer-wins with no snapshot isolation.
"""

from __future__ import annotations

import bisect
import io
import logging
import os
import threading
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, BinaryIO, TypeAlias

from objfs.adapters.id_generators import RandomBlockIdGenerator
from objfs.adapters.streams import ObjectInputStream, close_quietly
from objfs.domain.inode import DIRECTORY_INODE, Block, INode, block_key, is_block_key
from objfs.domain.paths import (
    ROOT,
    PathLike,
    is_root_key,
    key_to_path,
    path_to_key,
    sub_path_prefix,
)
from objfs.interfaces.object_store import NotFound, ObjectStoreError, StoreIOError

if TYPE_CHECKING:
    from types import TracebackType

    from objfs.interfaces.id_generator import BlockIdGenerator
    from objfs.interfaces.object_store import ObjectStoreClient

__all__ = ["FileSystemStore", "BlockSource", "COPY_CHUNK_SIZE"]

logger = logging.getLogger(__name__)

#: Accepted block payload sources: raw bytes, a binary stream, or a local file path.
BlockSource: TypeAlias = bytes | bytearray | memoryview | BinaryIO | str | os.PathLike

#: Bytes requested per read when draining a block payload source.
COPY_CHUNK_SIZE = 1024 * 1024

DUMP_HEADER = "objfs namespace:"


class FileSystemStore:
    """Namespace operations on top of an ``ObjectStoreClient``.

    Args:
        client: Connected store client. The store takes ownership and closes
            it in :meth:`close`.
        id_generator: Source of candidate block ids. Defaults to a
            ``RandomBlockIdGenerator``.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        *,
        id_generator: BlockIdGenerator | None = None,
    ) -> None:
        self._client = client
        self._id_generator = id_generator or RandomBlockIdGenerator()
        self._alloc_lock = threading.Lock()

    @property
    def client(self) -> ObjectStoreClient:
        return self._client

    # ---- Lifecycle ---------------------------------------------------------

    def version(self) -> str:
        """Return the backing store's version string."""
        return self._client.version()

    def close(self) -> None:
        """Disconnect from the backing store."""
        self._client.close()

    def __enter__(self) -> FileSystemStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ---- Nodes -------------------------------------------------------------

    def path_exists(self, path: PathLike) -> bool:
        """Return True if a node record exists at *path*.

        A missing root is created as a directory and reported as existing.

        Raises:
            InvalidPathError: If *path* is not absolute.
        """
        key = path_to_key(path)
        if self._client.exists(key):
            return True
        if is_root_key(key):
            self._vivify_root()
            return True
        return False

    def retrieve_node(self, path: PathLike) -> INode:
        """Fetch and decode the node record at *path*.

        A missing root is created as a directory and returned.

        Raises:
            InvalidPathError: If *path* is not absolute.
            NotFound: If no record exists at *path* (and it is not the root).
            InodeFormatError: If the stored bytes are not a valid record.
        """
        key = path_to_key(path)
        try:
            self._client.stat(key)
        except NotFound:
            if not is_root_key(key):
                raise
            return self._vivify_root()
        return self._read_inode(key)

    def store_node(self, path: PathLike, inode: INode) -> None:
        """Persist *inode* at *path*, replacing any existing record."""
        key = path_to_key(path)
        logger.debug("Storing %s node at %s", inode.file_type.name, key)
        self._client.write_full(key, inode.serialize())

    def delete_node(self, path: PathLike) -> None:
        """Remove the node record at *path*. Referenced blocks are kept.

        Raises:
            NotFound: If no record exists at *path*.
        """
        key = path_to_key(path)
        logger.debug("Deleting node %s", key)
        self._client.remove(key)

    # ---- Blocks ------------------------------------------------------------

    def block_exists(self, block: Block | int) -> bool:
        """Return True if a payload is stored for *block*."""
        return self._client.exists(_block_key(block))

    def retrieve_block(self, block: Block | int, byte_range_start: int = 0) -> bytes:
        """Return the payload of *block* from *byte_range_start* to its end.

        The read length is fixed by the object size seen when the read
        starts.

        Raises:
            NotFound: If the block is missing or its size is not greater
                than *byte_range_start*.
        """
        key = _block_key(block)
        size = self._client.stat(key).size
        if size <= byte_range_start:
            raise NotFound(key)

        stream = ObjectInputStream(
            self._client, key, start=byte_range_start, size=size
        )
        try:
            return stream.read(stream.available())
        finally:
            close_quietly(stream)

    def store_block(
        self, block: Block, source: BlockSource, length: int | None = None
    ) -> int:
        """Write at most *length* bytes from *source* as the payload of *block*.

        The source is drained in bounded chunks and the payload is stored
        with a single ``write_full``, so the block object is either fully
        replaced or left untouched. An empty source still creates an empty
        object.

        Args:
            block: Target block.
            source: Bytes, a readable binary stream, or a local file path.
            length: Maximum bytes to copy. Defaults to ``block.length``.

        Returns:
            int: Number of bytes written.
        """
        limit = block.length if length is None else length
        if limit < 0:
            raise ValueError("length must be non-negative")
        with _open_source(source) as reader:
            payload = _drain(reader, limit)
        self._client.write_full(block.key, payload)
        logger.debug("Stored %d byte(s) in %s", len(payload), block.key)
        return len(payload)

    def allocate_and_store_block(
        self, source: BlockSource, length: int | None = None
    ) -> Block:
        """Store *source* under a freshly allocated, unused block id.

        Candidate ids are drawn until one is not present in the store. The
        existence check and the store happen under a per-instance lock, so concurrent
        callers on the same instance never receive the same id.

        Args:
            source: Bytes, a readable binary stream, or a local file path.
            length: Maximum bytes to copy. Defaults to everything available.

        Returns:
            Block: The new block, with the length actually written.
        """
        with self._alloc_lock:
            block_id = self._id_generator.new_id()
            while self.block_exists(block_id):
                logger.debug("Block id %d is taken; drawing again", block_id)
                block_id = self._id_generator.new_id()

            with _open_source(source) as reader:
                payload = _drain(reader, length)
            self._client.write_full(block_key(block_id), payload)
        return Block(block_id, len(payload))

    def delete_block(self, block: Block | int) -> None:
        """Remove the payload of *block*.

        Raises:
            NotFound: If the block is missing.
        """
        key = _block_key(block)
        logger.debug("Deleting block %s", key)
        self._client.remove(key)

    # ---- Listing -----------------------------------------------------------

    def list_sub_paths(self, path: PathLike) -> list[PurePosixPath]:
        """Return every path stored strictly below *path*, sorted.

        Both immediate children and deeper descendants are included.
        """
        key = path_to_key(path)
        prefix = sub_path_prefix(key)
        keys = sorted(self._client.list_keys())

        found: set[PurePosixPath] = set()
        for candidate in keys[bisect.bisect_left(keys, prefix) :]:
            if not candidate.startswith(prefix):
                break
            found.add(key_to_path(candidate))
        found.discard(key_to_path(key))
        return sorted(found)

    def list_deep_sub_paths(self, path: PathLike) -> list[PurePosixPath]:
        """Alias of :meth:`list_sub_paths`; listing is always recursive."""
        return self.list_sub_paths(path)

    # ---- Maintenance -------------------------------------------------------

    def purge(self) -> None:
        """Remove every object in the store, nodes and blocks alike.

        Keeps going past individual failures; objects removed concurrently
        by someone else are ignored.

        Raises:
            StoreIOError: If any object could not be removed.
        """
        removed = 0
        failed: list[str] = []
        for key in self._client.list_keys():
            try:
                self._client.remove(key)
            except NotFound:
                continue
            except ObjectStoreError:
                logger.warning("Could not remove %s during purge", key, exc_info=True)
                failed.append(key)
            else:
                removed += 1
        logger.info("Purged %d object(s)", removed)
        if failed:
            raise StoreIOError(
                f"Purge left {len(failed)} object(s) behind: {', '.join(failed[:10])}"
            )

    def dump(self) -> str:
        """Return a human-readable report of every node in the namespace.

        One ``path:\\tTYPE`` line per node, followed for files by one
        ``\\tBlockId: <id> Length: <length>`` line per block. Block objects
        are not listed on their own.

        Raises:
            InodeFormatError: If any node record fails to decode.
        """
        node_keys = [k for k in self._client.list_keys() if not is_block_key(k)]
        lines = [DUMP_HEADER]
        for key in sorted(node_keys, key=key_to_path):
            inode = self._read_inode(key)
            lines.append(f"{key_to_path(key)}:\t{inode.file_type.name}")
            lines.extend(
                f"\tBlockId: {block.id} Length: {block.length}"
                for block in inode.blocks
            )
        return "\n".join(lines) + "\n"

    # ---- Internals ---------------------------------------------------------

    def _vivify_root(self) -> INode:
        logger.info("Root directory missing; creating it")
        self.store_node(ROOT, DIRECTORY_INODE)
        return DIRECTORY_INODE

    def _read_inode(self, key: str) -> INode:
        stream = ObjectInputStream(self._client, key)
        try:
            data = stream.readall()
        finally:
            close_quietly(stream)
        return INode.deserialize(data)


def _block_key(block: Block | int) -> str:
    return block.key if isinstance(block, Block) else block_key(block)


def _drain(reader: BinaryIO, limit: int | None) -> bytes:
    """Read up to *limit* bytes (everything when None) from *reader*."""
    payload = bytearray()
    while limit is None or len(payload) < limit:
        want = COPY_CHUNK_SIZE if limit is None else min(
            COPY_CHUNK_SIZE, limit - len(payload)
        )
        chunk = reader.read(want)
        if not chunk:
            break
        payload += chunk
    return bytes(payload)


def _open_source(source: BlockSource) -> BinaryIO:
    """Return a binary reader over *source*.

    Paths are opened (and closed by the caller's ``with``); bytes are wrapped
    in ``BytesIO``. Caller-provided streams are wrapped so that leaving the
    ``with`` block does not close them.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if isinstance(source, (str, os.PathLike)):
        return open(source, "rb")  # pylint: disable=consider-using-with
    return _Borrowed(source)


class _Borrowed(io.RawIOBase):
    """Read-through wrapper that leaves the wrapped stream open on close."""

    def __init__(self, inner: BinaryIO) -> None:
        super().__init__()
        self._inner = inner

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        return self._inner.read(size)

    def readinto(self, buffer) -> int:
        data = self._inner.read(len(memoryview(buffer)))
        memoryview(buffer)[: len(data)] = data
        return len(data)
