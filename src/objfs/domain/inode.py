"""Node records (INodes) and block references, plus their binary codec.

An ``INode`` describes one namespace entry: either a directory marker or a
file whose content is an ordered list of ``Block`` references. Each block
is stored as its own object under ``block_<id>``.

Binary layout (big-endian)::

    u16 length + UTF-8   format name      "fs-version"
    u16 length + UTF-8   format version   "1"
    u8                   file type        0 = DIRECTORY, 1 = FILE
    -- FILE only --
    i32                  block count
    i64, i64             (id, length) per block

Decoding is strict: a missing or mismatched header, an unknown file type,
truncated input, negative counts or lengths, and trailing bytes all raise
``InodeFormatError``. This module performs no I/O.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from .errors import InodeFormatError

FORMAT_NAME = "fs-version"
FORMAT_VERSION = "1"
BLOCK_KEY_PREFIX = "block_"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_U16 = struct.Struct(">H")
_U8 = struct.Struct(">B")
_I32 = struct.Struct(">i")
_BLOCK = struct.Struct(">qq")


class FileType(IntEnum):
    """Kind of namespace entry; the value is the on-disk tag."""

    DIRECTORY = 0
    FILE = 1


@dataclass(frozen=True)
class Block:
    """Reference to one independently stored chunk of file content.

    Attributes:
        id: Signed 64-bit identifier, randomly allocated.
        length: Payload size in bytes.
    """

    id: int
    length: int

    def __post_init__(self) -> None:
        if not INT64_MIN <= self.id <= INT64_MAX:
            raise ValueError(f"Block id out of signed 64-bit range: {self.id}")
        if not 0 <= self.length <= INT64_MAX:
            raise ValueError(f"Block length out of range: {self.length}")

    @property
    def key(self) -> str:
        """Store key holding this block's payload."""
        return block_key(self.id)


def block_key(block_id: int) -> str:
    """Return the store key for the block with *block_id*."""
    return f"{BLOCK_KEY_PREFIX}{block_id}"


def is_block_key(key: str) -> bool:
    """Return True if *key* addresses a block payload rather than a node."""
    return key.startswith(BLOCK_KEY_PREFIX)


@dataclass(frozen=True)
class INode:
    """Node record for one namespace entry.

    Attributes:
        file_type: Directory or file.
        blocks: Ordered block references. Always empty for directories;
            may be empty for a zero-length file.
    """

    file_type: FileType
    blocks: tuple[Block, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "file_type", FileType(self.file_type))
        object.__setattr__(self, "blocks", tuple(self.blocks))
        if self.file_type is FileType.DIRECTORY and self.blocks:
            raise ValueError("A directory INode cannot reference blocks")

    @classmethod
    def directory(cls) -> INode:
        """Return a directory record."""
        return cls(FileType.DIRECTORY)

    @classmethod
    def file(cls, blocks: Iterable[Block] = ()) -> INode:
        """Return a file record referencing *blocks* in order."""
        return cls(FileType.FILE, tuple(blocks))

    @property
    def is_directory(self) -> bool:
        return self.file_type is FileType.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.file_type is FileType.FILE

    @property
    def length(self) -> int:
        """Total content length (sum of block lengths)."""
        return sum(b.length for b in self.blocks)

    def serialize(self) -> bytes:
        """Encode this record into its binary layout."""
        out = bytearray()
        _write_utf(out, FORMAT_NAME)
        _write_utf(out, FORMAT_VERSION)
        out += _U8.pack(self.file_type)
        if self.is_file:
            out += _I32.pack(len(self.blocks))
            for block in self.blocks:
                out += _BLOCK.pack(block.id, block.length)
        return bytes(out)

    @classmethod
    def deserialize(cls, data: bytes | bytearray | memoryview) -> INode:
        """Decode a record previously produced by :meth:`serialize`.

        Args:
            data: Raw bytes as read from the store.

        Returns:
            INode: The decoded record.

        Raises:
            InodeFormatError: If the bytes are not a valid record.
        """
        reader = _Reader(bytes(data))
        name = reader.read_utf()
        version = reader.read_utf()
        if name != FORMAT_NAME or version != FORMAT_VERSION:
            raise InodeFormatError(
                f"Unknown record format {name!r} version {version!r}; "
                f"expected {FORMAT_NAME!r} version {FORMAT_VERSION!r}"
            )

        (tag,) = reader.unpack(_U8)
        try:
            file_type = FileType(tag)
        except ValueError as e:
            raise InodeFormatError(f"Unknown file type tag: {tag}") from e

        blocks: list[Block] = []
        if file_type is FileType.FILE:
            (count,) = reader.unpack(_I32)
            if count < 0:
                raise InodeFormatError(f"Negative block count: {count}")
            for _ in range(count):
                block_id, length = reader.unpack(_BLOCK)
                if length < 0:
                    raise InodeFormatError(
                        f"Negative length {length} for block {block_id}"
                    )
                blocks.append(Block(block_id, length))

        if reader.remaining:
            raise InodeFormatError(f"{reader.remaining} trailing byte(s) after record")
        return cls(file_type, tuple(blocks))


#: Shared directory record (records are immutable).
DIRECTORY_INODE = INode.directory()


def _write_utf(out: bytearray, value: str) -> None:
    encoded = value.encode("utf-8")
    out += _U16.pack(len(encoded))
    out += encoded


class _Reader:
    """Bounds-checked cursor over an immutable byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def take(self, n: int) -> bytes:
        if n > self.remaining:
            raise InodeFormatError(
                f"Truncated record: needed {n} byte(s) at offset {self._pos}, "
                f"only {self.remaining} left"
            )
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def unpack(self, fmt: struct.Struct) -> tuple:
        return fmt.unpack(self.take(fmt.size))

    def read_utf(self) -> str:
        (n,) = self.unpack(_U16)
        try:
            return self.take(n).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InodeFormatError("Record header is not valid UTF-8") from e
