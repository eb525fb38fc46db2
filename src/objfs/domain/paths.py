"""Path ↔ store-key mapping.

Namespace entries are addressed by canonical absolute POSIX paths. The
canonical string form of a path is used verbatim as the store key of its
node record, so ``/a/b`` lives under key ``"/a/b"`` and the root under
``"/"``.

Exports
-------
- PATH_SEPARATOR, ROOT, ROOT_KEY: constants.
- PathLike: accepted path input type (``str | PurePosixPath``).
- to_path: canonicalize a ``PathLike`` into a ``PurePosixPath``.
- path_to_key / key_to_path: two-way mapping between paths and keys.
- is_root_key: root check that also accepts the empty key.
- sub_path_prefix: key prefix under which every descendant of a path lives.

Ordering of paths is ``PurePosixPath`` ordering (component-wise), which
sorts a parent before its descendants.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TypeAlias

from .errors import InvalidPathError

PATH_SEPARATOR = "/"
ROOT_KEY = PATH_SEPARATOR
ROOT = PurePosixPath(PATH_SEPARATOR)

PathLike: TypeAlias = str | PurePosixPath


def to_path(path: PathLike) -> PurePosixPath:
    """Return the canonical ``PurePosixPath`` for *path*.

    Duplicate separators and trailing separators are collapsed. POSIX allows
    a leading ``//`` to mean something implementation-defined, and
    ``PurePosixPath`` preserves it; objfs treats it as a plain root.

    Args:
        path: A string or ``PurePosixPath``.

    Returns:
        PurePosixPath: The canonical path (not necessarily absolute).
    """
    p = PurePosixPath(path)
    if str(p).startswith("//"):
        p = PurePosixPath(PATH_SEPARATOR, *p.parts[1:])
    return p


def path_to_key(path: PathLike) -> str:
    """Map an absolute path to its store key.

    Args:
        path: Absolute path of a namespace entry.

    Returns:
        str: The canonical absolute path string.

    Raises:
        InvalidPathError: If *path* is not absolute.
    """
    p = to_path(path)
    if not p.is_absolute():
        raise InvalidPathError(f"Path must be absolute: {str(path)!r}")
    return str(p)


def key_to_path(key: str) -> PurePosixPath:
    """Map a node record's store key back to its path."""
    if is_root_key(key):
        return ROOT
    return to_path(key)


def is_root_key(key: str) -> bool:
    """Return True for the root key (``"/"``) or the empty key."""
    return key in ("", ROOT_KEY)


def sub_path_prefix(key: str) -> str:
    """Return the key prefix shared by every descendant of *key*.

    The separator is appended unless the key already ends with it, so the
    root key ``"/"`` yields ``"/"`` and ``"/a"`` yields ``"/a/"``.
    """
    return key if key.endswith(PATH_SEPARATOR) else key + PATH_SEPARATOR
