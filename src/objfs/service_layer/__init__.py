"""Service layer: the filesystem store façade."""

from .filesystem_store import FileSystemStore

__all__ = ["FileSystemStore"]
