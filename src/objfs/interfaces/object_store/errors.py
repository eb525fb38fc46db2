"""Errors raised by object store clients."""

import io


class ObjectStoreError(Exception):
    """Base class for object store errors."""


class NotFound(ObjectStoreError):
    """Raised when a key is not present in the store."""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key!r}")
        self.key = key


class StoreConnectionError(ObjectStoreError, ConnectionError):
    """Raised when the backing store cannot be reached or opened."""


class StoreIOError(ObjectStoreError, OSError):
    """Raised when a store operation fails unexpectedly.

    The backend's own exception is chained as ``__cause__``.
    """


class UnsupportedOperation(ObjectStoreError, io.UnsupportedOperation):
    """Raised for stream operations the store adapters do not support."""
