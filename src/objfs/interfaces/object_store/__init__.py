"""Object store port: client contract and error taxonomy."""

from .errors import (
    NotFound,
    ObjectStoreError,
    StoreConnectionError,
    StoreIOError,
    UnsupportedOperation,
)
from .object_store import ObjectStat, ObjectStoreClient

__all__ = [
    "NotFound",
    "ObjectStat",
    "ObjectStoreClient",
    "ObjectStoreError",
    "StoreConnectionError",
    "StoreIOError",
    "UnsupportedOperation",
]
