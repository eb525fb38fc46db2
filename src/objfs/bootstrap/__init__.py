"""Bootstrap (composition root) for objfs.

Turns a store URL into a connected ``FileSystemStore``: picks the object
store adapter for the URL scheme, opens it, and wires the block id
generator.

Import rules:
- Entry points import *this* package (not adapters/service_layer directly).
- Inner layers must not import `objfs.bootstrap`.
"""

from .bootstrap import bootstrap, build_filesystem_store, build_object_store

__all__ = ["bootstrap", "build_filesystem_store", "build_object_store"]
