"""objfs: a POSIX-like namespace over a flat key/value object store.

objfs maps directories, files, and file content onto the objects of a store
that only understands whole-object get/put/stat/remove/list primitives.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
