"""CLI helpers for objfs.

Utilities used by the command-line interface: URL sanitization for safe
display, message emitters that write to stderr with emoji→ASCII fallbacks,
and the ``-L NAME=LEVEL`` option parser.
"""

from .messages import error, success, warn
from .store_url import sanitize_url

__all__ = ["error", "sanitize_url", "success", "warn"]
