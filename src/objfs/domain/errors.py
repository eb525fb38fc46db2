"""Domain-level exceptions for objfs."""


class DomainError(Exception):
    """Base class for all domain-level errors."""


class InvalidPathError(DomainError, ValueError):
    """Raised when a path cannot be mapped to a store key (e.g. not absolute)."""


class InodeFormatError(DomainError, ValueError):
    """Raised when stored bytes do not decode as a valid node record."""
