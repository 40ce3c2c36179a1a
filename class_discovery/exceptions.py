"""Exceptions raised by class discovery."""


class DiscoveryError(Exception):
    """Base class for all class discovery errors."""

    pass


class TypeNotLoadableError(DiscoveryError, ImportError):
    """Raised when a resolved name does not point at an importable module or class.

    Discovery treats this as a skip rather than a failure: source trees
    legitimately contain scripts and partial modules that cannot be imported
    on their own.
    """

    @classmethod
    def from_name(cls, name: str, reason: str | None = None) -> "TypeNotLoadableError":
        if reason:
            return cls(f"Cannot load {name}: {reason}", name=name)
        return cls(f"Cannot load {name}", name=name)


class InvalidSearchPathError(DiscoveryError, ValueError):
    @classmethod
    def from_value(cls, value: object) -> "InvalidSearchPathError":
        return cls(f"Search path must be a string or path-like object, got {type(value).__name__}")
