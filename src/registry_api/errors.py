"""Typed failures raised by the registry core."""

from __future__ import annotations


class RegistryError(Exception):
    """Base error for registry operations."""


class InvalidArgumentError(RegistryError):
    """Raised when caller input (limit, cursor, timestamp, descriptor) is malformed."""


class InvalidCursorError(InvalidArgumentError):
    """Raised when a pagination cursor does not decode to a row position."""


class NotFoundError(RegistryError):
    """Raised when no server version matches a lookup."""


class ConstraintError(RegistryError):
    """Raised when a write would duplicate an existing (name, version) pair."""


__all__ = [
    "RegistryError",
    "InvalidArgumentError",
    "InvalidCursorError",
    "NotFoundError",
    "ConstraintError",
]
