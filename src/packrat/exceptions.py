"""Exceptions raised by packrat.

All library errors derive from PackratError so callers can catch the whole
family at once. The storage errors carry the entity key and kind they concern.
"""

from __future__ import annotations

from pathlib import Path


class PackratError(Exception):
    """Base class for all packrat errors."""


class RecordStorageError(PackratError):
    """Base class for errors raised by a record storage backend.

    Attributes:
        kind: Name of the entity kind the record belongs to.
        key: Entity key of the record.
        path: File the backend tried to access, if it is file-based.
    """

    def __init__(self, message: str, *, kind: str, key: str, path: Path | None = None) -> None:
        """Initialize the error with the record it concerns."""
        super().__init__(message)
        self.kind = kind
        self.key = key
        self.path = path


class RecordNotFoundError(RecordStorageError):
    """No persisted record exists for the key.

    The inventory store treats this as first access and synthesizes a default record.
    """


class RecordDecodeError(RecordStorageError):
    """A persisted record exists but could not be decoded."""


class RecordSaveError(RecordStorageError):
    """A record could not be written to durable storage."""


class QuantityOverflowError(PackratError, ValueError):
    """Adding to a stack would exceed the configured maximum quantity."""


class InvalidKeyError(PackratError, ValueError):
    """An entity key cannot be used to address a record."""


class UnknownKindError(PackratError, LookupError):
    """No entity kind is registered under the requested name."""
