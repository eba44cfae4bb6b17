"""Base class for entity kinds.

An entity kind describes one category of entity whose inventories share a store:
players, NPCs, or anything a project registers on top. It supplies the few things
that differ between categories, so a single InventoryStore implementation serves
them all:

- the directory its records live in,
- the type tag a freshly created record receives,
- how a key maps to a record filename.

Example:
    Registering a kind for treasure chests::

        from packrat.kinds.base import BaseEntityKind
        from packrat.kinds.registry import KindRegistry

        @KindRegistry.register
        class ChestKind(BaseEntityKind):
            name = "chest"

            @property
            def directory(self) -> str:
                return "chests"

            @property
            def default_kind(self) -> str:
                return "chest"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from packrat.conf import settings
from packrat.exceptions import InvalidKeyError
from packrat.inventory.record import EntityRecord

_FORBIDDEN_KEY_CHARS = ("/", "\\", "\0")


def validate_key(key: str) -> str:
    """Check that a key can address a record file.

    Returns:
        The key, unchanged.

    Raises:
        InvalidKeyError: If the key is empty, is "." or "..", or contains a path
            separator or NUL character.
    """
    if not isinstance(key, str) or not key:
        msg = f"Entity key must be a non-empty string, got {key!r}"
        raise InvalidKeyError(msg)
    if key in {".", ".."} or any(char in key for char in _FORBIDDEN_KEY_CHARS):
        msg = f"Entity key {key!r} cannot be used as a record filename"
        raise InvalidKeyError(msg)
    return key


class BaseEntityKind(ABC):
    """Abstract base class for entity kinds.

    Class Attributes:
        name: Unique identifier for this kind (e.g., "player", "npc").
    """

    name: ClassVar[str]

    @property
    @abstractmethod
    def directory(self) -> str:
        """Directory, relative to the data root, that holds this kind's records."""

    @property
    @abstractmethod
    def default_kind(self) -> str:
        """Type tag given to a new record when the caller does not name one."""

    def filename(self, key: str) -> str:
        """Return the record filename for a key.

        Raises:
            InvalidKeyError: If the key cannot be used as a filename.
        """
        return f"{validate_key(key)}{settings.RECORD_FILE_EXTENSION}"

    def create_default(self, key: str, kind: str | None = None) -> EntityRecord:
        """Build the empty record used on first access of a key.

        Args:
            key: Entity key.
            kind: Type tag for the record. Falls back to default_kind.
        """
        return EntityRecord(key=validate_key(key), kind=kind or self.default_kind, items=[])

    def __repr__(self) -> str:
        """Return a short description of the kind."""
        return f"<{type(self).__name__} name={self.name!r} directory={self.directory!r}>"
