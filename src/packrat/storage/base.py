"""Base class for record storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from packrat.inventory.record import EntityRecord
    from packrat.kinds.base import BaseEntityKind


class BaseRecordStorage(ABC):
    """Abstract base class for durable record storage.

    A storage backend persists one EntityRecord per (entity kind, key) pair. It
    holds no cache and no locks of its own; the InventoryStore decides when
    records are read and written and serializes writes of the same key.

    Example:
        storage = JsonFileStorage(Path("data"))
        record = storage.load(PlayerKind(), "PlayerOne")
        storage.save(PlayerKind(), record)
    """

    @abstractmethod
    def load(self, kind: BaseEntityKind, key: str) -> EntityRecord:
        """Read the persisted record for a key.

        Args:
            kind: Entity kind the record belongs to.
            key: Entity key.

        Returns:
            A freshly decoded record, not shared with any other caller.

        Raises:
            RecordNotFoundError: If nothing is persisted for the key.
            RecordDecodeError: If a persisted record exists but cannot be decoded.
        """

    @abstractmethod
    def save(self, kind: BaseEntityKind, record: EntityRecord) -> None:
        """Write a record, replacing whatever was persisted for its key.

        Args:
            kind: Entity kind the record belongs to.
            record: The record to write. Backends must not keep a reference to it.

        Raises:
            RecordSaveError: If the record could not be written.
        """
