"""In-memory storage, for tests and throwaway sessions."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from packrat.exceptions import RecordDecodeError, RecordNotFoundError
from packrat.inventory.record import EntityRecord
from packrat.kinds.base import validate_key
from packrat.storage.base import BaseRecordStorage

if TYPE_CHECKING:
    from packrat.kinds.base import BaseEntityKind


class MemoryRecordStorage(BaseRecordStorage):
    """Keeps serialized records in a dictionary.

    Records are stored in their dictionary form, so what load() returns is always
    detached from what was saved, exactly as with file storage.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self.records: dict[tuple[str, str], dict[str, Any]] = {}
        self._lock = threading.Lock()

    def load(self, kind: BaseEntityKind, key: str) -> EntityRecord:
        """Decode the stored dictionary for a key."""
        validate_key(key)
        with self._lock:
            data = self.records.get((kind.name, key))
        if data is None:
            msg = f"No {kind.name} record for {key!r}"
            raise RecordNotFoundError(msg, kind=kind.name, key=key)
        try:
            return EntityRecord.from_dict(data, default_kind=kind.default_kind)
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Invalid {kind.name} record for {key!r}: {e}"
            raise RecordDecodeError(msg, kind=kind.name, key=key) from e

    def save(self, kind: BaseEntityKind, record: EntityRecord) -> None:
        """Store the dictionary form of a record."""
        data = record.to_dict()
        with self._lock:
            self.records[(kind.name, validate_key(record.key))] = data
