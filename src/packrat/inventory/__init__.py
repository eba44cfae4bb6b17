"""Inventory records and the store that caches them.

This package provides:
- ItemStack / EntityRecord: The persisted data and its merge/decrement rules
- RecordHandle: Lock-guarded access to the one cached record for a key
- InventoryStore: Concurrent get-or-create cache with persistence
- Events: Events published as records are created, loaded, changed and saved
"""

from packrat.inventory.record import EntityRecord, ItemStack
from packrat.inventory.handle import RecordHandle
from packrat.inventory.events import (
    ItemAddedEvent,
    ItemRemovedEvent,
    RecordCreatedEvent,
    RecordLoadedEvent,
    RecordSaveFailedEvent,
)
from packrat.inventory.store import InventoryStore

__all__ = [
    "EntityRecord",
    "InventoryStore",
    "ItemAddedEvent",
    "ItemRemovedEvent",
    "ItemStack",
    "RecordCreatedEvent",
    "RecordHandle",
    "RecordLoadedEvent",
    "RecordSaveFailedEvent",
]
