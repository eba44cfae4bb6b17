"""packrat - per-entity inventory storage for games.

This package provides:
- Item stacks and entity records with stacking and removal rules
- A thread-safe inventory store with atomic get-or-create per key
- One human-readable JSON file per entity
- Pluggable entity kinds (players and NPCs built in)
- Events for observing inventory changes

Quick start:
    from packrat import ItemStack, create_manager

    manager = create_manager("data")
    manager.add_player_item("PlayerOne", "gold_pickaxe")

    merchant = manager.npcs.get_or_create("Merchant", "merchant")
    with merchant as record:
        record.add_item(ItemStack("healing_potion", 10))
    manager.npcs.save("Merchant")

Settings can be overridden in a settings.py module (or the module named by
PACKRAT_SETTINGS_MODULE), or programmatically:

    from packrat.conf import settings

    settings.configure(DATA_DIR="/var/lib/mygame", JSON_INDENT=4)
"""

__version__ = "0.1.0"

from packrat.conf import settings
from packrat.events import Event, EventBus
from packrat.exceptions import (
    InvalidKeyError,
    PackratError,
    QuantityOverflowError,
    RecordDecodeError,
    RecordNotFoundError,
    RecordSaveError,
    UnknownKindError,
)
from packrat.helpers import create_manager, setup_logging
from packrat.inventory import EntityRecord, InventoryStore, ItemStack, RecordHandle
from packrat.kinds import BaseEntityKind, KindLoader, KindRegistry, NPCKind, PlayerKind
from packrat.manager import GameDataManager
from packrat.storage import BaseRecordStorage, JsonFileStorage, MemoryRecordStorage

__all__ = [
    "BaseEntityKind",
    "BaseRecordStorage",
    "EntityRecord",
    "Event",
    "EventBus",
    "GameDataManager",
    "InvalidKeyError",
    "InventoryStore",
    "ItemStack",
    "JsonFileStorage",
    "KindLoader",
    "KindRegistry",
    "MemoryRecordStorage",
    "NPCKind",
    "PackratError",
    "PlayerKind",
    "QuantityOverflowError",
    "RecordDecodeError",
    "RecordHandle",
    "RecordNotFoundError",
    "RecordSaveError",
    "UnknownKindError",
    "__version__",
    "create_manager",
    "setup_logging",
]
