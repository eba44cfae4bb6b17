"""Game data manager: one inventory store per installed entity kind.

GameDataManager is the entry point most callers need. It discovers the installed
entity kinds, builds an InventoryStore for each over a shared storage backend,
and offers player/NPC shortcuts on top of them.

Unlike the stores, the manager never lets a corrupt record file take the caller
down: decode failures are logged and reported as None or False, and the record
stays unloaded so the file can be repaired and loaded again.

Example usage:
    manager = GameDataManager()

    manager.load_player("Terraria_Player")
    manager.add_player_item("Terraria_Player", "iron_sword")

    manager.load_npc("Merchant", npc_type="merchant")
    manager.add_npc_item("Merchant", "health_potion", quantity=5)

    manager.save_all_data()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from packrat.exceptions import RecordDecodeError, UnknownKindError
from packrat.inventory.record import ItemStack
from packrat.inventory.store import InventoryStore
from packrat.kinds.loader import KindLoader
from packrat.kinds.npcs import NPCKind
from packrat.kinds.players import PlayerKind
from packrat.storage.json_file import JsonFileStorage

if TYPE_CHECKING:
    from packrat.events.base import EventBus
    from packrat.inventory.handle import RecordHandle
    from packrat.storage.base import BaseRecordStorage

logger = logging.getLogger(__name__)


class GameDataManager:
    """Owns the inventory stores of every installed entity kind.

    Attributes:
        storage: Backend shared by all stores.
        event_bus: Optional bus handed to every store.
        stores: Inventory stores keyed by entity kind name.
    """

    def __init__(
        self,
        storage: BaseRecordStorage | None = None,
        event_bus: EventBus | None = None,
        kind_loader: KindLoader | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            storage: Record storage. Defaults to JsonFileStorage under settings.DATA_DIR.
            event_bus: Optional event bus for inventory events.
            kind_loader: Loader used to discover entity kinds. Defaults to one
                reading settings.INSTALLED_KINDS.
        """
        self.storage = storage if storage is not None else JsonFileStorage()
        self.event_bus = event_bus
        loader = kind_loader if kind_loader is not None else KindLoader()
        self.stores: dict[str, InventoryStore] = {
            name: InventoryStore(kind, self.storage, event_bus) for name, kind in loader.instantiate_all().items()
        }
        logger.debug("GameDataManager ready with stores: %s", ", ".join(self.stores))

    def get_store(self, name: str) -> InventoryStore:
        """Get the store for an entity kind.

        Raises:
            UnknownKindError: If the kind is not installed.
        """
        try:
            return self.stores[name]
        except KeyError:
            msg = f"No inventory store for entity kind {name!r}"
            raise UnknownKindError(msg) from None

    @property
    def players(self) -> InventoryStore:
        """Store holding player records."""
        return self.get_store(PlayerKind.name)

    @property
    def npcs(self) -> InventoryStore:
        """Store holding NPC records."""
        return self.get_store(NPCKind.name)

    def load(self, kind_name: str, key: str, kind: str | None = None) -> RecordHandle | None:
        """Load or create a record of any installed kind.

        Returns:
            The record's handle, or None if its file exists but could not be decoded.
        """
        try:
            return self.get_store(kind_name).get_or_create(key, kind)
        except RecordDecodeError as e:
            logger.error("Cannot load %s %r: %s", kind_name, key, e)  # noqa: TRY400
            return None

    def load_player(self, name: str) -> RecordHandle | None:
        """Load a player's record, creating an empty one for new players."""
        return self.load(PlayerKind.name, name)

    def load_npc(self, name: str, npc_type: str | None = None) -> RecordHandle | None:
        """Load an NPC's record, creating an empty one tagged npc_type if none exists."""
        return self.load(NPCKind.name, name, npc_type)

    def add_item(
        self,
        kind_name: str,
        key: str,
        item_id: str,
        quantity: int = 1,
        *,
        stackable: bool = True,
        kind: str | None = None,
    ) -> bool:
        """Add items to a record and save it.

        Returns:
            True if the items were added and saved. False if the record could not
            be decoded (nothing was added) or the save failed (the items are kept
            in memory).
        """
        try:
            return self.get_store(kind_name).update(key, ItemStack(item_id, quantity, stackable), kind)
        except RecordDecodeError as e:
            logger.error("Cannot add %s to %s %r: %s", item_id, kind_name, key, e)  # noqa: TRY400
            return False

    def remove_item(self, kind_name: str, key: str, item_id: str, quantity: int = 1) -> bool:
        """Remove items from a record and save it.

        Returns:
            True if the items were removed. False if the record could not be
            decoded or does not hold enough of the item.
        """
        try:
            return self.get_store(kind_name).remove(key, item_id, quantity)
        except RecordDecodeError as e:
            logger.error("Cannot remove %s from %s %r: %s", item_id, kind_name, key, e)  # noqa: TRY400
            return False

    def add_player_item(self, name: str, item_id: str, quantity: int = 1, *, stackable: bool = True) -> bool:
        """Give items to a player. See add_item()."""
        return self.add_item(PlayerKind.name, name, item_id, quantity, stackable=stackable)

    def add_npc_item(
        self,
        name: str,
        item_id: str,
        quantity: int = 1,
        *,
        stackable: bool = True,
        npc_type: str | None = None,
    ) -> bool:
        """Give items to an NPC. See add_item()."""
        return self.add_item(NPCKind.name, name, item_id, quantity, stackable=stackable, kind=npc_type)

    def remove_player_item(self, name: str, item_id: str, quantity: int = 1) -> bool:
        """Take items from a player. See remove_item()."""
        return self.remove_item(PlayerKind.name, name, item_id, quantity)

    def remove_npc_item(self, name: str, item_id: str, quantity: int = 1) -> bool:
        """Take items from an NPC. See remove_item()."""
        return self.remove_item(NPCKind.name, name, item_id, quantity)

    def save_all_data(self) -> bool:
        """Save every cached record of every kind.

        Returns:
            True if every record was written, False if any write failed.
        """
        failed = {name: store.save_all() for name, store in self.stores.items()}
        failed = {name: keys for name, keys in failed.items() if keys}
        if failed:
            for name, keys in failed.items():
                logger.warning("Could not save %s records: %s", name, ", ".join(keys))
            return False

        logger.info("All game data saved")
        return True
