"""Inventory store: the concurrent cache of entity records for one entity kind.

The store maps entity keys to RecordHandle objects. A key moves through three
states: absent, loading (or creating), and cached. Cached is terminal; records
are never evicted.

Concurrency model:
- One coarse lock guards the key-to-handle mapping. It is held only for
  dictionary lookups and inserts, never across I/O.
- First access of a key happens under a per-key loading lock, so concurrent
  first accesses of the same key load it once while lookups of other keys
  proceed.
- Each handle owns the lock guarding its record's items, so updates to
  different entities never block each other.

At most one handle per key ever exists in the cache, and every caller of
get_or_create() for that key receives that same handle.

Error handling:
- A missing record file means first access; a default record is created.
- A record file that cannot be decoded raises RecordDecodeError. Nothing is
  cached and the file is left as it is.
- A failed save is logged and reported as False. The in-memory record keeps
  the mutation.
- Item events are published after the record has been written, so a
  subscriber that raises cannot leave a mutation unsaved.
"""

from __future__ import annotations

import logging
import threading
from functools import partial
from typing import TYPE_CHECKING

from packrat.exceptions import RecordDecodeError, RecordNotFoundError, RecordSaveError
from packrat.inventory.events import (
    ItemAddedEvent,
    ItemRemovedEvent,
    RecordCreatedEvent,
    RecordLoadedEvent,
    RecordSaveFailedEvent,
)
from packrat.inventory.handle import RecordHandle
from packrat.kinds.base import validate_key

if TYPE_CHECKING:
    from packrat.events.base import Event, EventBus
    from packrat.inventory.record import EntityRecord, ItemStack
    from packrat.kinds.base import BaseEntityKind
    from packrat.storage.base import BaseRecordStorage

logger = logging.getLogger(__name__)


class InventoryStore:
    """Cache of entity records for one entity kind, backed by durable storage.

    Attributes:
        entity_kind: Strategy describing the kind of entity stored here.
        storage: Backend records are loaded from and saved to.
        event_bus: Optional bus that receives inventory events.
    """

    def __init__(
        self,
        entity_kind: BaseEntityKind,
        storage: BaseRecordStorage,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize an empty store."""
        self.entity_kind = entity_kind
        self.storage = storage
        self.event_bus = event_bus
        self._lock = threading.Lock()
        self._handles: dict[str, RecordHandle] = {}
        self._loading: dict[str, threading.Lock] = {}

    @property
    def name(self) -> str:
        """Name of the entity kind this store serves."""
        return self.entity_kind.name

    def get_or_create(self, key: str, kind: str | None = None) -> RecordHandle:
        """Return the handle for a key, loading or creating the record on first access.

        Args:
            key: Entity key.
            kind: Type tag for the record if it has to be created. Ignored when the
                record is already cached or persisted; a record keeps the tag it was
                created with. Defaults to the entity kind's default tag.

        Returns:
            The single handle for the key. Every call returns the same object.

        Raises:
            InvalidKeyError: If the key cannot address a record.
            RecordDecodeError: If a persisted record exists but is malformed.
        """
        validate_key(key)
        with self._lock:
            handle = self._handles.get(key)
            if handle is not None:
                return handle
            loading = self._loading.setdefault(key, threading.Lock())

        try:
            with loading:
                with self._lock:
                    handle = self._handles.get(key)
                if handle is not None:
                    return handle

                record, event = self._load_or_create(key, kind)
                new_handle = RecordHandle(record)
                with self._lock:
                    handle = self._handles.setdefault(key, new_handle)
        finally:
            with self._lock:
                if self._loading.get(key) is loading:
                    del self._loading[key]

        if handle is new_handle:
            self._publish(event)
        return handle

    def _load_or_create(self, key: str, kind: str | None) -> tuple[EntityRecord, Event]:
        try:
            record = self.storage.load(self.entity_kind, key)
        except RecordNotFoundError:
            record = self.entity_kind.create_default(key, kind)
            logger.info("Created new %s record %r (kind %r)", self.name, key, record.kind)
            return record, RecordCreatedEvent(entity_kind=self.name, key=key, kind=record.kind)
        except RecordDecodeError:
            logger.exception("Failed to decode %s record %r; the stored file was left untouched", self.name, key)
            raise

        logger.info("Loaded %s record %r with %d item stacks", self.name, key, len(record.items))
        return record, RecordLoadedEvent(entity_kind=self.name, key=key, item_count=len(record.items))

    def get(self, key: str) -> RecordHandle | None:
        """Return the cached handle for a key without loading anything."""
        with self._lock:
            return self._handles.get(key)

    def keys(self) -> list[str]:
        """Keys of all cached records, in the order they were first accessed."""
        with self._lock:
            return list(self._handles)

    def __contains__(self, key: object) -> bool:
        """Check whether a key is cached."""
        with self._lock:
            return key in self._handles

    def __len__(self) -> int:
        """Number of cached records."""
        with self._lock:
            return len(self._handles)

    def update(self, key: str, stack: ItemStack, kind: str | None = None) -> bool:
        """Add items to an entity's record and persist it.

        Args:
            key: Entity key.
            stack: Items to add.
            kind: Type tag used if the record has to be created.

        Returns:
            True if the updated record was saved, False if the save failed. The
            items are added in memory either way.

        Raises:
            RecordDecodeError: If the persisted record is malformed.
            ValueError: If the stack's quantity is not positive.
            QuantityOverflowError: If the stack would exceed its maximum size.
                Nothing is added or saved.
        """
        handle = self.get_or_create(key, kind)
        total = handle.add_item(stack)
        logger.debug("Added %d x %s to %s %r (now %d)", stack.quantity, stack.item_id, self.name, key, total)
        saved = self._persist(handle)
        self._publish(
            ItemAddedEvent(
                entity_kind=self.name,
                key=key,
                item_id=stack.item_id,
                quantity=stack.quantity,
                total=total,
            )
        )
        return saved

    def remove(self, key: str, item_id: str, quantity: int = 1, kind: str | None = None) -> bool:
        """Remove items from an entity's record and persist it if anything changed.

        Args:
            key: Entity key.
            item_id: Identifier of the item to remove.
            quantity: How many to remove.
            kind: Type tag used if the record has to be created.

        Returns:
            True if the items were removed, False if the entity does not hold
            enough of them. A failed save after a successful removal is logged
            but does not change the result.

        Raises:
            RecordDecodeError: If the persisted record is malformed.
            ValueError: If quantity is not positive.
        """
        handle = self.get_or_create(key, kind)
        if not handle.remove_item(item_id, quantity):
            return False

        logger.debug("Removed %d x %s from %s %r", quantity, item_id, self.name, key)
        self._persist(handle)
        self._publish(ItemRemovedEvent(entity_kind=self.name, key=key, item_id=item_id, quantity=quantity))
        return True

    def save(self, key: str) -> bool:
        """Persist the cached record for a key.

        Returns:
            True if the record was written, False if the write failed.

        Raises:
            KeyError: If the key is not cached.
        """
        handle = self.get(key)
        if handle is None:
            msg = f"No cached {self.name} record for {key!r}"
            raise KeyError(msg)
        return self._persist(handle)

    def save_all(self) -> list[str]:
        """Persist every cached record.

        Returns:
            Keys whose records could not be written.
        """
        with self._lock:
            handles = list(self._handles.values())

        failed = [handle.key for handle in handles if not self._persist(handle)]
        if failed:
            logger.warning("Saved %d of %d %s records", len(handles) - len(failed), len(handles), self.name)
        else:
            logger.info("Saved %d %s records", len(handles), self.name)
        return failed

    def _persist(self, handle: RecordHandle) -> bool:
        try:
            handle.persist(partial(self.storage.save, self.entity_kind))
        except RecordSaveError as e:
            logger.warning("Failed to save %s record %r: %s", self.name, handle.key, e)
            self._publish(RecordSaveFailedEvent(entity_kind=self.name, key=handle.key, reason=str(e)))
            return False

        logger.debug("Saved %s record %r", self.name, handle.key)
        return True

    def _publish(self, event: Event) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event)

    def __repr__(self) -> str:
        """Return a short description of the store."""
        return f"<InventoryStore kind={self.name!r} cached={len(self)}>"
