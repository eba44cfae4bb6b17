"""Events published by inventory stores."""

from dataclasses import dataclass

from packrat.events.base import Event


@dataclass
class RecordCreatedEvent(Event):
    """Fired when a store synthesizes a fresh record for a key with no saved file.

    Attributes:
        entity_kind: Name of the entity kind (e.g., "player", "npc").
        key: Entity key of the new record.
        kind: Type tag given to the record.
    """

    entity_kind: str
    key: str
    kind: str


@dataclass
class RecordLoadedEvent(Event):
    """Fired when a store loads a record from durable storage into its cache.

    Attributes:
        entity_kind: Name of the entity kind.
        key: Entity key of the loaded record.
        item_count: Number of stacks the loaded record holds.
    """

    entity_kind: str
    key: str
    item_count: int


@dataclass
class ItemAddedEvent(Event):
    """Fired after items are added to a record through a store.

    Attributes:
        entity_kind: Name of the entity kind.
        key: Entity key of the record.
        item_id: Identifier of the added item.
        quantity: Number of items added.
        total: Quantity of the stack that received the items, after the add.
    """

    entity_kind: str
    key: str
    item_id: str
    quantity: int
    total: int


@dataclass
class ItemRemovedEvent(Event):
    """Fired after items are removed from a record through a store.

    Attributes:
        entity_kind: Name of the entity kind.
        key: Entity key of the record.
        item_id: Identifier of the removed item.
        quantity: Number of items removed.
    """

    entity_kind: str
    key: str
    item_id: str
    quantity: int


@dataclass
class RecordSaveFailedEvent(Event):
    """Fired when a record could not be written to durable storage.

    The in-memory record keeps its state; only the write failed.

    Attributes:
        entity_kind: Name of the entity kind.
        key: Entity key of the record.
        reason: Text of the underlying error.
    """

    entity_kind: str
    key: str
    reason: str
