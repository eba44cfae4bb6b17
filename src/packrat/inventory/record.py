"""Entity records and the item stacks they hold.

An EntityRecord is the persisted unit of the inventory store: one player or NPC,
identified by its key, tagged with a kind, and owning an ordered list of
ItemStack entries.

Stacking rules:
- Adding a stackable item merges it into the existing stack with the same item_id.
- Adding a non-stackable item always appends a new stack carrying the quantity
  given; such stacks are never merged with anything.
- A stack whose quantity reaches zero is removed from the record. No record ever
  holds a zero-quantity stack.

Records are plain data. They are not thread-safe on their own; shared records are
reached through a RecordHandle, which serializes access to them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from packrat.conf import settings
from packrat.exceptions import QuantityOverflowError

# Field names written by earlier versions of the on-disk format
_LEGACY_KEY_FIELDS = ("npc_name", "username", "name")
_LEGACY_KIND_FIELDS = ("npc_type",)
_LEGACY_ITEMS_FIELDS = ("inventory",)


def _first_present(data: dict[str, Any], names: tuple[str, ...]) -> Any:  # noqa: ANN401
    for name in names:
        if name in data:
            return data[name]
    raise KeyError(names[0])


def _check_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        msg = f"Quantity must be an integer, got {type(quantity).__name__}"
        raise TypeError(msg)
    if quantity <= 0:
        msg = f"Quantity must be positive, got {quantity}"
        raise ValueError(msg)


@dataclass
class ItemStack:
    """A quantity of one item type held by an entity.

    Attributes:
        item_id: Identifier of the item type (e.g., "healing_potion").
        quantity: Number of items in the stack. Always positive while stored in a record.
        stackable: Whether further acquisitions of this item merge into this stack.
    """

    item_id: str
    quantity: int = 1
    stackable: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "item_id": self.item_id,
            "quantity": self.quantity,
            "stackable": self.stackable,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ItemStack:
        """Create from dictionary loaded from a record file.

        Accepts "id" and "is_stackable" as older spellings of "item_id" and
        "stackable". A missing stackable flag means the item stacks.

        Raises:
            KeyError: If the item id is missing.
            TypeError: If the item id is not a string, the quantity is not an
                integer, or the stackable flag is not a boolean.
            ValueError: If the quantity is not positive.
        """
        if not isinstance(data, dict):
            msg = f"Item data must be an object, got {type(data).__name__}"
            raise TypeError(msg)
        item_id = _first_present(data, ("item_id", "id"))
        if not isinstance(item_id, str):
            msg = f"Item id must be a string, got {type(item_id).__name__}"
            raise TypeError(msg)
        quantity = data.get("quantity", 1)
        _check_quantity(quantity)
        stackable = data.get("stackable", data.get("is_stackable", True))
        if not isinstance(stackable, bool):
            msg = f"Stackable flag of {item_id!r} must be a boolean, got {type(stackable).__name__}"
            raise TypeError(msg)
        return cls(item_id=item_id, quantity=quantity, stackable=stackable)


@dataclass
class EntityRecord:
    """Inventory state of a single entity.

    Attributes:
        key: Unique, immutable entity key (player name or NPC name).
        kind: Type tag of the entity (e.g., "player", "merchant", "enemy").
        items: Item stacks in acquisition order.
    """

    key: str
    kind: str
    items: list[ItemStack] = field(default_factory=list)

    def add_item(self, stack: ItemStack, max_quantity: int | None = None) -> ItemStack:
        """Add a stack of items to the record.

        If the stack is stackable and a stackable stack with the same item_id already
        exists, its quantity is increased. Otherwise a copy of the stack is appended,
        so the caller's object is never aliased into the record.

        Args:
            stack: The items to add. Its quantity must be positive.
            max_quantity: Upper bound for any single stack. Defaults to
                settings.MAX_STACK_QUANTITY.

        Returns:
            The stack inside the record that now holds the added items.

        Raises:
            ValueError: If the stack's quantity is not positive.
            QuantityOverflowError: If the resulting quantity would exceed the bound.
                The record is left unchanged.
        """
        _check_quantity(stack.quantity)
        if max_quantity is None:
            max_quantity = settings.MAX_STACK_QUANTITY

        existing = self._find_mergeable(stack) if stack.stackable else None
        current = existing.quantity if existing is not None else 0
        if current + stack.quantity > max_quantity:
            msg = (
                f"Adding {stack.quantity} x {stack.item_id!r} to {self.key!r} would exceed "
                f"the maximum stack size of {max_quantity}"
            )
            raise QuantityOverflowError(msg)

        if existing is not None:
            existing.quantity += stack.quantity
            return existing

        new_stack = ItemStack(stack.item_id, stack.quantity, stack.stackable)
        self.items.append(new_stack)
        return new_stack

    def remove_item(self, item_id: str, quantity: int = 1) -> bool:
        """Remove a quantity of an item from the record.

        The first stack holding item_id is the one affected. A removal that would
        empty the stack removes it entirely. A removal asking for more than the
        stack holds fails without touching the record.

        Args:
            item_id: Identifier of the item to remove.
            quantity: How many to remove. Must be positive.

        Returns:
            True if the items were removed, False if the item is absent or the
            stack holds fewer than requested.

        Raises:
            ValueError: If quantity is not positive.
        """
        _check_quantity(quantity)
        for index, stack in enumerate(self.items):
            if stack.item_id != item_id:
                continue
            if stack.quantity > quantity:
                stack.quantity -= quantity
                return True
            if stack.quantity == quantity:
                del self.items[index]
                return True
            return False
        return False

    def get_stack(self, item_id: str) -> ItemStack | None:
        """Return the first stack holding item_id, or None."""
        return next((stack for stack in self.items if stack.item_id == item_id), None)

    def count(self, item_id: str) -> int:
        """Total quantity of item_id across all stacks."""
        return sum(stack.quantity for stack in self.items if stack.item_id == item_id)

    def has_item(self, item_id: str, quantity: int = 1) -> bool:
        """Check whether the record holds at least quantity of item_id."""
        return self.count(item_id) >= quantity

    def copy(self) -> EntityRecord:
        """Return a deep copy detached from this record."""
        return EntityRecord(
            key=self.key,
            kind=self.kind,
            items=[ItemStack(s.item_id, s.quantity, s.stackable) for s in self.items],
        )

    def _find_mergeable(self, stack: ItemStack) -> ItemStack | None:
        for existing in self.items:
            if existing.item_id == stack.item_id and existing.stackable:
                return existing
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "key": self.key,
            "kind": self.kind,
            "items": [stack.to_dict() for stack in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], default_kind: str | None = None) -> EntityRecord:
        """Create from dictionary loaded from a record file.

        Older files named the key "npc_name", "username" or "name", the kind
        "npc_type", and the item list "inventory"; those spellings are accepted.

        Stored stacks are added one by one with add_item(), so repeated stackable
        stacks of one item merge into a single stack and the maximum stack size
        applies to loaded data as it does to live adds.

        Args:
            data: Decoded record file contents.
            default_kind: Kind tag to use when the data carries none.

        Raises:
            KeyError: If the key (or, without default_kind, the kind) is missing.
            TypeError: If a field has the wrong type.
            ValueError: If an item quantity is not positive.
            QuantityOverflowError: If a stack holds more than the maximum stack size.
        """
        if not isinstance(data, dict):
            msg = f"Record data must be an object, got {type(data).__name__}"
            raise TypeError(msg)

        key = str(_first_present(data, ("key", *_LEGACY_KEY_FIELDS)))
        try:
            kind = str(_first_present(data, ("kind", *_LEGACY_KIND_FIELDS)))
        except KeyError:
            if default_kind is None:
                raise
            kind = default_kind

        try:
            raw_items = _first_present(data, ("items", *_LEGACY_ITEMS_FIELDS))
        except KeyError:
            raw_items = []
        if not isinstance(raw_items, list):
            msg = f"Record items must be a list, got {type(raw_items).__name__}"
            raise TypeError(msg)

        record = cls(key=key, kind=kind)
        for item in raw_items:
            record.add_item(ItemStack.from_dict(item))
        return record
