"""Shared, lock-guarded access to a cached entity record."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from packrat.inventory.record import EntityRecord, ItemStack


class RecordHandle:
    """The one authoritative reference to a cached EntityRecord.

    An InventoryStore creates exactly one handle per key and hands that same object
    to every caller, so a mutation made through any handle is seen by every later
    lookup. The record itself is only reachable under the handle's lock:

        with handle as record:
            if record.count("arrow") >= 10:
                record.remove_item("arrow", 10)
                record.add_item(ItemStack("quiver"))

    Everything inside the with block is one atomic read-modify-write with respect
    to other threads using the same handle. The lock is reentrant, so the
    convenience methods below may be called from inside such a block.

    Writes to durable storage go through persist(), which snapshots the record
    under the record lock and then writes the snapshot under a separate save lock.
    Mutations never wait on I/O, and concurrent saves of the same key are
    serialized so the last write always carries the latest state.
    """

    def __init__(self, record: EntityRecord) -> None:
        """Wrap a record. The handle takes ownership of it."""
        self._record = record
        self._lock = threading.RLock()
        self._save_lock = threading.Lock()

    @property
    def key(self) -> str:
        """Entity key of the record."""
        return self._record.key

    @property
    def kind(self) -> str:
        """Type tag of the record."""
        return self._record.kind

    def __enter__(self) -> EntityRecord:
        """Acquire exclusive access and return the live record."""
        self._lock.acquire()
        return self._record

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Release exclusive access."""
        self._lock.release()

    def add_item(self, stack: ItemStack) -> int:
        """Add items atomically.

        Returns:
            Quantity of the receiving stack after the add.

        Raises:
            ValueError: If the quantity is not positive.
            QuantityOverflowError: If the stack would exceed its maximum size.
        """
        with self._lock:
            return self._record.add_item(stack).quantity

    def remove_item(self, item_id: str, quantity: int = 1) -> bool:
        """Remove items atomically. See EntityRecord.remove_item()."""
        with self._lock:
            return self._record.remove_item(item_id, quantity)

    def count(self, item_id: str) -> int:
        """Total quantity of item_id held by the record."""
        with self._lock:
            return self._record.count(item_id)

    def snapshot(self) -> EntityRecord:
        """Return a detached copy of the record's current state."""
        with self._lock:
            return self._record.copy()

    def persist(self, write: Callable[[EntityRecord], None]) -> None:
        """Write the current state of the record with the given writer.

        The record lock is held only while copying; write() runs on the copy
        with the record lock released.
        """
        with self._save_lock:
            write(self.snapshot())

    def __repr__(self) -> str:
        """Return a short description of the handle."""
        return f"<RecordHandle key={self.key!r} kind={self.kind!r}>"
