"""Unit tests for InventoryStore."""

import threading
import time
import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from packrat.events.base import EventBus
from packrat.exceptions import (
    InvalidKeyError,
    QuantityOverflowError,
    RecordDecodeError,
    RecordNotFoundError,
    RecordSaveError,
)
from packrat.inventory.events import (
    ItemAddedEvent,
    ItemRemovedEvent,
    RecordCreatedEvent,
    RecordLoadedEvent,
    RecordSaveFailedEvent,
)
from packrat.inventory.record import EntityRecord, ItemStack
from packrat.inventory.store import InventoryStore
from packrat.kinds.npcs import NPCKind
from packrat.kinds.players import PlayerKind
from packrat.storage.memory import MemoryRecordStorage


def _not_found(kind, key):  # noqa: ANN001, ANN202
    msg = f"no record for {key}"
    raise RecordNotFoundError(msg, kind=kind.name, key=key)


class TestGetOrCreate(unittest.TestCase):
    """Test InventoryStore.get_or_create()."""

    def setUp(self) -> None:
        """Create a store over in-memory storage."""
        self.storage = MemoryRecordStorage()
        self.event_bus = EventBus()
        self.events: list = []
        self.event_bus.subscribe(RecordCreatedEvent, self.events.append)
        self.event_bus.subscribe(RecordLoadedEvent, self.events.append)
        self.store = InventoryStore(NPCKind(), self.storage, self.event_bus)

    def test_creates_default_record_on_first_access(self) -> None:
        """Test that a key with no saved record gets an empty record."""
        handle = self.store.get_or_create("Merchant", "Merchant")

        assert handle.snapshot() == EntityRecord("Merchant", "Merchant", [])
        assert "Merchant" in self.store
        assert self.events == [RecordCreatedEvent(entity_kind="npc", key="Merchant", kind="Merchant")]

    def test_default_kind_tag(self) -> None:
        """Test that the entity kind's default tag is used when none is given."""
        handle = self.store.get_or_create("Wanderer")

        assert handle.kind == "npc"

    def test_returns_same_handle(self) -> None:
        """Test that every call for a key returns the same handle object."""
        first = self.store.get_or_create("Merchant", "Merchant")
        second = self.store.get_or_create("Merchant", "Merchant")

        assert first is second
        assert len(self.store) == 1

    def test_mutations_visible_to_later_lookups(self) -> None:
        """Test that changes through one handle are seen by the next lookup."""
        handle = self.store.get_or_create("Merchant", "Merchant")
        handle.add_item(ItemStack("healing_potion", 10))

        assert self.store.get_or_create("Merchant").count("healing_potion") == 10

    def test_loads_persisted_record(self) -> None:
        """Test that a saved record is loaded instead of created."""
        self.storage.save(NPCKind(), EntityRecord("Merchant", "Merchant", [ItemStack("lantern", 2)]))

        handle = self.store.get_or_create("Merchant", "ignored")

        assert handle.snapshot() == EntityRecord("Merchant", "Merchant", [ItemStack("lantern", 2)])
        assert self.events == [RecordLoadedEvent(entity_kind="npc", key="Merchant", item_count=1)]

    def test_cached_record_is_not_reloaded(self) -> None:
        """Test that storage is read only on first access."""
        storage = MagicMock()
        storage.load.side_effect = _not_found
        store = InventoryStore(PlayerKind(), storage)

        store.get_or_create("PlayerOne")
        store.get_or_create("PlayerOne")

        storage.load.assert_called_once()

    def test_decode_error_is_raised_and_not_cached(self) -> None:
        """Test that a malformed record is surfaced instead of replaced."""
        self.storage.records[("npc", "Merchant")] = {"key": "Merchant", "kind": "Merchant", "items": "oops"}

        with pytest.raises(RecordDecodeError):
            self.store.get_or_create("Merchant", "Merchant")

        assert "Merchant" not in self.store
        assert self.storage.records[("npc", "Merchant")]["items"] == "oops"
        assert self.events == []

    def test_decode_error_then_repair(self) -> None:
        """Test that a repaired record loads on the next attempt."""
        self.storage.records[("npc", "Merchant")] = {"kind": "Merchant"}
        with pytest.raises(RecordDecodeError):
            self.store.get_or_create("Merchant")

        self.storage.records[("npc", "Merchant")] = {"key": "Merchant", "kind": "Merchant"}

        assert self.store.get_or_create("Merchant").kind == "Merchant"

    def test_invalid_key(self) -> None:
        """Test that keys unusable as filenames are rejected."""
        for key in ("", "..", "a/b"):
            with pytest.raises(InvalidKeyError):
                self.store.get_or_create(key)
        assert len(self.store) == 0

    def test_get_does_not_load(self) -> None:
        """Test that get() only consults the cache."""
        assert self.store.get("Merchant") is None

        handle = self.store.get_or_create("Merchant")

        assert self.store.get("Merchant") is handle

    def test_keys_in_access_order(self) -> None:
        """Test keys() lists cached keys in first-access order."""
        for key in ("b", "a", "c", "a"):
            self.store.get_or_create(key)

        assert self.store.keys() == ["b", "a", "c"]


class TestGetOrCreateConcurrency(unittest.TestCase):
    """Test get_or_create() under concurrent access."""

    def test_concurrent_first_access_yields_one_record(self) -> None:
        """Test that racing first accesses load once and share one handle."""
        storage = MagicMock()

        def slow_not_found(kind, key):  # noqa: ANN001, ANN202
            time.sleep(0.05)
            _not_found(kind, key)

        storage.load.side_effect = slow_not_found
        store = InventoryStore(PlayerKind(), storage)
        workers = 16
        barrier = threading.Barrier(workers)

        def access():  # noqa: ANN202
            barrier.wait()
            return store.get_or_create("PlayerOne")

        with ThreadPoolExecutor(max_workers=workers) as pool:
            handles = list(pool.map(lambda _: access(), range(workers)))

        assert all(handle is handles[0] for handle in handles)
        assert len(store) == 1
        storage.load.assert_called_once()

    def test_slow_load_does_not_block_cached_lookups(self) -> None:
        """Test that loading one key does not hold up lookups of another."""
        release = threading.Event()
        started = threading.Event()
        storage = MagicMock()

        def blocking_load(kind, key):  # noqa: ANN001, ANN202
            if key == "slow":
                started.set()
                release.wait(5)
            _not_found(kind, key)

        storage.load.side_effect = blocking_load
        store = InventoryStore(PlayerKind(), storage)
        cached = store.get_or_create("cached")

        loader = threading.Thread(target=store.get_or_create, args=("slow",))
        loader.start()
        try:
            assert started.wait(5)
            assert store.get_or_create("cached") is cached
            assert "slow" not in store
        finally:
            release.set()
            loader.join(5)

        assert "slow" in store

    def test_concurrent_updates_to_one_key_are_linearized(self) -> None:
        """Test that concurrent adds never lose an increment."""
        store = InventoryStore(PlayerKind(), MemoryRecordStorage())
        workers = 8
        adds_per_worker = 50

        def add_many():  # noqa: ANN202
            for _ in range(adds_per_worker):
                store.update("PlayerOne", ItemStack("arrow", 1))

        threads = [threading.Thread(target=add_many) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(10)

        handle = store.get_or_create("PlayerOne")
        assert handle.count("arrow") == workers * adds_per_worker
        assert store.storage.load(PlayerKind(), "PlayerOne").count("arrow") == workers * adds_per_worker

    def test_locked_record_does_not_block_other_keys(self) -> None:
        """Test that holding one record's lock leaves other records usable."""
        store = InventoryStore(PlayerKind(), MemoryRecordStorage())
        alice = store.get_or_create("Alice")
        done = threading.Event()

        def update_bob():  # noqa: ANN202
            store.update("Bob", ItemStack("gem", 1))
            done.set()

        with alice as record:
            record.add_item(ItemStack("gem", 1))
            worker = threading.Thread(target=update_bob)
            worker.start()
            assert done.wait(5)
        worker.join(5)

        assert store.get_or_create("Bob").count("gem") == 1


class TestUpdate(unittest.TestCase):
    """Test InventoryStore.update()."""

    def setUp(self) -> None:
        """Create a store over a mock storage."""
        self.storage = MagicMock()
        self.storage.load.side_effect = _not_found
        self.saved: list[EntityRecord] = []
        self.storage.save.side_effect = lambda kind, record: self.saved.append(record)
        self.event_bus = EventBus()
        self.events: list = []
        for event_type in (ItemAddedEvent, ItemRemovedEvent, RecordSaveFailedEvent):
            self.event_bus.subscribe(event_type, self.events.append)
        self.store = InventoryStore(NPCKind(), self.storage, self.event_bus)

    def test_merchant_scenario(self) -> None:
        """Test adding potions to a fresh merchant."""
        result = self.store.update("Merchant", ItemStack("healing_potion", 10, stackable=True), "Merchant")

        assert result is True
        handle = self.store.get_or_create("Merchant")
        with handle as record:
            assert record.items == [ItemStack("healing_potion", 10, True)]
            assert record.kind == "Merchant"

    def test_saves_state_after_mutation(self) -> None:
        """Test that the saved record includes the mutation just made."""
        self.store.update("Merchant", ItemStack("healing_potion", 10), "Merchant")
        self.store.update("Merchant", ItemStack("healing_potion", 5), "Merchant")

        assert [record.count("healing_potion") for record in self.saved] == [10, 15]

    def test_saved_record_is_a_snapshot(self) -> None:
        """Test that storage receives a copy, not the live record."""
        self.store.update("Merchant", ItemStack("healing_potion", 10))
        self.store.get_or_create("Merchant").add_item(ItemStack("healing_potion", 1))

        assert self.saved[0].count("healing_potion") == 10

    def test_publishes_item_added(self) -> None:
        """Test the ItemAddedEvent payload."""
        self.store.update("Merchant", ItemStack("healing_potion", 4))
        self.store.update("Merchant", ItemStack("healing_potion", 6))

        assert self.events[-1] == ItemAddedEvent(
            entity_kind="npc", key="Merchant", item_id="healing_potion", quantity=6, total=10
        )

    def test_save_failure_keeps_mutation(self) -> None:
        """Test that a failed save is reported without rolling back."""
        self.storage.save.side_effect = RecordSaveError("disk full", kind="npc", key="Merchant")

        result = self.store.update("Merchant", ItemStack("healing_potion", 10))

        assert result is False
        assert self.store.get_or_create("Merchant").count("healing_potion") == 10
        assert [type(event) for event in self.events] == [RecordSaveFailedEvent, ItemAddedEvent]
        assert self.events[0].reason == "disk full"

    def test_saves_before_publishing(self) -> None:
        """Test that a failing subscriber cannot leave an added item unsaved."""

        def failing_listener(event: ItemAddedEvent) -> None:
            msg = "listener failed"
            raise RuntimeError(msg)

        self.event_bus.subscribe(ItemAddedEvent, failing_listener)

        with pytest.raises(RuntimeError, match="listener failed"):
            self.store.update("Merchant", ItemStack("healing_potion", 10))

        assert [record.count("healing_potion") for record in self.saved] == [10]

    def test_overflow_adds_and_saves_nothing(self) -> None:
        """Test that an overflowing add leaves the record and storage alone."""
        self.store.update("Merchant", ItemStack("coin", 2**32 - 1))
        self.storage.save.reset_mock()

        with pytest.raises(QuantityOverflowError):
            self.store.update("Merchant", ItemStack("coin", 1))

        assert self.store.get_or_create("Merchant").count("coin") == 2**32 - 1
        self.storage.save.assert_not_called()

    def test_decode_error_propagates(self) -> None:
        """Test that update() does not paper over a corrupt record."""
        self.storage.load.side_effect = RecordDecodeError("bad json", kind="npc", key="Merchant")

        with pytest.raises(RecordDecodeError):
            self.store.update("Merchant", ItemStack("healing_potion", 1))

        self.storage.save.assert_not_called()

    def test_save_does_not_hold_record_lock(self) -> None:
        """Test that other threads can mutate the record while it is being written."""
        handle = self.store.get_or_create("Merchant")
        mutated = threading.Event()

        def slow_save(kind, record):  # noqa: ANN001, ANN202
            worker = threading.Thread(target=lambda: (handle.add_item(ItemStack("gem", 1)), mutated.set()))
            worker.start()
            worker.join(5)
            self.saved.append(record)

        self.storage.save.side_effect = slow_save

        assert self.store.save("Merchant") is True
        assert mutated.is_set()
        assert handle.count("gem") == 1


class TestRemove(unittest.TestCase):
    """Test InventoryStore.remove()."""

    def setUp(self) -> None:
        """Create a store over in-memory storage."""
        self.storage = MemoryRecordStorage()
        self.store = InventoryStore(PlayerKind(), self.storage)

    def test_iron_sword_scenario(self) -> None:
        """Test removing the whole stack of swords."""
        self.store.update("AnotherPlayer", ItemStack("iron_sword", 2))

        assert self.store.remove("AnotherPlayer", "iron_sword", 2) is True
        with self.store.get_or_create("AnotherPlayer") as record:
            assert record.items == []
        assert self.storage.load(PlayerKind(), "AnotherPlayer").items == []

    def test_gold_pickaxe_scenario(self) -> None:
        """Test removing from an empty inventory fails."""
        assert self.store.remove("PlayerOne", "gold_pickaxe", 1) is False
        with self.store.get_or_create("PlayerOne") as record:
            assert record.items == []

    def test_failed_remove_does_not_save(self) -> None:
        """Test that nothing is written when nothing changed."""
        self.store.remove("PlayerOne", "gold_pickaxe", 1)

        assert self.storage.records == {}

    def test_remove_publishes_event(self) -> None:
        """Test the ItemRemovedEvent payload."""
        event_bus = EventBus()
        events: list = []
        event_bus.subscribe(ItemRemovedEvent, events.append)
        store = InventoryStore(PlayerKind(), self.storage, event_bus)
        store.update("PlayerOne", ItemStack("arrow", 5))

        store.remove("PlayerOne", "arrow", 3)

        assert events == [ItemRemovedEvent(entity_kind="player", key="PlayerOne", item_id="arrow", quantity=3)]

    def test_remove_saves_before_publishing(self) -> None:
        """Test that a failing subscriber cannot leave a removal unsaved."""
        event_bus = EventBus()

        def failing_listener(event: ItemRemovedEvent) -> None:
            msg = "listener failed"
            raise RuntimeError(msg)

        event_bus.subscribe(ItemRemovedEvent, failing_listener)
        store = InventoryStore(PlayerKind(), self.storage, event_bus)
        store.update("PlayerOne", ItemStack("arrow", 5))

        with pytest.raises(RuntimeError, match="listener failed"):
            store.remove("PlayerOne", "arrow", 3)

        assert self.storage.load(PlayerKind(), "PlayerOne").count("arrow") == 2


class TestSave(unittest.TestCase):
    """Test InventoryStore.save() and save_all()."""

    def setUp(self) -> None:
        """Create a store over a mock storage."""
        self.storage = MagicMock()
        self.storage.load.side_effect = _not_found
        self.store = InventoryStore(PlayerKind(), self.storage)

    def test_save_unknown_key(self) -> None:
        """Test that saving an uncached key is an error."""
        with pytest.raises(KeyError):
            self.store.save("Nobody")

    def test_save_all_writes_every_record(self) -> None:
        """Test that save_all() writes each cached record once."""
        for key in ("a", "b", "c"):
            self.store.get_or_create(key)

        assert self.store.save_all() == []
        saved_keys = [call.args[1].key for call in self.storage.save.call_args_list]
        assert sorted(saved_keys) == ["a", "b", "c"]

    def test_save_all_reports_failures(self) -> None:
        """Test that save_all() returns the keys it could not write."""
        for key in ("a", "b", "c"):
            self.store.get_or_create(key)

        def fail_on_b(kind, record):  # noqa: ANN001, ANN202
            if record.key == "b":
                raise RecordSaveError("read-only", kind=kind.name, key=record.key)

        self.storage.save.side_effect = fail_on_b

        assert self.store.save_all() == ["b"]
