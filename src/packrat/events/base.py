"""Event system for decoupled handling of inventory changes.

This module provides a publish/subscribe event system that lets callers react to
what the inventory stores do (records created or loaded, items added or removed,
saves failing) without the stores knowing who is listening.

Example usage:
    # Create an event bus
    event_bus = EventBus()

    # Subscribe to item added events
    def handle_item_added(event: ItemAddedEvent):
        print(f"{event.key} received {event.quantity} x {event.item_id}")

    event_bus.subscribe(ItemAddedEvent, handle_item_added)

    # Hand the bus to a store; it publishes as it works
    store = InventoryStore(PlayerKind(), storage, event_bus=event_bus)
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class Event:
    """Base event class."""


class EventBus:
    """Central event bus for publish/subscribe event handling.

    Publishers emit events without knowing who (if anyone) handles them, and
    subscribers listen for event types without knowing who publishes them.

    Thread safety: subscribing and unsubscribing may happen from any thread.
    Handlers run synchronously on the publishing thread, against a snapshot of
    the listener list taken when publish() is called.
    """

    def __init__(self) -> None:
        """Initialize the event bus with no registered listeners."""
        self.listeners: dict[type[Event], list[Callable[[Event], None]]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: type[Event], handler: Callable[[Event], None]) -> None:
        """Subscribe a handler to an event type.

        Multiple handlers can be subscribed to the same event type, and they are
        called in the order they were registered.

        Args:
            event_type: The type of event to listen for (e.g., ItemAddedEvent).
            handler: Callback taking the event as its only argument.
        """
        with self._lock:
            self.listeners.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type[Event], handler: Callable[[Event], None]) -> None:
        """Unsubscribe a handler from an event type.

        Removes every registration of the handler. Unknown handlers are ignored.
        """
        with self._lock:
            if event_type in self.listeners:
                self.listeners[event_type] = [h for h in self.listeners[event_type] if h != handler]

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed handlers.

        Events with no subscribers are silently ignored. An exception raised by a
        handler propagates to the publisher and skips the remaining handlers.

        Args:
            event: The event instance to publish. Its type selects the handlers.
        """
        with self._lock:
            handlers = list(self.listeners.get(type(event), ()))
        for handler in handlers:
            handler(event)

    def clear(self) -> None:
        """Remove all subscribed handlers for all event types."""
        with self._lock:
            self.listeners.clear()
