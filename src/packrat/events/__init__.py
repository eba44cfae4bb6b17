"""Event system for observing inventory changes."""

from packrat.events.base import Event, EventBus

__all__ = ["Event", "EventBus"]
