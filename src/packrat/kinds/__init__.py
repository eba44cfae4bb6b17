"""Entity kinds: the categories of entity that own inventories.

This package provides:
- BaseEntityKind: Strategy interface consumed by InventoryStore
- KindRegistry / KindLoader: Registration and discovery via INSTALLED_KINDS
- PlayerKind, NPCKind: The built-in kinds
"""

from packrat.kinds.base import BaseEntityKind, validate_key
from packrat.kinds.loader import KindLoader
from packrat.kinds.npcs import NPCKind
from packrat.kinds.players import PlayerKind
from packrat.kinds.registry import KindRegistry

__all__ = ["BaseEntityKind", "KindLoader", "KindRegistry", "NPCKind", "PlayerKind", "validate_key"]
