"""NPC entity kind."""

from typing import ClassVar

from packrat.conf import settings
from packrat.kinds.base import BaseEntityKind
from packrat.kinds.registry import KindRegistry


@KindRegistry.register
class NPCKind(BaseEntityKind):
    """Non-player characters such as merchants and enemies.

    Callers usually pass a specific tag ("merchant", "enemy", "boss") on first
    access; settings.NPC_DEFAULT_KIND is used otherwise.
    """

    name: ClassVar[str] = "npc"

    @property
    def directory(self) -> str:
        """Directory holding NPC records."""
        return settings.NPCS_DIR

    @property
    def default_kind(self) -> str:
        """Type tag for new NPC records."""
        return settings.NPC_DEFAULT_KIND
