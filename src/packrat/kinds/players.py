"""Player entity kind."""

from typing import ClassVar

from packrat.conf import settings
from packrat.kinds.base import BaseEntityKind
from packrat.kinds.registry import KindRegistry


@KindRegistry.register
class PlayerKind(BaseEntityKind):
    """Players, stored under settings.PLAYERS_DIR and tagged settings.PLAYER_DEFAULT_KIND."""

    name: ClassVar[str] = "player"

    @property
    def directory(self) -> str:
        """Directory holding player records."""
        return settings.PLAYERS_DIR

    @property
    def default_kind(self) -> str:
        """Type tag for new player records."""
        return settings.PLAYER_DEFAULT_KIND
