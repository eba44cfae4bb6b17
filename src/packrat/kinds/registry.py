"""Registry for entity kinds."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from packrat.kinds.base import BaseEntityKind

logger = logging.getLogger(__name__)


class KindRegistry:
    """Central registry for entity kind classes.

    Entity kinds register themselves using the @KindRegistry.register decorator,
    enabling the KindLoader to discover them based on the INSTALLED_KINDS setting.
    """

    _kinds: ClassVar[dict[str, type[BaseEntityKind]]] = {}

    @classmethod
    def register(cls, kind_class: type[BaseEntityKind]) -> type[BaseEntityKind]:
        """Register an entity kind class.

        Use as a decorator:
            @KindRegistry.register
            class PlayerKind(BaseEntityKind):
                name = "player"
                ...

        Args:
            kind_class: The entity kind class to register.

        Returns:
            The same class (allows use as decorator).

        Raises:
            ValueError: If the class doesn't define a 'name' attribute.
        """
        name = getattr(kind_class, "name", None)
        if not name:
            msg = f"Entity kind {kind_class.__name__} must have a 'name' class attribute"
            raise ValueError(msg)

        if name in cls._kinds:
            logger.warning(
                "Entity kind '%s' is being re-registered (was %s, now %s)",
                name,
                cls._kinds[name].__name__,
                kind_class.__name__,
            )

        cls._kinds[name] = kind_class
        logger.debug("Registered entity kind: %s", name)
        return kind_class

    @classmethod
    def get(cls, name: str) -> type[BaseEntityKind] | None:
        """Get a registered entity kind class by name."""
        return cls._kinds.get(name)

    @classmethod
    def get_all(cls) -> dict[str, type[BaseEntityKind]]:
        """Get all registered entity kind classes."""
        return cls._kinds.copy()

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if an entity kind is registered."""
        return name in cls._kinds

    @classmethod
    def unregister(cls, name: str) -> None:
        """Remove an entity kind from the registry (for testing)."""
        cls._kinds.pop(name, None)
