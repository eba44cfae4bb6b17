"""Loader for entity kinds."""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from packrat.conf import settings
from packrat.exceptions import UnknownKindError
from packrat.kinds.registry import KindRegistry

if TYPE_CHECKING:
    from packrat.kinds.base import BaseEntityKind

logger = logging.getLogger(__name__)


class KindLoader:
    """Loads and manages entity kind instances.

    The KindLoader handles:
    1. Importing entity kind modules to trigger registration
    2. Instantiating the registered kinds
    3. Looking kinds up by name
    """

    def __init__(self, installed_kinds: list[str] | None = None) -> None:
        """Initialize the kind loader.

        Args:
            installed_kinds: Module paths to import. Defaults to settings.INSTALLED_KINDS.
        """
        self.installed_kinds = list(settings.INSTALLED_KINDS if installed_kinds is None else installed_kinds)
        self._instances: dict[str, BaseEntityKind] = {}

    def load_modules(self) -> None:
        """Import all configured entity kind modules to trigger registration."""
        for module_path in self.installed_kinds:
            try:
                importlib.import_module(module_path)
                logger.debug("Loaded entity kind module: %s", module_path)
            except ImportError:
                logger.exception("Could not load entity kind module '%s'", module_path)
                raise

    def instantiate_all(self) -> dict[str, BaseEntityKind]:
        """Create instances of all registered entity kinds.

        Returns:
            Dictionary mapping kind names to their instances.
        """
        self.load_modules()

        all_kinds = KindRegistry.get_all()
        if not all_kinds:
            logger.warning("No entity kinds registered")
            return {}

        for name, kind_class in sorted(all_kinds.items()):
            if name not in self._instances:
                self._instances[name] = kind_class()
                logger.debug("Instantiated entity kind: %s", name)

        logger.info("Instantiated %d entity kinds", len(self._instances))
        return dict(self._instances)

    def get_kind(self, name: str) -> BaseEntityKind:
        """Get an entity kind instance by name.

        Raises:
            UnknownKindError: If no kind of that name has been instantiated.
        """
        try:
            return self._instances[name]
        except KeyError:
            msg = f"Unknown entity kind: {name!r}"
            raise UnknownKindError(msg) from None
