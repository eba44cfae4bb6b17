"""Django-like settings system for packrat.

Usage:
    # In your project's settings.py
    DATA_DIR = "/var/lib/mygame"
    JSON_INDENT = 4

    # In your code
    from packrat.conf import settings

    print(settings.DATA_DIR)  # "/var/lib/mygame"

The module is named by the PACKRAT_SETTINGS_MODULE environment variable and
defaults to "settings". Without one, the defaults in global_settings apply.
"""

import importlib
import logging
import os
import threading
from typing import Any

from packrat.conf import global_settings

logger = logging.getLogger(__name__)

ENVIRONMENT_VARIABLE = "PACKRAT_SETTINGS_MODULE"


def _uppercase_items(source: object) -> dict[str, Any]:
    return {name: getattr(source, name) for name in dir(source) if name.isupper()}


class Settings:
    """Library defaults overlaid with the uppercase names of a settings module."""

    def __init__(self, module_name: str | None = None) -> None:
        """Load defaults, then the overrides from module_name if it can be imported."""
        self.__dict__.update(_uppercase_items(global_settings))
        if module_name is None:
            return

        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only a missing settings module falls back to defaults
            if e.name != module_name:
                raise
            logger.debug("No settings module %r, using packrat defaults", module_name)
            return
        self.__dict__.update(_uppercase_items(module))


class LazySettings:
    """Settings proxy that loads on first access.

    Inventory stores read settings from many threads at once, so loading happens
    under a lock and at most once until the proxy is reset by assigning None to
    _wrapped.
    """

    def __init__(self) -> None:
        """Create an unloaded proxy."""
        self.__dict__["_lock"] = threading.RLock()
        self._wrapped: Settings | None = None

    def _settings(self) -> Settings:
        with self._lock:
            if self._wrapped is None:
                self.__dict__["_wrapped"] = Settings(os.environ.get(ENVIRONMENT_VARIABLE, "settings"))
            return self._wrapped

    def __getattr__(self, name: str) -> Any:  # noqa: ANN401
        """Get a setting value."""
        return getattr(self._settings(), name)

    def __setattr__(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Set a setting value, or reset the proxy when name is _wrapped."""
        if name == "_wrapped":
            self.__dict__["_wrapped"] = value
        else:
            setattr(self._settings(), name, value)

    def configure(self, **options: Any) -> None:  # noqa: ANN401
        """Override settings in code, skipping the settings module.

        Example:
            settings.configure(
                DATA_DIR="/tmp/packrat",
                JSON_INDENT=4,
            )
        """
        with self._lock:
            if self._wrapped is None:
                self.__dict__["_wrapped"] = Settings()
            for name, value in options.items():
                setattr(self._wrapped, name, value)

    def is_configured(self) -> bool:
        """Check if settings have been loaded."""
        return self._wrapped is not None


settings = LazySettings()

__all__ = ["ENVIRONMENT_VARIABLE", "LazySettings", "Settings", "global_settings", "settings"]
