"""Helper functions for setting up packrat.

Most projects only need create_manager(), which configures logging and returns
a GameDataManager over JSON files in the configured data directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

from packrat.events.base import EventBus
from packrat.manager import GameDataManager
from packrat.storage.json_file import JsonFileStorage


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for an application using packrat.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Side effects:
        - Configures the root logger with RichHandler
        - Sets the specified log level
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, markup=False)],
    )


def create_manager(
    data_dir: Path | str | None = None,
    event_bus: EventBus | None = None,
    log_level: str | None = "INFO",
) -> GameDataManager:
    """Create a GameDataManager backed by JSON record files.

    Args:
        data_dir: Root directory for record files. Defaults to settings.DATA_DIR.
        event_bus: Event bus to publish inventory events on. A new one is created
            if omitted.
        log_level: Level passed to setup_logging(), or None to leave logging alone.

    Returns:
        A manager with one store per installed entity kind.

    Example:
        manager = create_manager("data")
        manager.add_npc_item("Merchant", "healing_potion", 10, npc_type="merchant")
    """
    if log_level is not None:
        setup_logging(log_level)
    return GameDataManager(
        storage=JsonFileStorage(data_dir),
        event_bus=event_bus if event_bus is not None else EventBus(),
    )
