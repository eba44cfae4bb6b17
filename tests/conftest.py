"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from packrat.conf import settings

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def configure_test_settings() -> Generator[None]:
    """Configure settings for each test and reset them after the test completes.

    Yields:
        None
    """
    settings.configure(
        DATA_DIR="data",
        PLAYERS_DIR="players",
        NPCS_DIR="npcs",
        RECORD_FILE_EXTENSION=".json",
        JSON_INDENT=2,
        MAX_STACK_QUANTITY=2**32 - 1,
        PLAYER_DEFAULT_KIND="player",
        NPC_DEFAULT_KIND="npc",
        INSTALLED_KINDS=["packrat.kinds.players", "packrat.kinds.npcs"],
    )
    yield
    # Reset settings after test
    settings._wrapped = None
