"""Default settings for packrat.

Users can override these in their project's settings.py file.

Example:
    # In your project's settings.py:
    from packrat.conf import global_settings

    DATA_DIR = "saves"
    MAX_STACK_QUANTITY = 9999

    INSTALLED_KINDS = [
        *global_settings.INSTALLED_KINDS,
        "mygame.kinds.containers",
    ]
"""

# Storage settings
DATA_DIR = "data"
"""Root directory holding one sub-directory per entity kind."""

PLAYERS_DIR = "players"
"""Sub-directory of DATA_DIR for player records."""

NPCS_DIR = "npcs"
"""Sub-directory of DATA_DIR for NPC records."""

RECORD_FILE_EXTENSION = ".json"
"""File extension appended to the entity key to build a record filename."""

JSON_INDENT = 2
"""Indentation used when writing record files."""

# Inventory settings
MAX_STACK_QUANTITY = 2**32 - 1
"""Largest quantity a single item stack may hold."""

PLAYER_DEFAULT_KIND = "player"
"""Type tag given to newly created player records."""

NPC_DEFAULT_KIND = "npc"
"""Type tag given to newly created NPC records when the caller names none."""

# Installed entity kinds (like Django's INSTALLED_APPS)
INSTALLED_KINDS = [
    "packrat.kinds.players",
    "packrat.kinds.npcs",
]
"""List of module paths to import for entity kind registration.

Example:
    INSTALLED_KINDS = [
        *global_settings.INSTALLED_KINDS,
        "myproject.kinds.chests",
    ]
"""
