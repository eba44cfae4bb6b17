"""Durable storage backends for entity records."""

from packrat.storage.base import BaseRecordStorage
from packrat.storage.json_file import JsonFileStorage
from packrat.storage.memory import MemoryRecordStorage

__all__ = ["BaseRecordStorage", "JsonFileStorage", "MemoryRecordStorage"]
