"""JSON file storage: one human-readable file per entity.

Records live at <data_dir>/<kind directory>/<key><extension>, for example
data/players/PlayerOne.json or data/npcs/Merchant.json. Files are pretty-printed
JSON so they can be inspected and edited by hand:

    {
      "key": "Merchant",
      "kind": "merchant",
      "items": [
        {"item_id": "healing_potion", "quantity": 10, "stackable": true}
      ]
    }

Writes go to a uniquely named temporary file next to the target, which then
replaces the target, so readers never observe a half-written record.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

from packrat.conf import settings
from packrat.exceptions import RecordDecodeError, RecordNotFoundError, RecordSaveError
from packrat.inventory.record import EntityRecord
from packrat.storage.base import BaseRecordStorage

if TYPE_CHECKING:
    from packrat.kinds.base import BaseEntityKind

logger = logging.getLogger(__name__)


class JsonFileStorage(BaseRecordStorage):
    """Stores each record as a JSON file under a data directory.

    Attributes:
        data_dir: Root directory. Kind directories are created below it on first save.
    """

    def __init__(self, data_dir: Path | str | None = None) -> None:
        """Initialize the storage.

        Args:
            data_dir: Root directory for record files. Defaults to settings.DATA_DIR,
                resolved against the current working directory.
        """
        if data_dir is None:
            data_dir = settings.DATA_DIR
        self.data_dir = Path(data_dir)

    def path_for(self, kind: BaseEntityKind, key: str) -> Path:
        """Get the file path for a record.

        Raises:
            InvalidKeyError: If the key cannot be used as a filename.
        """
        return self.data_dir / kind.directory / kind.filename(key)

    def load(self, kind: BaseEntityKind, key: str) -> EntityRecord:
        """Read and decode the record file for a key."""
        path = self.path_for(kind, key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            msg = f"No {kind.name} record for {key!r} at {path}"
            raise RecordNotFoundError(msg, kind=kind.name, key=key, path=path) from None
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Could not read {kind.name} record for {key!r} at {path}: {e}"
            raise RecordDecodeError(msg, kind=kind.name, key=key, path=path) from e

        try:
            record = EntityRecord.from_dict(json.loads(text), default_kind=kind.default_kind)
        except json.JSONDecodeError as e:
            msg = f"Malformed JSON in {kind.name} record {path}: {e}"
            raise RecordDecodeError(msg, kind=kind.name, key=key, path=path) from e
        except KeyError as e:
            msg = f"Missing field {e.args[0]!r} in {kind.name} record {path}"
            raise RecordDecodeError(msg, kind=kind.name, key=key, path=path) from e
        except (TypeError, ValueError) as e:
            msg = f"Invalid {kind.name} record {path}: {e}"
            raise RecordDecodeError(msg, kind=kind.name, key=key, path=path) from e

        if record.key != key:
            msg = f"{kind.name} record {path} belongs to {record.key!r}, expected {key!r}"
            raise RecordDecodeError(msg, kind=kind.name, key=key, path=path)

        logger.debug("Read %s record %r from %s", kind.name, key, path)
        return record

    def save(self, kind: BaseEntityKind, record: EntityRecord) -> None:
        """Serialize a record and atomically replace its file."""
        path = self.path_for(kind, record.key)
        tmp = path.with_name(f"{path.name}.tmp.{uuid4().hex}")
        try:
            data = json.dumps(record.to_dict(), indent=settings.JSON_INDENT, ensure_ascii=False)
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(data + "\n", encoding="utf-8")
            tmp.replace(path)
        except (OSError, TypeError, ValueError) as e:
            tmp.unlink(missing_ok=True)
            msg = f"Could not write {kind.name} record for {record.key!r} to {path}: {e}"
            raise RecordSaveError(msg, kind=kind.name, key=record.key, path=path) from e

        logger.debug("Wrote %s record %r to %s", kind.name, record.key, path)
