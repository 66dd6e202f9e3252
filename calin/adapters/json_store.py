"""
Scheduling repository persisted to a single JSON file.
"""

import json
import logging
from pathlib import Path

from ..domain.exceptions import StorageError
from .memory_store import InMemoryStore
from .serialization import (
    booking_from_dict,
    booking_to_dict,
    event_type_from_dict,
    event_type_to_dict,
    override_from_dict,
    override_to_dict,
    window_from_dict,
    window_to_dict,
)

logger = logging.getLogger(__name__)


class JsonStore(InMemoryStore):
    """
    In-memory store that loads from and writes back to a JSON file.

    The whole file is rewritten after every mutation. Mutations are applied
    in memory first; if the write fails the store is reloaded from disk so
    memory and file stay in step. File layout:
    {
        "eventTypes": [...],
        "availability": [...],
        "overrides": [...],
        "bookings": [...],
        "settings": {"timezone": "..."}
    }
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug("Data file %s does not exist yet, starting empty", self.path)
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Could not read data file {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StorageError(f"Data file {self.path} must contain a JSON object")

        try:
            for item in data.get("eventTypes", []):
                event_type = event_type_from_dict(item)
                self.event_types[event_type.id] = event_type
            for item in data.get("availability", []):
                window = window_from_dict(item)
                self.windows[window.id] = window
            for item in data.get("overrides", []):
                override = override_from_dict(item)
                self.overrides[override.id] = override
            for item in data.get("bookings", []):
                booking = booking_from_dict(item)
                self.bookings[booking.id] = booking
            self.settings.update({str(k): str(v) for k, v in data.get("settings", {}).items()})
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Malformed record in {self.path}: {exc}") from exc

        logger.debug(
            "Loaded %d event types and %d bookings from %s",
            len(self.event_types), len(self.bookings), self.path,
        )

    def _reload(self) -> None:
        """Drop unsaved changes and read the file again."""
        super().__init__()
        self._load()

    def _changed(self) -> None:
        data = {
            "eventTypes": [event_type_to_dict(et) for et in self.event_types.values()],
            "availability": [window_to_dict(w) for w in self.windows.values()],
            "overrides": [override_to_dict(o) for o in self.overrides.values()],
            "bookings": [booking_to_dict(b) for b in self.bookings.values()],
            "settings": dict(self.settings),
        }

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp_path.replace(self.path)
        except OSError as exc:
            self._reload()
            raise StorageError(f"Could not write data file {self.path}: {exc}") from exc

        logger.debug("Persisted store to %s", self.path)
