"""Accessory cache for persistence across restarts.

Stores serialized accessories keyed by UUID. Host runtimes load the cache
at startup and hand each record back to the platform for configuration.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .accessory import PlatformAccessory
from .config.constants import DEFAULT_CACHE_FILENAME

_LOGGER = logging.getLogger(__name__)


class AccessoryCache:
    """Manages persistent storage of platform accessories."""

    def __init__(self, storage_path: Optional[Path] = None):
        """Initialize accessory storage.

        Args:
            storage_path: Path to cache file. Defaults to ./accessories.json
        """
        self.storage_path = Path(storage_path) if storage_path else Path.cwd() / DEFAULT_CACHE_FILENAME
        self._ensure_storage_dir()

    def _ensure_storage_dir(self):
        """Create storage directory if it doesn't exist."""
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)

    def _load_all(self) -> Dict[str, Any]:
        """Load all cached accessories."""
        if not self.storage_path.exists():
            return {}
        try:
            with open(self.storage_path, "r") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            _LOGGER.warning("Ignoring unreadable accessory cache %s: %s", self.storage_path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save_all(self, data: Dict[str, Any]):
        """Save all accessories to storage."""
        self._ensure_storage_dir()
        with open(self.storage_path, "w") as f:
            json.dump(data, f, indent=2)

    def load(self) -> List[PlatformAccessory]:
        """Restore every cached accessory.

        Records that cannot be rebuilt are skipped with a warning.
        """
        accessories = []
        for key, raw in self._load_all().items():
            try:
                accessories.append(PlatformAccessory.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                _LOGGER.warning("Skipping cached accessory %s: %s", key, e)
        return accessories

    def save(self, accessories: Iterable[PlatformAccessory]):
        """Add or update accessories in the cache."""
        data = self._load_all()
        for accessory in accessories:
            data[accessory.uuid] = accessory.to_dict()
        self._save_all(data)

    def remove(self, accessories: Iterable[PlatformAccessory]):
        """Delete accessories from the cache."""
        data = self._load_all()
        changed = False
        for accessory in accessories:
            if data.pop(accessory.uuid, None) is not None:
                changed = True
        if changed:
            self._save_all(data)

    def list_accessories(self) -> List[Dict[str, Any]]:
        """Summarize cached accessories.

        Returns:
            List of dicts with uuid, name and ip.
        """
        return [
            {
                "uuid": key,
                "name": raw.get("displayName"),
                "ip": (raw.get("context") or {}).get("ip"),
            }
            for key, raw in self._load_all().items()
        ]
