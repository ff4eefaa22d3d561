"""Live and desired accessory indexes for the platform."""

import logging
from typing import Dict, Iterable, List, Optional

from .accessory import PlatformAccessory
from .config.schema import TVConfig

_LOGGER = logging.getLogger(__name__)


class AccessoryRegistry:
    """Owns the accessory bookkeeping of one platform.

    ``accessories`` is the ordered live list, ``live`` indexes it by display
    name and ``desired`` indexes the configured TVs by name. Only the
    platform mutates these; controllers get read access through it.
    """

    def __init__(self):
        self.accessories: List[PlatformAccessory] = []
        self.live: Dict[str, PlatformAccessory] = {}
        self.desired: Dict[str, TVConfig] = {}

    def set_desired(self, tvs: Iterable[TVConfig]) -> Dict[str, TVConfig]:
        """Index configured TVs by name.

        A repeated name replaces the earlier entry but keeps its position.
        """
        desired: Dict[str, TVConfig] = {}
        for tv in tvs:
            if tv.name in desired:
                _LOGGER.warning("Duplicate TV name '%s' in config, using the later entry", tv.name)
            desired[tv.name] = tv
        self.desired = desired
        return desired

    def is_live(self, name: str) -> bool:
        return name in self.live

    def get(self, name: str) -> Optional[PlatformAccessory]:
        return self.live.get(name)

    def track(self, accessory: PlatformAccessory):
        """Add an accessory to the live list and index.

        Tracking an accessory whose UUID is already listed replaces the old
        record in place.
        """
        self.live[accessory.display_name] = accessory
        for index, existing in enumerate(self.accessories):
            if existing.uuid == accessory.uuid:
                self.accessories[index] = accessory
                return
        self.accessories.append(accessory)

    def discard(self, accessory: PlatformAccessory):
        """Drop an accessory from the live list and index."""
        if self.live.get(accessory.display_name) is accessory:
            del self.live[accessory.display_name]
        self.accessories = [a for a in self.accessories if a is not accessory]

    def orphans(self) -> List[PlatformAccessory]:
        """Live accessories whose name is no longer configured."""
        return [a for a in self.accessories if a.display_name not in self.desired]
