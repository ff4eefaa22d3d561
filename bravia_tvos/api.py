"""Host runtime interface.

The host persists accessories, exposes the capability primitives in
``hap`` and drives the platform's lifecycle callbacks. HostAPI is a
complete in-process host; bravia2mqtt subclasses it to publish accessories
to an MQTT broker.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from . import hap
from .accessory import PlatformAccessory
from .config.constants import HOST_API_VERSION, MIN_API_VERSION
from .storage import AccessoryCache

_LOGGER = logging.getLogger(__name__)

# Lifecycle events
DID_FINISH_LAUNCHING = "didFinishLaunching"
SHUTDOWN = "shutdown"


class IncompatibleAPIError(Exception):
    """Raised when the host API is older than the platform supports."""


def parse_api_version(version: Any) -> Tuple[int, int]:
    """Parse a host API version into (major, minor).

    Accepts numbers (2.2) and strings ("2.7", "2.7.1").

    Raises:
        IncompatibleAPIError: Version cannot be parsed
    """
    parts = str(version).split(".")
    try:
        major = int(parts[0])
        minor = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError as err:
        raise IncompatibleAPIError(f"Unparseable API version: {version!r}") from err
    return major, minor


def check_api_version(version: Any, minimum: Tuple[int, int] = MIN_API_VERSION):
    """Fail fast when the host API is older than ``minimum``."""
    if parse_api_version(version) < minimum:
        raise IncompatibleAPIError(
            "Unexpected API version {}. Please update your host (requires {}.{} or later)".format(
                version, *minimum
            )
        )


class HostAPI:
    """In-process host runtime with an optional persistent accessory cache."""

    def __init__(self, version: Any = HOST_API_VERSION, cache: Optional[AccessoryCache] = None):
        """Initialize the host.

        Args:
            version: API version reported to platforms
            cache: Accessory cache, or None to keep accessories in memory only
        """
        self.version = version
        self.hap = hap
        self.platform_accessory = PlatformAccessory
        self.cache = cache

        self._listeners: Dict[str, List[Callable[..., None]]] = {}
        self._accessories: Dict[str, PlatformAccessory] = {}

    @property
    def accessories(self) -> List[PlatformAccessory]:
        """Currently registered accessories."""
        return list(self._accessories.values())

    def on(self, event: str, callback: Callable[..., None]):
        """Subscribe to a lifecycle event."""
        self._listeners.setdefault(event, []).append(callback)

    def emit(self, event: str, *args):
        """Invoke every listener for ``event`` in subscription order."""
        for callback in list(self._listeners.get(event, [])):
            callback(*args)

    def register_platform_accessories(self, plugin_name: str, platform_name: str,
                                      accessories: Iterable[PlatformAccessory]):
        """Take ownership of new accessories and persist them."""
        accessories = list(accessories)
        for accessory in accessories:
            _LOGGER.debug("Registering %s for %s/%s", accessory.display_name, plugin_name, platform_name)
            self._accessories[accessory.uuid] = accessory
        if self.cache:
            self.cache.save(accessories)

    def unregister_platform_accessories(self, plugin_name: str, platform_name: str,
                                        accessories: Iterable[PlatformAccessory]):
        """Forget accessories and drop them from the cache."""
        accessories = list(accessories)
        for accessory in accessories:
            _LOGGER.debug("Unregistering %s for %s/%s", accessory.display_name, plugin_name, platform_name)
            self._accessories.pop(accessory.uuid, None)
        if self.cache:
            self.cache.remove(accessories)

    def update_platform_accessories(self, accessories: Iterable[PlatformAccessory]):
        """Persist changes to already registered accessories."""
        if self.cache:
            self.cache.save(a for a in accessories if a.uuid in self._accessories)

    def launch(self, platform: Any):
        """Restore cached accessories into ``platform`` and finish launching.

        Each cached accessory is passed to ``platform.configure_accessory``
        before DID_FINISH_LAUNCHING is emitted.
        """
        if self.cache:
            for accessory in self.cache.load():
                self._accessories[accessory.uuid] = accessory
                platform.configure_accessory(accessory)
            _LOGGER.info("Restored %d cached accessories", len(self._accessories))

        self.emit(DID_FINISH_LAUNCHING)
        self.update_platform_accessories(self.accessories)

    def shutdown(self):
        """Emit SHUTDOWN and flush the cache."""
        self.emit(SHUTDOWN)
        self.update_platform_accessories(self.accessories)
