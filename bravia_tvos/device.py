"""Per-accessory device controllers.

The platform builds one controller per configured accessory and never
waits on it. Controllers read their connection parameters from
``accessory.context`` and own any polling or network I/O themselves.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable

from .accessory import AccessoryContext, PlatformAccessory

if TYPE_CHECKING:
    from .platform import BraviaOSPlatform

_LOGGER = logging.getLogger(__name__)

# Signature of a controller factory: (platform, accessory) -> controller
DeviceFactory = Callable[["BraviaOSPlatform", PlatformAccessory], Any]


class Device:
    """Default controller: binds an accessory to its platform.

    Performs no I/O. Protocol clients subclass it or are passed to the
    platform as a different ``device_factory``.
    """

    def __init__(self, platform: "BraviaOSPlatform", accessory: PlatformAccessory):
        self.platform = platform
        self.accessory = accessory
        self.log = platform.log

        self.log.debug(
            "%s bound to %s:%s (poll every %dms)",
            accessory.display_name,
            self.context.ip,
            self.context.port,
            self.context.interval,
        )

    @property
    def context(self) -> AccessoryContext:
        return self.accessory.context

    @property
    def name(self) -> str:
        return self.accessory.display_name
