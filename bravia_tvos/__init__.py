"""Sony Bravia accessory platform.

Registers configured Bravia TVs as persistent host accessories and keeps
them in sync with the configuration.
"""

__version__ = "1.0.0"

from .hap import (
    Characteristic,
    Service,
    ServiceType,
    generate_uuid,
)
from .accessory import AccessoryContext, PlatformAccessory
from .config import (
    # Config loading
    load_config,
    save_config,
    # Schema
    ConfigError,
    TVConfig,
    interval_ms,
    parse_tvs,
    validate_config,
    # Constants
    PLUGIN_NAME,
    PLATFORM_NAME,
    DEFAULT_PORT,
    DEFAULT_INTERVAL,
    MANUFACTURER,
    MODEL,
)
from .storage import AccessoryCache
from .api import (
    DID_FINISH_LAUNCHING,
    SHUTDOWN,
    HostAPI,
    IncompatibleAPIError,
    check_api_version,
)
from .registry import AccessoryRegistry
from .device import Device
from .platform import BraviaOSPlatform, serial_number

__all__ = [
    "__version__",
    # Capabilities
    "Characteristic",
    "Service",
    "ServiceType",
    "generate_uuid",
    "AccessoryContext",
    "PlatformAccessory",
    # Config
    "load_config",
    "save_config",
    "ConfigError",
    "TVConfig",
    "interval_ms",
    "parse_tvs",
    "validate_config",
    "PLUGIN_NAME",
    "PLATFORM_NAME",
    "DEFAULT_PORT",
    "DEFAULT_INTERVAL",
    "MANUFACTURER",
    "MODEL",
    # Host runtime
    "AccessoryCache",
    "DID_FINISH_LAUNCHING",
    "SHUTDOWN",
    "HostAPI",
    "IncompatibleAPIError",
    "check_api_version",
    # Platform
    "AccessoryRegistry",
    "Device",
    "BraviaOSPlatform",
    "serial_number",
]
