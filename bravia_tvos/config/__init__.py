"""Unified configuration management for the Bravia platform.

Provides:
- YAML-based configuration with environment variable overrides
- Import of the platform block from a host JSON config
- Typed TV entries with documented defaults
- Single source of truth for all constants
"""

# Constants - single source of truth
from .constants import (
    # Host identification
    PLUGIN_NAME,
    PLATFORM_NAME,
    PROJECT_URL,
    MIN_API_VERSION,
    HOST_API_VERSION,
    # TV defaults
    DEFAULT_PORT,
    DEFAULT_INTERVAL,
    # Accessory information
    MANUFACTURER,
    MODEL,
    # MQTT
    DEFAULT_MQTT_PORT,
    DEFAULT_DISCOVERY_PREFIX,
    DEFAULT_CLIENT_ID,
    DEFAULT_RECONNECT_INTERVAL,
    DEFAULT_CACHE_FILENAME,
)

# Schema and validation
from .schema import (
    DEFAULT_CONFIG,
    DEFAULT_TV_CONFIG,
    ConfigError,
    TVConfig,
    deep_merge,
    interval_ms,
    parse_tvs,
    validate_config,
)

# Configuration loading
from .loader import (
    load_config,
    save_config,
    CONFIG_SEARCH_PATHS,
)


__all__ = [
    # Constants
    "PLUGIN_NAME",
    "PLATFORM_NAME",
    "PROJECT_URL",
    "MIN_API_VERSION",
    "HOST_API_VERSION",
    "DEFAULT_PORT",
    "DEFAULT_INTERVAL",
    "MANUFACTURER",
    "MODEL",
    "DEFAULT_MQTT_PORT",
    "DEFAULT_DISCOVERY_PREFIX",
    "DEFAULT_CLIENT_ID",
    "DEFAULT_RECONNECT_INTERVAL",
    "DEFAULT_CACHE_FILENAME",
    # Schema
    "DEFAULT_CONFIG",
    "DEFAULT_TV_CONFIG",
    "ConfigError",
    "TVConfig",
    "deep_merge",
    "interval_ms",
    "parse_tvs",
    "validate_config",
    # Loader
    "load_config",
    "save_config",
    "CONFIG_SEARCH_PATHS",
]
