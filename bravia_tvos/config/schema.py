"""Configuration schema, defaults, and validation."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import (
    DEFAULT_CLIENT_ID,
    DEFAULT_DISCOVERY_PREFIX,
    DEFAULT_INTERVAL,
    DEFAULT_MQTT_PORT,
    DEFAULT_PORT,
    DEFAULT_RECONNECT_INTERVAL,
)


class ConfigError(ValueError):
    """Raised when a TV entry is missing a field the platform cannot default."""


# Default configuration for a single TV (camelCase keys, as written by users)
DEFAULT_TV_CONFIG: Dict[str, Any] = {
    "name": None,                # Required - unique accessory name
    "ip": None,                  # Required - TV IP address
    "mac": None,                 # For Wake-on-LAN
    "port": DEFAULT_PORT,        # 80
    "psk": None,                 # Pre-shared key set on the TV
    "extraInputs": False,
    "cecInputs": False,
    "channelSource": False,
    "channels": [],
    "apps": [],
    "wol": False,
}


# Full config structure
DEFAULT_CONFIG: Dict[str, Any] = {
    # Poll interval in seconds (converted to milliseconds for accessories)
    "interval": 10,

    # Configured TVs - ordered list, name is the unique key
    "tvs": [],

    # MQTT broker settings (for bravia2mqtt host)
    "mqtt": {
        "host": None,                # Required for bridge
        "port": DEFAULT_MQTT_PORT,
        "username": None,
        "password": None,
        "discovery_prefix": DEFAULT_DISCOVERY_PREFIX,
        "client_id": DEFAULT_CLIENT_ID,
    },

    # Host operation options
    "options": {
        "discovery": True,
        "reconnect_interval": DEFAULT_RECONNECT_INTERVAL,
        "log_level": "INFO",
        "cache_path": None,          # Defaults to ./accessories.json
    },
}


@dataclass
class TVConfig:
    """A single configured Bravia TV."""

    name: str
    ip: Optional[str] = None
    mac: Optional[str] = None
    port: int = DEFAULT_PORT
    psk: Optional[str] = None
    extra_inputs: bool = False
    cec_inputs: bool = False
    channel_source: bool = False
    channels: List[Any] = field(default_factory=list)
    apps: List[Any] = field(default_factory=list)
    wol: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TVConfig":
        """Build a TV entry from a raw config dict, defaulting absent fields.

        Falsy values fall back to their defaults, so ``port: 0`` becomes 80
        and ``channels: null`` becomes an empty list. A non-string name such
        as an unquoted YAML number is converted to a string.
        """
        name = data.get("name")
        return cls(
            name=str(name) if name is not None else None,
            ip=data.get("ip"),
            mac=data.get("mac"),
            port=data.get("port") or DEFAULT_PORT,
            psk=data.get("psk"),
            extra_inputs=bool(data.get("extraInputs") or False),
            cec_inputs=bool(data.get("cecInputs") or False),
            channel_source=bool(data.get("channelSource") or False),
            channels=list(data.get("channels") or []),
            apps=list(data.get("apps") or []),
            wol=bool(data.get("wol") or False),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the camelCase config format."""
        return {
            "name": self.name,
            "ip": self.ip,
            "mac": self.mac,
            "port": self.port,
            "psk": self.psk,
            "extraInputs": self.extra_inputs,
            "cecInputs": self.cec_inputs,
            "channelSource": self.channel_source,
            "channels": list(self.channels),
            "apps": list(self.apps),
            "wol": self.wol,
        }


def deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries, override takes precedence.

    Args:
        base: Base dictionary
        override: Override dictionary (values take precedence)

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif value is not None:  # Don't override with None
            result[key] = value
    return result


def interval_ms(seconds: Any) -> int:
    """Convert the configured poll interval to milliseconds.

    Args:
        seconds: Configured interval in seconds (may be None, 0 or a string)

    Returns:
        ``seconds * 1000``, or DEFAULT_INTERVAL when the value is falsy or
        not a number
    """
    if not seconds:
        return DEFAULT_INTERVAL
    try:
        value = int(float(seconds) * 1000)
    except (TypeError, ValueError):
        return DEFAULT_INTERVAL
    return value or DEFAULT_INTERVAL


def parse_tvs(config: Dict) -> List[TVConfig]:
    """Normalize the ``tvs`` section into TV entries.

    A missing or non-list ``tvs`` value yields an empty list. Entries that
    are not mappings are skipped.
    """
    tvs = config.get("tvs")
    if not isinstance(tvs, list):
        return []
    return [TVConfig.from_dict(tv) for tv in tvs if isinstance(tv, dict)]


def validate_config(config: Dict, for_bridge: bool = False) -> List[str]:
    """Validate configuration and return list of errors.

    Args:
        config: Configuration dictionary
        for_bridge: If True, also validate MQTT settings

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    tvs = config.get("tvs", [])
    if tvs is not None and not isinstance(tvs, list):
        errors.append("tvs must be a list")
        tvs = []

    for index, tv in enumerate(tvs or []):
        if not isinstance(tv, dict):
            errors.append(f"tvs[{index}] must be a mapping")
            continue
        name = tv.get("name")
        if name is None or name == "":
            errors.append(f"tvs[{index}].name is required")
        elif not isinstance(name, str):
            errors.append(f"tvs[{index}].name must be a string, quote it in YAML")
        if not tv.get("ip"):
            errors.append(f"tvs[{index}].ip is required")

    names = Counter(
        str(tv["name"]) for tv in tvs or [] if isinstance(tv, dict) and tv.get("name") not in (None, "")
    )
    for name, count in names.items():
        if count > 1:
            errors.append(f"TV name '{name}' is used {count} times, names must be unique")

    interval = config.get("interval")
    if interval is not None:
        if isinstance(interval, bool) or not isinstance(interval, (int, float)):
            errors.append("interval must be a number of seconds")
        elif interval < 0:
            errors.append("interval must not be negative")

    if for_bridge:
        mqtt = config.get("mqtt", {})
        if not mqtt.get("host"):
            errors.append("mqtt.host is required for bridge mode")

    return errors
