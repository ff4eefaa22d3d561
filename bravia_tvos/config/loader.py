"""Configuration loading with YAML support, env overrides, and host config import."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .constants import PLATFORM_NAME
from .schema import DEFAULT_CONFIG, deep_merge

_LOGGER = logging.getLogger(__name__)

# Config search paths (in priority order)
CONFIG_SEARCH_PATHS = [
    Path("config.yaml"),                                      # Current directory (primary)
    Path("/app/config.yaml"),                                 # Docker
    Path.home() / ".config" / "bravia_tvos" / "config.yaml",  # User home
    Path("/etc/bravia_tvos/config.yaml"),                     # System-wide
]

# Environment variable mappings
# Format: "ENV_VAR": ("section", "key", optional_converter)
# A section of None addresses a top-level key.
ENV_MAPPINGS = {
    # MQTT settings
    "MQTT_HOST": ("mqtt", "host"),
    "MQTT_PORT": ("mqtt", "port", int),
    "MQTT_USERNAME": ("mqtt", "username"),
    "MQTT_PASSWORD": ("mqtt", "password"),
    # Platform
    "POLL_INTERVAL": (None, "interval", int),
    # Options
    "LOG_LEVEL": ("options", "log_level"),
    "RECONNECT_INTERVAL": ("options", "reconnect_interval", int),
    "CACHE_PATH": ("options", "cache_path"),
}

# Module-level cached config
_cached_config: Optional[Dict] = None
_cached_path: Optional[Path] = None


def load_config(config_path: Optional[str] = None, use_cache: bool = True) -> Dict[str, Any]:
    """Load configuration from a YAML or host JSON file with environment overrides.

    Args:
        config_path: Explicit path to config file, or None to search
        use_cache: Use cached config if available

    Returns:
        Merged configuration dictionary
    """
    global _cached_config, _cached_path

    if use_cache and _cached_config is not None:
        return _cached_config

    config = _deep_copy_config(DEFAULT_CONFIG)
    loaded_path = None

    # Build search paths
    search_paths: List[Path] = []
    if config_path:
        search_paths.append(Path(config_path))
    search_paths.extend(CONFIG_SEARCH_PATHS)

    for path in search_paths:
        if not path.exists():
            continue
        try:
            user_config = _read_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            _LOGGER.warning("Failed to load %s: %s", path, e)
            continue
        config = deep_merge(config, user_config)
        loaded_path = path
        _LOGGER.info("Loaded config from %s", path)
        break

    # Apply environment variable overrides
    config = _apply_env_overrides(config)

    # Store metadata
    config["_loaded_from"] = str(loaded_path) if loaded_path else None

    # Cache the config
    _cached_config = config
    _cached_path = loaded_path

    return config


def _read_file(path: Path) -> Dict[str, Any]:
    """Read a config file, unwrapping a host ``platforms`` list if present."""
    with open(path) as f:
        if path.suffix == ".json":
            data = json.load(f) or {}
        else:
            data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a mapping")

    return _extract_platform_block(data)


def _extract_platform_block(data: Dict[str, Any]) -> Dict[str, Any]:
    """Pick this platform's block out of a host config with a ``platforms`` list.

    Host runtimes keep one config file for every plugin, e.g.::

        {"platforms": [{"platform": "BraviaOSPlatform", "tvs": [...]}]}

    Files without a ``platforms`` list are returned unchanged.
    """
    platforms = data.get("platforms")
    if not isinstance(platforms, list):
        return data

    for block in platforms:
        if isinstance(block, dict) and block.get("platform") == PLATFORM_NAME:
            block = {k: v for k, v in block.items() if k != "platform"}
            # Keep sibling sections (mqtt, options) from the outer file
            outer = {k: v for k, v in data.items() if k != "platforms"}
            return deep_merge(outer, block)

    _LOGGER.warning("No %s block found in platforms list", PLATFORM_NAME)
    return {k: v for k, v in data.items() if k != "platforms"}


def _deep_copy_config(config: Dict) -> Dict:
    """Create a deep copy of the config dict."""
    result = {}
    for key, value in config.items():
        if isinstance(value, dict):
            result[key] = _deep_copy_config(value)
        elif isinstance(value, list):
            result[key] = value.copy()
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: Dict) -> Dict:
    """Apply environment variable overrides to config."""
    for env_var, mapping in ENV_MAPPINGS.items():
        value = os.environ.get(env_var)
        if value is None:
            continue

        section = mapping[0]
        key = mapping[1]
        converter = mapping[2] if len(mapping) > 2 else str

        try:
            converted_value = converter(value)

            if section is None:
                config[key] = converted_value
            elif section in config:
                config[section][key] = converted_value
            else:
                _LOGGER.warning("Unknown config section: %s", section)

        except (ValueError, KeyError) as e:
            _LOGGER.warning("Invalid env var %s=%s: %s", env_var, value, e)

    return config


def save_config(config: Dict, path: Optional[Path] = None) -> bool:
    """Save configuration to YAML file.

    Args:
        config: Configuration dictionary to save
        path: Destination path, or None for current directory

    Returns:
        True if saved successfully
    """
    if path is None:
        path = Path("config.yaml")

    # Remove internal metadata before saving
    save_data = {k: v for k, v in config.items() if not k.startswith("_")}

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(save_data, f, default_flow_style=False, sort_keys=False)
        _LOGGER.info("Saved config to %s", path)
        return True
    except OSError as e:
        _LOGGER.error("Failed to save config: %s", e)
        return False
