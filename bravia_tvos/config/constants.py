"""All constants for the Bravia platform - single source of truth.

Consolidates values used by:
- platform.py (plugin/platform identifiers, API threshold)
- schema.py (per-TV defaults, poll interval)
- hap.py (identification metadata)
- bravia2mqtt (broker defaults)
"""

# === Host Identification ===
PLUGIN_NAME = "homebridge-bravia-tvos"
PLATFORM_NAME = "BraviaOSPlatform"
PROJECT_URL = "https://github.com/SeydX/homebridge-bravia-tvos"

# === Host API Compatibility ===
MIN_API_VERSION = (2, 2)      # major.minor, older hosts are rejected
HOST_API_VERSION = "2.7"      # version reported by the bundled host runtimes

# === TV Defaults ===
DEFAULT_PORT = 80             # Bravia REST API port
DEFAULT_INTERVAL = 10000      # Poll interval in milliseconds

# === Accessory Information ===
MANUFACTURER = "SeydX"
MODEL = "Sony"

# === Service Subtypes ===
SPEAKER_SUFFIX = " Speaker"
INPUT_MARKER = "Input"

# === MQTT Broker ===
DEFAULT_MQTT_PORT = 1883
DEFAULT_DISCOVERY_PREFIX = "homeassistant"
DEFAULT_CLIENT_ID = "bravia2mqtt"
DEFAULT_RECONNECT_INTERVAL = 30

# === Accessory Cache ===
DEFAULT_CACHE_FILENAME = "accessories.json"
