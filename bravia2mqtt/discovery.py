"""Home Assistant MQTT Discovery for bravia2mqtt.

The host only publishes discovery configs and availability. The ``state/*``
and ``set/*`` topics advertised here belong to the TV controller passed to
the platform as ``device_factory``; build them with :func:`get_state_topic`
and :func:`get_command_topic`.
"""

import re
from typing import Optional

from bravia_tvos.accessory import PlatformAccessory
from bravia_tvos.config.constants import DEFAULT_DISCOVERY_PREFIX, MANUFACTURER, MODEL
from bravia_tvos.hap import Characteristic, ServiceType

from . import __version__

BASE_TOPIC = "bravia2mqtt"
AVAILABILITY_TOPIC = f"{BASE_TOPIC}/available"


def get_device_id(accessory: PlatformAccessory) -> str:
    """Generate a topic-safe device ID from the accessory UUID.

    Names like "Living Room" and "living-room" slug to the same text, the
    UUID keeps their topics apart.
    """
    return accessory.uuid.replace("-", "")


def get_object_id(accessory: PlatformAccessory) -> str:
    """Readable entity ID suggestion from the accessory name."""
    slug = re.sub(r"[^a-z0-9]+", "_", accessory.display_name.lower()).strip("_")
    return f"bravia_{slug or get_device_id(accessory)}"


def get_state_topic(device_id: str, key: str) -> str:
    """Topic a controller publishes the ``key`` state on (power, volume, mute, source)."""
    return f"{BASE_TOPIC}/{device_id}/state/{key}"


def get_command_topic(device_id: str, key: str) -> str:
    """Topic a controller receives ``key`` commands on."""
    return f"{BASE_TOPIC}/{device_id}/set/{key}"


def get_device_info(accessory: PlatformAccessory) -> dict:
    """Generate Home Assistant device info from the AccessoryInformation service."""
    info = accessory.get_service(ServiceType.ACCESSORY_INFORMATION)

    device = {
        "identifiers": [f"bravia_{accessory.uuid}"],
        "name": accessory.display_name,
        "manufacturer": info.get_characteristic(Characteristic.MANUFACTURER, MANUFACTURER),
        "model": info.get_characteristic(Characteristic.MODEL, MODEL),
        "sw_version": info.get_characteristic(Characteristic.FIRMWARE_REVISION, __version__),
    }

    serial = info.get_characteristic(Characteristic.SERIAL_NUMBER)
    if serial:
        device["serial_number"] = serial

    if accessory.context.mac:
        device["connections"] = [["mac", accessory.context.mac.lower()]]

    return device


def get_availability() -> list[dict]:
    """Generate availability config."""
    return [
        {
            "topic": AVAILABILITY_TOPIC,
            "payload_available": "online",
            "payload_not_available": "offline",
        }
    ]


def get_input_names(accessory: PlatformAccessory) -> list[str]:
    """Names of the InputSource services a controller attached."""
    names = []
    for service in accessory.services:
        if service.uuid != ServiceType.INPUT_SOURCE:
            continue
        name = service.get_characteristic(Characteristic.CONFIGURED_NAME) or service.display_name
        if name:
            names.append(name)
    return names


def generate_media_player_discovery(accessory: PlatformAccessory, discovery_prefix: str) -> tuple[str, dict]:
    """Generate media player discovery payload for the television service.

    Returns:
        Tuple of (topic, payload)
    """
    device_id = get_device_id(accessory)
    topic = f"{discovery_prefix}/media_player/bravia_{device_id}/config"

    payload = {
        "name": None,  # Use device name
        "unique_id": f"bravia_{device_id}_media_player",
        "object_id": get_object_id(accessory),
        "device": get_device_info(accessory),
        "availability": get_availability(),
        # State
        "state_topic": get_state_topic(device_id, "power"),
        "state_value_template": "{{ 'on' if value == 'ON' else 'off' }}",
        # Commands
        "command_topic": get_command_topic(device_id, "power"),
        "payload_on": "ON",
        "payload_off": "OFF",
        # Volume
        "volume_level_topic": get_state_topic(device_id, "volume"),
        "volume_level_template": "{{ value | float / 100 }}",
        "set_volume_topic": get_command_topic(device_id, "volume"),
        "icon": "mdi:television",
    }

    inputs = get_input_names(accessory)
    if inputs:
        payload["source_list"] = inputs
        payload["source_topic"] = get_state_topic(device_id, "source")
        payload["source_command_topic"] = get_command_topic(device_id, "source")

    return topic, payload


def generate_mute_switch_discovery(accessory: PlatformAccessory, discovery_prefix: str) -> tuple[str, dict]:
    """Generate switch for the speaker's mute control."""
    device_id = get_device_id(accessory)
    topic = f"{discovery_prefix}/switch/bravia_{device_id}_mute/config"

    payload = {
        "name": "Mute",
        "unique_id": f"bravia_{device_id}_mute",
        "object_id": f"{get_object_id(accessory)}_mute",
        "device": get_device_info(accessory),
        "availability": get_availability(),
        "state_topic": get_state_topic(device_id, "mute"),
        "command_topic": get_command_topic(device_id, "mute"),
        "payload_on": "ON",
        "payload_off": "OFF",
        "state_on": "ON",
        "state_off": "OFF",
        "icon": "mdi:volume-off",
    }

    return topic, payload


def generate_input_select_discovery(
    accessory: PlatformAccessory, discovery_prefix: str, inputs: list[str]
) -> tuple[str, dict]:
    """Generate select discovery for the input sources."""
    device_id = get_device_id(accessory)
    topic = f"{discovery_prefix}/select/bravia_{device_id}_input/config"

    payload = {
        "name": "Input",
        "unique_id": f"bravia_{device_id}_input",
        "object_id": f"{get_object_id(accessory)}_input",
        "device": get_device_info(accessory),
        "availability": get_availability(),
        "state_topic": get_state_topic(device_id, "source"),
        "command_topic": get_command_topic(device_id, "source"),
        "options": inputs,
        "icon": "mdi:video-input-hdmi",
    }

    return topic, payload


def generate_all_discoveries(
    accessory: PlatformAccessory, discovery_prefix: Optional[str] = None
) -> list[tuple[str, dict]]:
    """Generate all discovery payloads for one accessory.

    Args:
        accessory: Registered accessory
        discovery_prefix: Home Assistant discovery prefix

    Returns:
        List of (topic, payload) tuples
    """
    discovery_prefix = discovery_prefix or DEFAULT_DISCOVERY_PREFIX
    discoveries = []

    if accessory.get_service(ServiceType.TELEVISION) is not None:
        discoveries.append(generate_media_player_discovery(accessory, discovery_prefix))

    if accessory.get_service(ServiceType.TELEVISION_SPEAKER) is not None:
        discoveries.append(generate_mute_switch_discovery(accessory, discovery_prefix))

    inputs = get_input_names(accessory)
    if inputs:
        discoveries.append(generate_input_select_discovery(accessory, discovery_prefix, inputs))

    return discoveries


def remove_all_discoveries(accessory: PlatformAccessory, discovery_prefix: Optional[str] = None) -> list[str]:
    """Generate list of discovery topics to clear (for removal).

    Returns:
        List of topics to publish empty payload to
    """
    discovery_prefix = discovery_prefix or DEFAULT_DISCOVERY_PREFIX
    device_id = get_device_id(accessory)

    return [
        f"{discovery_prefix}/media_player/bravia_{device_id}/config",
        f"{discovery_prefix}/switch/bravia_{device_id}_mute/config",
        f"{discovery_prefix}/select/bravia_{device_id}_input/config",
    ]
