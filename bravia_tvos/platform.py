"""Bravia accessory platform.

Keeps the host's persistent accessories in sync with the configured TV
list and hands each configured accessory to a device controller.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from . import __version__
from .accessory import PlatformAccessory
from .api import DID_FINISH_LAUNCHING, check_api_version
from .config.constants import (
    INPUT_MARKER,
    MANUFACTURER,
    MODEL,
    PLATFORM_NAME,
    PLUGIN_NAME,
    PROJECT_URL,
    SPEAKER_SUFFIX,
)
from .config.schema import ConfigError, TVConfig, interval_ms, parse_tvs
from .device import Device, DeviceFactory
from .hap import Characteristic, Service, ServiceType, generate_uuid
from .registry import AccessoryRegistry

_LOGGER = logging.getLogger(__name__)

_SERIAL_DELIMITERS = re.compile(r"[.:]")


def serial_number(ip: Optional[str]) -> str:
    """Derive an accessory serial number from its IP address.

    Raises:
        ConfigError: No IP address available
    """
    if not ip:
        raise ConfigError("ip is required to derive the serial number")
    return _SERIAL_DELIMITERS.sub("", ip)


class BraviaOSPlatform:
    """Platform that registers Sony Bravia TVs as host accessories."""

    def __init__(self, log: Optional[logging.Logger], config: Optional[Dict[str, Any]], api: Any,
                 device_factory: DeviceFactory = Device):
        """Initialize the platform.

        Without an API handle or config the platform stays inert and never
        subscribes to host events.

        Args:
            log: Host log sink, or None for the module logger
            config: Platform config with ``interval`` (seconds) and ``tvs``
            api: Host runtime exposing ``version``, ``on`` and accessory registration
            device_factory: Builds a controller for each configured accessory

        Raises:
            IncompatibleAPIError: Host API is older than 2.2
        """
        self.log = log or _LOGGER
        self.api = None
        self.config = config or {}
        self.device_factory = device_factory
        self.registry = AccessoryRegistry()
        self.devices: Dict[str, Any] = {}

        self.interval = interval_ms(self.config.get("interval"))
        self.tvs: List[TVConfig] = parse_tvs(self.config)

        if not api or config is None:
            return

        check_api_version(api.version)

        self.log.info("**************************************************************")
        self.log.info("%s v%s", PLATFORM_NAME, __version__)
        self.log.info("GitHub: %s", PROJECT_URL)
        self.log.info("**************************************************************")
        self.log.info("start success...")

        self.api = api
        self.api.on(DID_FINISH_LAUNCHING, self.did_finish_launching)

    @property
    def accessories(self) -> List[PlatformAccessory]:
        return self.registry.accessories

    def did_finish_launching(self):
        """Reconcile the configured TVs against the live accessories."""
        desired = self.registry.set_desired(self.tvs)

        for tv in desired.values():
            self.add_or_remove_device(tv)

        # Nothing configured: still prune accessories left from earlier runs
        if not desired:
            self.add_or_remove_device()

    def add_or_remove_device(self, tv: Optional[TVConfig] = None):
        """Add ``tv`` if it has no accessory yet, then remove every orphan."""
        if tv is not None and not tv.name:
            self.log.error("Skipping TV entry without a name (ip %s)", tv.ip)
        elif tv is not None and not self.registry.is_live(tv.name):
            try:
                self.add_accessory(tv)
            except ConfigError as err:
                self.log.error("Cannot add accessory %s: %s", tv.name, err)

        for accessory in self.registry.orphans():
            self.remove_accessory(accessory)

    def add_accessory(self, tv: TVConfig) -> PlatformAccessory:
        """Create, register and start a new accessory for ``tv``."""
        self.log.info("Adding new accessory: %s", tv.name)

        accessory = PlatformAccessory(tv.name, generate_uuid(tv.name))

        self.refresh_context(accessory, tv)
        self.set_accessory_information(accessory)

        television = accessory.add_service(ServiceType.TELEVISION, tv.name, tv.name)
        speaker = accessory.add_service(
            ServiceType.TELEVISION_SPEAKER, tv.name + SPEAKER_SUFFIX, tv.name + SPEAKER_SUFFIX
        )
        television.add_linked_service(speaker)

        self.registry.track(accessory)
        self.api.register_platform_accessories(PLUGIN_NAME, PLATFORM_NAME, [accessory])

        self._start_device(accessory)
        return accessory

    def configure_accessory(self, accessory: PlatformAccessory):
        """Re-adopt an accessory restored from the host's cache."""
        name = accessory.display_name
        self.registry.track(accessory)

        television = accessory.get_service_by_uuid_and_subtype(ServiceType.TELEVISION, name)
        if television is None:
            self.log.warning("%s: cached accessory has no television service, recreating it", name)
            television = accessory.add_service(ServiceType.TELEVISION, name, name)

        speaker = accessory.get_service_by_uuid_and_subtype(
            ServiceType.TELEVISION_SPEAKER, name + SPEAKER_SUFFIX
        )
        if speaker is None:
            self.log.warning("%s: cached accessory has no speaker service, recreating it", name)
            speaker = accessory.add_service(
                ServiceType.TELEVISION_SPEAKER, name + SPEAKER_SUFFIX, name + SPEAKER_SUFFIX
            )

        television.add_linked_service(speaker)

        for service in self._input_services(accessory):
            television.add_linked_service(service)

        self.refresh_context(accessory)
        try:
            self.set_accessory_information(accessory)
        except ConfigError as err:
            self.log.error("Cannot configure accessory %s: %s", name, err)
            return

        if self._find_tv(name) is not None:
            self.log.info("Configuring accessory %s", name)
            self._start_device(accessory)

    def remove_accessory(self, accessory: Optional[PlatformAccessory]):
        """Drop an accessory that is no longer configured."""
        if not accessory:
            return

        self.log.warning("Removing accessory: %s. No longer configured.", accessory.display_name)
        self.registry.discard(accessory)
        self.devices.pop(accessory.display_name, None)
        self.api.unregister_platform_accessories(PLUGIN_NAME, PLATFORM_NAME, [accessory])

    def reload_config(self, config: Dict[str, Any]):
        """Apply a changed config to a running platform.

        Adds new TVs, removes dropped ones and refreshes every remaining
        accessory from its updated entry.
        """
        if self.api is None:
            self.log.warning("Platform is not attached to a host, ignoring config reload")
            return

        self.config = config
        self.interval = interval_ms(config.get("interval"))
        self.tvs = parse_tvs(config)

        known = set(self.registry.live)
        self.did_finish_launching()

        for name in known & set(self.registry.live):
            accessory = self.registry.get(name)
            self.refresh_context(accessory)
            try:
                self.set_accessory_information(accessory)
            except ConfigError as err:
                self.log.error("Cannot refresh accessory %s: %s", name, err)
                continue
            self._start_device(accessory)

        self.api.update_platform_accessories(self.registry.accessories)

    def refresh_context(self, accessory: PlatformAccessory, tv: Optional[TVConfig] = None):
        """Copy the current config for ``accessory`` into its context.

        When ``tv`` is None the entry is looked up by display name; an
        unconfigured accessory only gets the poll interval refreshed.
        """
        accessory.reachable = True
        accessory.context.interval = self.interval

        if tv is None:
            tv = self._find_tv(accessory.display_name)

        if tv is not None:
            accessory.context.apply(tv)

    def set_accessory_information(self, accessory: PlatformAccessory):
        """Publish identification metadata on the AccessoryInformation service.

        Raises:
            ConfigError: The accessory has no IP address
        """
        try:
            serial = serial_number(accessory.context.ip)
        except ConfigError as err:
            raise ConfigError(f"{accessory.display_name}: {err}") from err

        info = accessory.get_service(ServiceType.ACCESSORY_INFORMATION)
        (
            info.set_characteristic(Characteristic.NAME, accessory.display_name)
            .set_characteristic(Characteristic.IDENTIFY, accessory.display_name)
            .set_characteristic(Characteristic.MANUFACTURER, MANUFACTURER)
            .set_characteristic(Characteristic.MODEL, MODEL)
            .set_characteristic(Characteristic.SERIAL_NUMBER, serial)
            .set_characteristic(Characteristic.FIRMWARE_REVISION, __version__)
        )

    def _find_tv(self, name: str) -> Optional[TVConfig]:
        # Last entry wins, same as the desired index
        found = None
        for tv in self.tvs:
            if tv.name == name:
                found = tv
        return found

    def _input_services(self, accessory: PlatformAccessory) -> List[Service]:
        return [
            service
            for service in accessory.services
            if service.uuid == ServiceType.INPUT_SOURCE
            and service.subtype
            and INPUT_MARKER in service.subtype
        ]

    def _start_device(self, accessory: PlatformAccessory):
        self.devices[accessory.display_name] = self.device_factory(self, accessory)
