"""Accessory capability primitives.

Services are plain records composed onto an accessory. Each one carries a
service type UUID, an optional subtype that tells apart several services of
the same type, a bag of characteristic values and the services linked to it.
"""

import uuid
from typing import Any, Dict, List, Optional

from .config.constants import PLUGIN_NAME

# Namespace for deterministic accessory UUIDs
_UUID_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_DNS, PLUGIN_NAME)


class ServiceType:
    """HAP service type UUIDs."""

    ACCESSORY_INFORMATION = "0000003E-0000-1000-8000-0026BB765291"
    TELEVISION = "000000D8-0000-1000-8000-0026BB765291"
    TELEVISION_SPEAKER = "00000113-0000-1000-8000-0026BB765291"
    INPUT_SOURCE = "000000D9-0000-1000-8000-0026BB765291"


SERVICE_NAMES = {
    ServiceType.ACCESSORY_INFORMATION: "AccessoryInformation",
    ServiceType.TELEVISION: "Television",
    ServiceType.TELEVISION_SPEAKER: "TelevisionSpeaker",
    ServiceType.INPUT_SOURCE: "InputSource",
}


class Characteristic:
    """Characteristic names used on accessory services."""

    NAME = "Name"
    IDENTIFY = "Identify"
    MANUFACTURER = "Manufacturer"
    MODEL = "Model"
    SERIAL_NUMBER = "SerialNumber"
    FIRMWARE_REVISION = "FirmwareRevision"
    CONFIGURED_NAME = "ConfiguredName"
    ACTIVE = "Active"
    ACTIVE_IDENTIFIER = "ActiveIdentifier"
    MUTE = "Mute"
    VOLUME = "Volume"
    IDENTIFIER = "Identifier"
    INPUT_SOURCE_TYPE = "InputSourceType"
    IS_CONFIGURED = "IsConfigured"


def generate_uuid(name: str) -> str:
    """Generate a deterministic accessory UUID from a name."""
    return str(uuid.uuid5(_UUID_NAMESPACE, name))


class Service:
    """A capability bundle attached to an accessory."""

    def __init__(self, service_type: str, display_name: Optional[str] = None, subtype: Optional[str] = None):
        self.uuid = service_type
        self.display_name = display_name
        self.subtype = subtype
        self.characteristics: Dict[str, Any] = {}
        self.linked_services: List["Service"] = []

        if display_name is not None:
            self.characteristics[Characteristic.NAME] = display_name

    @property
    def type_name(self) -> str:
        return SERVICE_NAMES.get(self.uuid, self.uuid)

    def matches(self, service_type: str, subtype: Optional[str] = None) -> bool:
        return self.uuid == service_type and self.subtype == subtype

    def set_characteristic(self, name: str, value: Any) -> "Service":
        """Set a characteristic value. Returns self for chaining."""
        self.characteristics[name] = value
        return self

    def get_characteristic(self, name: str, default: Any = None) -> Any:
        return self.characteristics.get(name, default)

    def add_linked_service(self, service: "Service") -> "Service":
        """Link another service to this one.

        Linking the same service twice is a no-op, so restore paths can link
        unconditionally.
        """
        if service is None:
            raise ValueError(f"Cannot link a missing service to {self!r}")
        if service is self:
            raise ValueError(f"{self!r} cannot be linked to itself")
        if not any(s is service for s in self.linked_services):
            self.linked_services.append(service)
        return self

    def remove_linked_service(self, service: "Service") -> "Service":
        self.linked_services = [s for s in self.linked_services if s is not service]
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the accessory cache (links by uuid/subtype)."""
        return {
            "uuid": self.uuid,
            "displayName": self.display_name,
            "subtype": self.subtype,
            "characteristics": dict(self.characteristics),
            "linked": [
                {"uuid": s.uuid, "subtype": s.subtype} for s in self.linked_services
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Service":
        """Rebuild a service from the cache. Links are resolved by the accessory."""
        service = cls(data["uuid"], data.get("displayName"), data.get("subtype"))
        service.characteristics.update(data.get("characteristics") or {})
        return service

    def __repr__(self) -> str:
        parts = [f"Service({self.type_name}"]
        if self.subtype:
            parts.append(f", subtype={self.subtype!r}")
        parts.append(")")
        return "".join(parts)
