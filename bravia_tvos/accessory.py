"""Persistent accessory records and their per-TV context."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config.constants import DEFAULT_INTERVAL, DEFAULT_PORT
from .config.schema import TVConfig
from .hap import Service, ServiceType


@dataclass
class AccessoryContext:
    """Connection parameters a device controller reads from its accessory.

    Mirrors TVConfig plus the global poll interval (milliseconds). Cached
    alongside the accessory, so restored accessories keep their last known
    values until the registry refreshes them.
    """

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
    interval: int = DEFAULT_INTERVAL

    def apply(self, tv: TVConfig) -> None:
        """Copy every connection field from a TV entry."""
        self.ip = tv.ip
        self.mac = tv.mac
        self.port = tv.port or DEFAULT_PORT
        self.psk = tv.psk
        self.extra_inputs = tv.extra_inputs or False
        self.cec_inputs = tv.cec_inputs or False
        self.channel_source = tv.channel_source or False
        self.channels = list(tv.channels or [])
        self.apps = list(tv.apps or [])
        self.wol = tv.wol or False

    def to_dict(self) -> Dict[str, Any]:
        return {
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
            "interval": self.interval,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AccessoryContext":
        data = data or {}
        return cls(
            ip=data.get("ip"),
            mac=data.get("mac"),
            port=data.get("port") or DEFAULT_PORT,
            psk=data.get("psk"),
            extra_inputs=bool(data.get("extraInputs", False)),
            cec_inputs=bool(data.get("cecInputs", False)),
            channel_source=bool(data.get("channelSource", False)),
            channels=list(data.get("channels") or []),
            apps=list(data.get("apps") or []),
            wol=bool(data.get("wol", False)),
            interval=data.get("interval") or DEFAULT_INTERVAL,
        )


class PlatformAccessory:
    """An accessory persisted by the host runtime.

    Every accessory starts with an AccessoryInformation service; other
    capabilities are composed on with add_service().
    """

    def __init__(self, display_name: str, uuid: str):
        self.display_name = display_name
        self.uuid = uuid
        self.context = AccessoryContext()
        self.reachable = False
        self.services: List[Service] = [
            Service(ServiceType.ACCESSORY_INFORMATION, display_name)
        ]

    def add_service(self, service_type: str, display_name: Optional[str] = None,
                    subtype: Optional[str] = None) -> Service:
        """Create and attach a service.

        Raises:
            ValueError: A service with the same type and subtype already exists
        """
        if self.get_service_by_uuid_and_subtype(service_type, subtype) is not None:
            raise ValueError(
                f"{self.display_name}: service {service_type} with subtype {subtype!r} already exists"
            )
        service = Service(service_type, display_name, subtype)
        self.services.append(service)
        return service

    def remove_service(self, service: Service) -> None:
        self.services = [s for s in self.services if s is not service]
        for other in self.services:
            other.remove_linked_service(service)

    def get_service(self, service_type: str) -> Optional[Service]:
        """Return the first service of the given type."""
        for service in self.services:
            if service.uuid == service_type:
                return service
        return None

    def get_service_by_uuid_and_subtype(self, service_type: str,
                                        subtype: Optional[str]) -> Optional[Service]:
        for service in self.services:
            if service.matches(service_type, subtype):
                return service
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uuid": self.uuid,
            "displayName": self.display_name,
            "context": self.context.to_dict(),
            "services": [service.to_dict() for service in self.services],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlatformAccessory":
        """Rebuild a cached accessory, restoring services and their links."""
        accessory = cls(data["displayName"], data["uuid"])
        accessory.context = AccessoryContext.from_dict(data.get("context"))

        raw_services = data.get("services") or []
        restored = [Service.from_dict(raw) for raw in raw_services]
        if restored:
            accessory.services = list(restored)
            if accessory.get_service(ServiceType.ACCESSORY_INFORMATION) is None:
                accessory.services.insert(
                    0, Service(ServiceType.ACCESSORY_INFORMATION, accessory.display_name)
                )

        for raw, service in zip(raw_services, restored):
            for link in raw.get("linked") or []:
                target = accessory.get_service_by_uuid_and_subtype(link["uuid"], link.get("subtype"))
                if target is not None:
                    service.add_linked_service(target)

        return accessory

    def __repr__(self) -> str:
        return f"PlatformAccessory({self.display_name!r}, uuid={self.uuid!r})"
