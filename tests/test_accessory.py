"""Tests for accessories and their services."""

from __future__ import annotations

import pytest

from bravia_tvos.accessory import AccessoryContext, PlatformAccessory
from bravia_tvos.config.schema import TVConfig
from bravia_tvos.hap import Characteristic, Service, ServiceType, generate_uuid

from .conftest import MOCK_TV_FULL


def test_generate_uuid_is_deterministic() -> None:
    """Test the same name always maps to the same UUID."""
    assert generate_uuid("LivingRoom") == generate_uuid("LivingRoom")
    assert generate_uuid("LivingRoom") != generate_uuid("Bedroom")


def test_new_accessory_has_information_service() -> None:
    """Test every accessory starts with AccessoryInformation."""
    accessory = PlatformAccessory("TV", generate_uuid("TV"))

    info = accessory.get_service(ServiceType.ACCESSORY_INFORMATION)
    assert info is not None
    assert info.get_characteristic(Characteristic.NAME) == "TV"
    assert accessory.reachable is False


def test_add_service_rejects_duplicate_subtype() -> None:
    """Test the same type and subtype cannot be added twice."""
    accessory = PlatformAccessory("TV", generate_uuid("TV"))
    accessory.add_service(ServiceType.INPUT_SOURCE, "HDMI 1", "Input HDMI1")
    accessory.add_service(ServiceType.INPUT_SOURCE, "HDMI 2", "Input HDMI2")

    with pytest.raises(ValueError):
        accessory.add_service(ServiceType.INPUT_SOURCE, "HDMI 1", "Input HDMI1")


def test_linking_is_idempotent() -> None:
    """Test linking the same service twice keeps one link."""
    television = Service(ServiceType.TELEVISION, "TV", "TV")
    speaker = Service(ServiceType.TELEVISION_SPEAKER, "TV Speaker", "TV Speaker")

    television.add_linked_service(speaker).add_linked_service(speaker)

    assert television.linked_services == [speaker]


def test_linking_invalid_services() -> None:
    """Test missing and self links are rejected."""
    television = Service(ServiceType.TELEVISION, "TV", "TV")

    with pytest.raises(ValueError):
        television.add_linked_service(None)
    with pytest.raises(ValueError):
        television.add_linked_service(television)


def test_remove_service_drops_links() -> None:
    """Test removing a service unlinks it everywhere."""
    accessory = PlatformAccessory("TV", generate_uuid("TV"))
    television = accessory.add_service(ServiceType.TELEVISION, "TV", "TV")
    hdmi = accessory.add_service(ServiceType.INPUT_SOURCE, "HDMI 1", "Input HDMI1")
    television.add_linked_service(hdmi)

    accessory.remove_service(hdmi)

    assert hdmi not in accessory.services
    assert television.linked_services == []


def test_context_apply_copies_entry() -> None:
    """Test applying a TV entry copies every field but the interval."""
    context = AccessoryContext(interval=2000)

    context.apply(TVConfig.from_dict(MOCK_TV_FULL))

    assert context.ip == "192.168.1.20"
    assert context.port == 8080
    assert context.channels == MOCK_TV_FULL["channels"]
    assert context.channels is not MOCK_TV_FULL["channels"]
    assert context.interval == 2000


def test_accessory_serialization_restores_links() -> None:
    """Test a cached accessory comes back with services, context and links."""
    accessory = PlatformAccessory("TV", generate_uuid("TV"))
    accessory.context.apply(TVConfig.from_dict(MOCK_TV_FULL))
    television = accessory.add_service(ServiceType.TELEVISION, "TV", "TV")
    speaker = accessory.add_service(ServiceType.TELEVISION_SPEAKER, "TV Speaker", "TV Speaker")
    television.add_linked_service(speaker)
    television.set_characteristic(Characteristic.ACTIVE, 1)

    restored = PlatformAccessory.from_dict(accessory.to_dict())

    assert restored.uuid == accessory.uuid
    assert restored.display_name == "TV"
    assert restored.context == accessory.context
    assert [s.uuid for s in restored.services] == [s.uuid for s in accessory.services]

    restored_tv = restored.get_service_by_uuid_and_subtype(ServiceType.TELEVISION, "TV")
    restored_speaker = restored.get_service_by_uuid_and_subtype(ServiceType.TELEVISION_SPEAKER, "TV Speaker")
    assert restored_tv.linked_services == [restored_speaker]
    assert restored_tv.get_characteristic(Characteristic.ACTIVE) == 1


def test_context_from_empty_dict() -> None:
    """Test a context without data takes the defaults."""
    context = AccessoryContext.from_dict(None)

    assert context == AccessoryContext()
    assert context.port == 80
    assert context.interval == 10000
