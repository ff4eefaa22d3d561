"""Fixtures for Bravia platform tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from bravia_tvos.api import HostAPI
from bravia_tvos.config.loader import ENV_MAPPINGS
from bravia_tvos.platform import BraviaOSPlatform
from bravia_tvos.storage import AccessoryCache


# Minimal TV entry, everything optional left out
MOCK_TV_MINIMAL = {
    "name": "LivingRoom",
    "ip": "192.168.1.10",
}

# Fully populated TV entry
MOCK_TV_FULL = {
    "name": "Bedroom",
    "ip": "192.168.1.20",
    "mac": "AA:BB:CC:DD:EE:FF",
    "port": 8080,
    "psk": "0000",
    "extraInputs": True,
    "cecInputs": True,
    "channelSource": True,
    "channels": [{"name": "BBC One", "channel": 1, "source": "dvbt"}],
    "apps": ["Netflix", "YouTube"],
    "wol": True,
}

MOCK_CONFIG = {
    "interval": 5,
    "tvs": [MOCK_TV_MINIMAL, MOCK_TV_FULL],
}


def make_config(*names: str, interval: Any = 5) -> dict:
    """Build a platform config with one TV per name."""
    return {
        "interval": interval,
        "tvs": [
            {"name": name, "ip": f"10.0.0.{index + 1}"}
            for index, name in enumerate(names)
        ],
    }


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep environment overrides out of config tests."""
    for env_var in ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def mock_log() -> MagicMock:
    """Create a mock host log sink."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def mock_device_factory() -> MagicMock:
    """Create a mock device controller factory."""
    return MagicMock(name="device_factory")


@pytest.fixture
def host_api() -> HostAPI:
    """Create an in-memory host with spied registration calls."""
    api = HostAPI()
    api.register_platform_accessories = MagicMock(wraps=api.register_platform_accessories)
    api.unregister_platform_accessories = MagicMock(wraps=api.unregister_platform_accessories)
    return api


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    """Path for a throwaway accessory cache."""
    return tmp_path / "cache" / "accessories.json"


@pytest.fixture
def cached_host(cache_path: Path) -> Generator[HostAPI, None, None]:
    """Create a host backed by a file cache."""
    yield HostAPI(cache=AccessoryCache(cache_path))


def create_platform(
    config: dict,
    api: HostAPI,
    device_factory: MagicMock,
    log: MagicMock | None = None,
) -> BraviaOSPlatform:
    """Create a platform attached to ``api``."""
    return BraviaOSPlatform(log or MagicMock(spec=logging.Logger), config, api, device_factory=device_factory)
