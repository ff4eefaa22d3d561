"""Tests for configuration loading and validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from bravia_tvos.config import (
    DEFAULT_INTERVAL,
    TVConfig,
    interval_ms,
    load_config,
    parse_tvs,
    save_config,
    validate_config,
)
from bravia_tvos.config import loader

from .conftest import MOCK_CONFIG, MOCK_TV_FULL, MOCK_TV_MINIMAL


@pytest.fixture(autouse=True)
def no_search_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    """Only load the files a test points at."""
    monkeypatch.setattr(loader, "CONFIG_SEARCH_PATHS", [])


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (5, 5000),
        (2.5, 2500),
        ("15", 15000),
        (0, DEFAULT_INTERVAL),
        (None, DEFAULT_INTERVAL),
        ("soon", DEFAULT_INTERVAL),
    ],
)
def test_interval_ms(seconds, expected: int) -> None:
    """Test interval conversion and its fallback."""
    assert interval_ms(seconds) == expected


def test_tv_config_defaults() -> None:
    """Test absent optional fields take their defaults."""
    tv = TVConfig.from_dict(MOCK_TV_MINIMAL)

    assert tv.name == "LivingRoom"
    assert tv.ip == "192.168.1.10"
    assert tv.port == 80
    assert tv.mac is None
    assert tv.psk is None
    assert tv.extra_inputs is False
    assert tv.cec_inputs is False
    assert tv.channel_source is False
    assert tv.channels == []
    assert tv.apps == []
    assert tv.wol is False


def test_tv_config_falsy_port_defaults() -> None:
    """Test a zero port falls back to 80."""
    assert TVConfig.from_dict({"name": "A", "ip": "10.0.0.1", "port": 0}).port == 80


def test_tv_config_to_dict_uses_config_keys() -> None:
    """Test serialization writes the camelCase config keys back."""
    assert TVConfig.from_dict(MOCK_TV_FULL).to_dict() == MOCK_TV_FULL


def test_parse_tvs_skips_non_mappings() -> None:
    """Test stray list items are ignored."""
    tvs = parse_tvs({"tvs": [MOCK_TV_MINIMAL, "junk", None]})
    assert [tv.name for tv in tvs] == ["LivingRoom"]


def test_validate_config_valid() -> None:
    """Test a complete config has no errors."""
    assert validate_config(MOCK_CONFIG) == []
    assert validate_config({"tvs": []}) == []


def test_validate_config_missing_fields() -> None:
    """Test missing name and ip are reported per entry."""
    errors = validate_config({"tvs": [{"ip": "10.0.0.1"}, {"name": "NoIP"}]})

    assert "tvs[0].name is required" in errors
    assert "tvs[1].ip is required" in errors


def test_validate_config_rejects_non_string_names() -> None:
    """Test unquoted numeric names are reported, missing ones too."""
    config = yaml.safe_load("tvs:\n  - name: 2024\n    ip: 10.0.0.1\n  - ip: 10.0.0.2\n")

    errors = validate_config(config)

    assert errors == [
        "tvs[0].name must be a string, quote it in YAML",
        "tvs[1].name is required",
    ]


def test_tv_config_numeric_name_becomes_string() -> None:
    """Test a numeric name is converted and a missing one stays None."""
    assert TVConfig.from_dict({"name": 2024, "ip": "10.0.0.1"}).name == "2024"
    assert TVConfig.from_dict({"ip": "10.0.0.1"}).name is None


def test_validate_config_duplicate_names() -> None:
    """Test duplicate names are rejected."""
    config = {"tvs": [{"name": "Bedroom", "ip": "10.0.0.1"}, {"name": "Bedroom", "ip": "10.0.0.2"}]}

    errors = validate_config(config)

    assert len(errors) == 1
    assert "Bedroom" in errors[0]


def test_validate_config_bad_types() -> None:
    """Test non-list tvs and a negative interval are reported."""
    errors = validate_config({"tvs": {"name": "A"}, "interval": -1})

    assert "tvs must be a list" in errors
    assert "interval must not be negative" in errors


def test_validate_config_bridge_requires_broker() -> None:
    """Test bridge mode needs an MQTT host."""
    assert "mqtt.host is required for bridge mode" in validate_config(MOCK_CONFIG, for_bridge=True)
    config = dict(MOCK_CONFIG, mqtt={"host": "broker.local"})
    assert validate_config(config, for_bridge=True) == []


def test_load_yaml_config(tmp_path: Path) -> None:
    """Test a YAML file merges over the defaults."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"interval": 7, "tvs": [MOCK_TV_MINIMAL], "mqtt": {"host": "broker"}}))

    config = load_config(str(path), use_cache=False)

    assert config["interval"] == 7
    assert config["tvs"] == [MOCK_TV_MINIMAL]
    assert config["mqtt"]["host"] == "broker"
    assert config["mqtt"]["port"] == 1883
    assert config["options"]["discovery"] is True
    assert config["_loaded_from"] == str(path)


def test_load_host_json_config(tmp_path: Path) -> None:
    """Test the platform block is extracted from a host config."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "bridge": {"name": "Host"},
        "platforms": [
            {"platform": "SomethingElse", "tvs": [{"name": "Wrong"}]},
            {"platform": "BraviaOSPlatform", "interval": 20, "tvs": [MOCK_TV_FULL]},
        ],
    }))

    config = load_config(str(path), use_cache=False)

    assert config["interval"] == 20
    assert [tv["name"] for tv in config["tvs"]] == ["Bedroom"]
    assert "platform" not in config
    assert "platforms" not in config


def test_load_config_without_file() -> None:
    """Test defaults are returned when no file exists."""
    config = load_config("/nonexistent/config.yaml", use_cache=False)

    assert config["tvs"] == []
    assert config["_loaded_from"] is None


def test_load_config_invalid_yaml(tmp_path: Path) -> None:
    """Test an unparseable file is skipped."""
    path = tmp_path / "config.yaml"
    path.write_text("tvs: [unclosed")

    config = load_config(str(path), use_cache=False)

    assert config["_loaded_from"] is None


def test_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test environment variables override file values."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"interval": 7}))
    monkeypatch.setenv("MQTT_HOST", "env-broker")
    monkeypatch.setenv("MQTT_PORT", "8883")
    monkeypatch.setenv("POLL_INTERVAL", "12")
    monkeypatch.setenv("RECONNECT_INTERVAL", "not-a-number")

    config = load_config(str(path), use_cache=False)

    assert config["mqtt"]["host"] == "env-broker"
    assert config["mqtt"]["port"] == 8883
    assert config["interval"] == 12
    assert config["options"]["reconnect_interval"] == 30


def test_save_config_strips_metadata(tmp_path: Path) -> None:
    """Test saved files omit internal keys."""
    path = tmp_path / "out" / "config.yaml"

    assert save_config({"interval": 5, "tvs": [MOCK_TV_MINIMAL], "_loaded_from": "x"}, path) is True

    saved = yaml.safe_load(path.read_text())
    assert saved == {"interval": 5, "tvs": [MOCK_TV_MINIMAL]}

