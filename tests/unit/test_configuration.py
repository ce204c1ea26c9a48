"""Unit tests for functions defined in src/configuration.py."""

import json
from pathlib import Path

import pytest

from configuration import AppConfig, LogicError

CONFIGURATION_FILE = Path(__file__).parents[1] / "configuration" / "mockzure.yaml"


def test_default_configuration() -> None:
    """Test that configuration attributes are not accessible for uninitialized app."""
    cfg = AppConfig()
    assert cfg is not None

    with pytest.raises(LogicError, match="logic error: configuration is not loaded"):
        _ = cfg.configuration

    with pytest.raises(LogicError, match="logic error: configuration is not loaded"):
        _ = cfg.service_configuration

    with pytest.raises(LogicError, match="logic error: configuration is not loaded"):
        _ = cfg.specs_configuration

    with pytest.raises(LogicError, match="logic error: configuration is not loaded"):
        _ = cfg.authorization_configuration

    with pytest.raises(LogicError, match="logic error: configuration is not loaded"):
        _ = cfg.identity_configuration


def test_init_from_dict() -> None:
    """Test the configuration initialization from dictionary with config values."""
    config_dict = {
        "name": "foo",
        "service": {"host": "0.0.0.0", "port": 9000},
        "authorization": {"anonymous_writes": True},
        "identity": {"issuer": "https://login.example"},
        "resourceGroups": [{"name": "rg-1"}],
    }
    cfg = AppConfig()
    cfg.init_from_dict(config_dict)

    assert cfg.configuration.name == "foo"
    assert cfg.service_configuration.host == "0.0.0.0"
    assert cfg.service_configuration.port == 9000
    assert cfg.specs_configuration.enabled is True
    assert cfg.authorization_configuration.anonymous_writes is True
    assert cfg.identity_configuration.issuer == "https://login.example"
    assert cfg.configuration.resource_groups[0].name == "rg-1"


def test_load_proper_configuration() -> None:
    """Test loading proper YAML configuration file."""
    cfg = AppConfig()
    cfg.load_configuration(str(CONFIGURATION_FILE))

    assert cfg.configuration.name == "Mockzure"
    assert len(cfg.configuration.vms) == 3
    assert len(cfg.configuration.users) == 2
    assert len(cfg.configuration.service_accounts) == 3
    assert cfg.configuration.apps[0].client_id == "web-app"


def test_load_json_configuration(tmp_path: Path) -> None:
    """Test loading configuration file with .json extension."""
    cfg_filename = tmp_path / "mockzure.json"
    with open(cfg_filename, "w", encoding="utf-8") as fout:
        json.dump({"name": "from json", "users": [{"id": "u-1"}]}, fout)

    cfg = AppConfig()
    cfg.load_configuration(str(cfg_filename))
    assert cfg.configuration.name == "from json"
    assert cfg.configuration.users[0].id == "u-1"


def test_load_empty_configuration(tmp_path: Path) -> None:
    """Test that an empty file yields the default configuration."""
    cfg_filename = tmp_path / "empty.yaml"
    cfg_filename.write_text("", encoding="utf-8")

    cfg = AppConfig()
    cfg.load_configuration(str(cfg_filename))
    assert cfg.service_configuration.port == 8090


def test_load_directory_instead_of_file(tmp_path: Path) -> None:
    """Test that a directory is reported instead of failing on open."""
    cfg = AppConfig()
    with pytest.raises(LogicError, match="is a directory"):
        cfg.load_configuration(str(tmp_path))


def test_load_nonexistent_configuration() -> None:
    """Test loading a file that does not exist."""
    cfg = AppConfig()
    with pytest.raises(FileNotFoundError):
        cfg.load_configuration("/nonexistent/mockzure.yaml")


def test_load_invalid_configuration(tmp_path: Path) -> None:
    """Test that validation errors are propagated."""
    cfg_filename = tmp_path / "invalid.yaml"
    cfg_filename.write_text("service:\n  port: -1\n", encoding="utf-8")

    cfg = AppConfig()
    with pytest.raises(ValueError):
        cfg.load_configuration(str(cfg_filename))
