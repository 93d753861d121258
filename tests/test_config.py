import json
import logging
import pytest

from dockerenv.core.errors import ConfigurationError
from dockerenv.utils.config import DEFAULTS, build_config


def write_settings(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f)


def test_defaults_without_settings_file(tmp_path):
    config = build_config(cwd=tmp_path)

    assert config.image_name == DEFAULTS["image_name"]
    assert config.container_name == DEFAULTS["container_name"]
    assert config.username == "appuser"
    assert config.mounts == ()


def test_settings_file_in_cwd_is_applied(tmp_path):
    write_settings(tmp_path / "dockerenv.json", {"image_name": "team-env", "mounts": ["src:/app/src"]})

    config = build_config(cwd=tmp_path)

    assert config.image_name == "team-env"
    assert config.mounts == ("src:/app/src",)


def test_command_line_overrides_settings_file(tmp_path):
    write_settings(tmp_path / "dockerenv.json", {"image_name": "team-env", "mounts": ["src:/app/src"]})

    config = build_config({"image_name": "mine", "username": None, "mounts": ["data"]}, cwd=tmp_path)

    assert config.image_name == "mine"
    assert config.username == "appuser"
    assert config.mounts == ("data",)


def test_explicit_settings_file_must_exist(tmp_path):
    with pytest.raises(ConfigurationError):
        build_config(config_path="missing.json", cwd=tmp_path)


def test_invalid_json_is_configuration_error(tmp_path):
    (tmp_path / "dockerenv.json").write_text("{not json")

    with pytest.raises(ConfigurationError):
        build_config(cwd=tmp_path)


def test_wrong_value_type_is_configuration_error(tmp_path):
    write_settings(tmp_path / "dockerenv.json", {"mounts": "src"})

    with pytest.raises(ConfigurationError):
        build_config(cwd=tmp_path)


def test_unknown_keys_are_ignored(tmp_path, caplog):
    write_settings(tmp_path / "dockerenv.json", {"hostname": "box"})

    with caplog.at_level(logging.WARNING):
        config = build_config(cwd=tmp_path)

    assert config.image_name == DEFAULTS["image_name"]
    assert "hostname" in caplog.text


def test_malformed_mount_fails_at_load(tmp_path):
    with pytest.raises(ConfigurationError):
        build_config({"mounts": ["a:/b:/c"]}, cwd=tmp_path)


def test_config_is_immutable(tmp_path):
    config = build_config(cwd=tmp_path)

    with pytest.raises(Exception):
        config.image_name = "other"
