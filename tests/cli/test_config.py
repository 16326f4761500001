# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the CLI output configuration file."""

from pathlib import Path

import pytest

from tyco.cli.config import CONFIG_FILE_NAME, ConfigError, OutputConfig, find_config, load_config

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write an output config file and return its path."""
    config_file = tmp_path / CONFIG_FILE_NAME
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_full_config(tmp_path: Path) -> None:
    config = load_config(_write_config(tmp_path, "format: yaml\nindent: 4\n"))
    assert config == OutputConfig(format="yaml", indent=4)


def test_partial_config_keeps_defaults(tmp_path: Path) -> None:
    config = load_config(_write_config(tmp_path, "indent: 0\n"))
    assert config.format == "json"
    assert config.indent == 0


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    assert load_config(_write_config(tmp_path, "")) == OutputConfig()


def test_find_config_without_file(tmp_path: Path) -> None:
    """A directory without a config file yields the defaults."""
    assert find_config(tmp_path) == OutputConfig()


def test_find_config_with_file(tmp_path: Path) -> None:
    _write_config(tmp_path, "format: yaml\n")
    assert find_config(tmp_path).format == "yaml"


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(_write_config(tmp_path, "format: [json\n"))


def test_not_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="must be a YAML mapping"):
        load_config(_write_config(tmp_path, "- json\n"))


def test_unknown_field(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="unknown field\\(s\\): colour"):
        load_config(_write_config(tmp_path, "format: json\ncolour: red\n"))


@pytest.mark.parametrize("value", ["toml", "JSON", "1"])
def test_invalid_format(tmp_path: Path, value: str) -> None:
    with pytest.raises(ConfigError, match="'format' must be one of json, yaml"):
        load_config(_write_config(tmp_path, f"format: {value}\n"))


@pytest.mark.parametrize("value", ["-1", "true", "two", "1.5"])
def test_invalid_indent(tmp_path: Path, value: str) -> None:
    with pytest.raises(ConfigError, match="'indent' must be a non-negative integer"):
        load_config(_write_config(tmp_path, f"indent: {value}\n"))
