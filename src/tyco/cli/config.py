# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the optional ``.tyco.yaml`` output configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from tyco.compiler.export import FORMATS

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".tyco.yaml"


class ConfigError(Exception):
    """Raised when an output configuration file is invalid or cannot be loaded."""


@dataclass
class OutputConfig:
    """Output settings for the ``tyco`` command line.

    Attributes:
        format: Serialization format, ``json`` or ``yaml``.
        indent: Indentation width; ``0`` selects compact JSON.
    """

    format: str = "json"
    indent: int = 2


def load_config(path: Path) -> OutputConfig:
    """Load and parse an output configuration file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_config(text, source_label=str(path))


def find_config(directory: Path) -> OutputConfig:
    """Return the configuration in *directory*, or the defaults when it has none."""
    candidate = directory / CONFIG_FILE_NAME
    if candidate.is_file():
        return load_config(candidate)
    return OutputConfig()


# ################
# Implementation
# ################


def _parse_config(text: str, source_label: str = "<string>") -> OutputConfig:
    """Parse output config YAML text into an OutputConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Returns:
        An OutputConfig with defaults for every field the text leaves out.

    Raises:
        ConfigError: If the text is not a YAML mapping or holds an unknown or invalid field.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return OutputConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    unknown = sorted(set(data) - {"format", "indent"})
    if unknown:
        raise ConfigError(f"{source_label}: unknown field(s): {', '.join(map(str, unknown))}")

    config = OutputConfig()
    if "format" in data:
        config.format = _require_format(data["format"], source_label)
    if "indent" in data:
        config.indent = _require_indent(data["indent"], source_label)
    return config


def _require_format(value: object, source_label: str) -> str:
    """Check that *value* names a supported output format, raising ConfigError otherwise."""
    if not isinstance(value, str) or value not in FORMATS:
        raise ConfigError(f"{source_label}: 'format' must be one of {', '.join(FORMATS)}")
    return value


def _require_indent(value: object, source_label: str) -> int:
    """Check that *value* is a non-negative integer, raising ConfigError otherwise."""
    # bool is a subclass of int and is rejected explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{source_label}: 'indent' must be a non-negative integer")
    return value
