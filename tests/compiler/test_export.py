# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the structured export tree and its JSON and YAML text forms."""

import json
from pathlib import Path

import pytest
import yaml

from tyco.compiler.build import loads
from tyco.compiler.export import FORMATS, serialize, to_object, write_output
from tyco.model.context import Context

# ###############
# Test Helpers
# ###############

_SOURCE = """\
str timezone: UTC
date launched: 2024-03-01
float ratio: 0.5

Point:
  int x:
  int y:

Host:
  *str hostname:
  int cores:
  ?str note:
  Point position: Point(0, 0)
  str[] tags: []
  - prod-01, 64, null, Point(1, 2), [web, db]
  - prod-02, 8
"""


@pytest.fixture
def context() -> Context:
    return loads(_SOURCE)


# ###############
# Export Tree
# ###############


class TestToObject:
    def test_globals_then_keyed_structs(self, context: Context) -> None:
        assert list(to_object(context)) == ["timezone", "launched", "ratio", "Host"]

    def test_rows(self, context: Context) -> None:
        first, second = to_object(context)["Host"]
        assert first == {
            "hostname": "prod-01",
            "cores": 64,
            "note": None,
            "position": {"x": 1, "y": 2},
            "tags": ["web", "db"],
        }
        assert second["position"] == {"x": 0, "y": 0}
        assert second["tags"] == []

    def test_dates_export_as_text(self, context: Context) -> None:
        assert to_object(context)["launched"] == "2024-03-01"

    def test_empty_document(self) -> None:
        assert to_object(loads("")) == {}


# ###############
# Serialization
# ###############


class TestSerialize:
    def test_json_round_trips_export_tree(self, context: Context) -> None:
        assert json.loads(serialize(context, "json")) == to_object(context)

    def test_json_indent(self, context: Context) -> None:
        assert serialize(context, "json", indent=4).startswith('{\n    "timezone": "UTC"')

    def test_compact_json(self) -> None:
        assert serialize(loads("str a: b\nint n: 1\n"), "json", indent=0) == '{"a":"b","n":1}'

    def test_non_ascii_is_kept(self) -> None:
        assert serialize(loads('str city: "Zürich"\n'), "json", indent=0) == '{"city":"Zürich"}'

    def test_yaml_keeps_order(self, context: Context) -> None:
        text = serialize(context, "yaml")
        assert text.startswith("timezone: UTC\n")
        assert yaml.safe_load(text) == to_object(context)

    def test_unknown_format(self, context: Context) -> None:
        with pytest.raises(ValueError, match="Unsupported output format"):
            serialize(context, "toml")

    def test_formats(self) -> None:
        assert FORMATS == ("json", "yaml")


def test_write_output_creates_parent_directories(tmp_path: Path, context: Context) -> None:
    target = tmp_path / "out" / "nested" / "config.json"
    write_output(context, target)
    text = target.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert json.loads(text)["timezone"] == "UTC"


def test_write_output_yaml(tmp_path: Path, context: Context) -> None:
    target = tmp_path / "config.yaml"
    write_output(context, target, "yaml")
    assert yaml.safe_load(target.read_text(encoding="utf-8"))["ratio"] == 0.5
