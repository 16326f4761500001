# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structured export of a resolved Context, and its JSON or YAML text form.

The export tree is a plain ``dict`` holding every global in declaration
order, followed by one list per struct that has a primary key. Structs
without a primary key exist only to be inlined and are left out.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from tyco.model.context import Context

# ###############
# Public Interface
# ###############

FORMATS: tuple[str, ...] = ("json", "yaml")


def to_object(context: Context) -> dict[str, Any]:
    """Flatten a resolved *context* into a generic, ordered tree."""
    result: dict[str, Any] = {name: value.to_export_node() for name, value in context.globals.items()}
    for name, struct in context.structs.items():
        if struct.has_primary_key:
            result[name] = [instance.to_export_node() for instance in struct.instances]
    return result


def serialize(context: Context, fmt: str = "json", indent: int = 2) -> str:
    """Serialize the export tree of *context* as JSON or YAML text.

    Args:
        context: A resolved document.
        fmt: ``"json"`` or ``"yaml"``.
        indent: Indentation width. For JSON, ``0`` yields compact output.

    Raises:
        ValueError: If *fmt* is not a supported format.
    """
    obj = to_object(context)
    if fmt == "json":
        if indent <= 0:
            return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
        return json.dumps(obj, indent=indent, ensure_ascii=False)
    if fmt == "yaml":
        return yaml.safe_dump(obj, sort_keys=False, allow_unicode=True, indent=max(indent, 2))
    raise ValueError(f"Unsupported output format: {fmt!r}")


def write_output(context: Context, path: Path, fmt: str = "json", indent: int = 2) -> None:
    """Write the serialized document to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = serialize(context, fmt, indent)
    if not text.endswith("\n"):
        text += "\n"
    path.write_text(text, encoding="utf-8")
