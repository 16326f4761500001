# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler pipeline for Tyco documents: line grammar, value parsing, resolution, and export."""

from tyco.compiler.build import load, loads
from tyco.compiler.export import FORMATS, serialize, to_object, write_output
from tyco.compiler.includes import read_source_lines, split_source_text
from tyco.compiler.parser import parse
from tyco.compiler.resolver import resolve
from tyco.compiler.value_parser import ValueParser

__all__ = [
    "load",
    "loads",
    "parse",
    "resolve",
    "ValueParser",
    "read_source_lines",
    "split_source_text",
    "to_object",
    "serialize",
    "write_output",
    "FORMATS",
]
