# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry points that load a Tyco document into a fully resolved Context."""

from __future__ import annotations

from pathlib import Path

from tyco.compiler.includes import read_source_lines, split_source_text
from tyco.compiler.parser import parse
from tyco.compiler.resolver import resolve
from tyco.model.context import Context

# ###############
# Public Interface
# ###############


def load(path: Path | str) -> Context:
    """Read, include-expand, parse and resolve the document at *path*.

    Raises:
        TycoError: On an unreadable file or any parse or resolution error.
    """
    return resolve(parse(read_source_lines(path)))


def loads(text: str) -> Context:
    """Parse and resolve a document held in memory.

    Include directives are not expanded for in-memory text; diagnostics
    carry line numbers but no path.
    """
    return resolve(parse(split_source_text(text)))
