# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source reading with ``#include "relative/path"`` expansion."""

from __future__ import annotations

import logging
from pathlib import Path

from tyco.diagnostics import SourceLine, TycoError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

INCLUDE_DIRECTIVE = "#include"


def read_source_lines(path: Path | str) -> list[SourceLine]:
    """Read *path* and return its lines with include directives expanded inline.

    Included paths are relative to the directory of the including file and
    are expanded recursively. A file that was already read during this call
    contributes no lines the second time, which also breaks include cycles.

    Raises:
        TycoError: If a file cannot be read.
    """
    return _read(Path(path), set())


def split_source_text(text: str, path: str | None = None) -> list[SourceLine]:
    """Split *text* into numbered source lines, normalizing ``\\r\\n`` endings."""
    normalized = text.replace("\r\n", "\n")
    return [SourceLine(line, path, number) for number, line in enumerate(normalized.split("\n"), start=1)]


# ################
# Implementation
# ################


def _read(path: Path, visited: set[Path]) -> list[SourceLine]:
    """Read *path* and splice in its includes, skipping files already in *visited*.

    Args:
        path: The file to read; include targets resolve against its directory.
        visited: Canonical paths read so far. Updated in place.

    Returns:
        The file's lines with every include directive replaced by the lines it names.

    Raises:
        TycoError: If a file cannot be read.
    """
    canonical = path.resolve()
    if canonical in visited:
        logger.debug("Skipping already included file %s", canonical)
        return []
    visited.add(canonical)
    try:
        text = canonical.read_text(encoding="utf-8")
    except OSError as exc:
        raise TycoError(f"Cannot read '{path}': {exc.strerror or exc}") from exc
    logger.debug("Reading %s", canonical)

    result: list[SourceLine] = []
    for line in split_source_text(text, str(canonical)):
        directive, _, target = line.text.strip().partition(" ")
        if directive == INCLUDE_DIRECTIVE:
            target = target.strip().strip("\"'")
            result.extend(_read(canonical.parent / target, visited))
        else:
            result.append(line)
    return result
