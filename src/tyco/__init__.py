# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tyco: parser and resolver for a typed configuration language.

Typical use::

    import tyco

    context = tyco.load("settings.tyco")
    document = tyco.to_object(context)
"""

from tyco.compiler import load, loads, serialize, to_object
from tyco.diagnostics import ParseError, ResolutionError, SourceSpan, TycoError
from tyco.model import Context

__all__ = [
    "load",
    "loads",
    "to_object",
    "serialize",
    "Context",
    "TycoError",
    "ParseError",
    "ResolutionError",
    "SourceSpan",
]
