# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""String template rendering.

A placeholder ``{a.b.c}`` inside a non-literal string is replaced by the
canonical text of the value it names. The first segment is looked up in the
current instance and, when that lookup fails at any step, again from the
start in the globals. A ``global.`` prefix restricts the lookup to globals.
Later segments project into instances and resolved references. Placeholders
that cannot be resolved are kept verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from tyco.compiler.scanner import unescape_basic_string
from tyco.model.values import ArrayValue, InstanceValue, ReferenceValue, StringValue, Value

# ###############
# Public Interface
# ###############

GLOBAL_PREFIX = "global"

_PLACEHOLDER = re.compile(r"\{([^{}]*)\}")


def render_value(value: Value, scope: InstanceValue | None, globals_scope: Mapping[str, Value]) -> None:
    """Render every template reachable from *value*, in place.

    Args:
        value: The value to render.
        scope: Read-only snapshot of the instance that owns *value*, or None
            for a top-level global.
        globals_scope: Read-only snapshot of the globals.
    """
    if isinstance(value, StringValue):
        render_string(value, scope, globals_scope)
    elif isinstance(value, ArrayValue):
        for item in value.items:
            render_value(item, scope, globals_scope)
    elif isinstance(value, InstanceValue):
        render_instance(value, globals_scope)
    elif isinstance(value, ReferenceValue) and value.resolved is not None:
        render_instance(value.resolved, globals_scope)


def render_instance(instance: InstanceValue, globals_scope: Mapping[str, Value]) -> None:
    """Render the fields of *instance* in its own field order.

    The instance is snapshotted again before each field, so a field sees the
    rendered text of every earlier sibling.
    """
    for name in list(instance.fields):
        scope = instance.clone()
        render_value(instance.fields[name], scope, globals_scope)


def render_string(value: StringValue, scope: InstanceValue | None, globals_scope: Mapping[str, Value]) -> None:
    """Substitute the placeholders of *value* and clear its template flag.

    Escape sequences held back at parse time are decoded once, after every
    substitution.
    """
    if value.is_literal or not value.has_template:
        return

    def substitute(match: re.Match[str]) -> str:
        found = resolve_placeholder(match.group(1), scope, globals_scope)
        if found is None:
            return match.group(0)
        return found.render_text()

    text = _PLACEHOLDER.sub(substitute, value.value)
    if value.escaped:
        text = unescape_basic_string(text)
        value.escaped = False
    value.value = text
    value.has_template = False


def resolve_placeholder(
    path: str,
    scope: InstanceValue | None,
    globals_scope: Mapping[str, Value],
) -> Value | None:
    """Return the value named by the dotted *path*, or None if it does not resolve."""
    segments = [segment.strip() for segment in path.split(".")]
    if len(segments) > 1 and segments[0] == GLOBAL_PREFIX:
        return _project(globals_scope, segments[1:])
    if scope is not None:
        found = _project(scope.fields, segments)
        if found is not None:
            return found
    return _project(globals_scope, segments)


# ################
# Implementation
# ################


def _project(fields: Mapping[str, Value], segments: list[str]) -> Value | None:
    value = fields.get(segments[0])
    for segment in segments[1:]:
        if value is None:
            return None
        nested = _fields_of(value)
        if nested is None:
            return None
        value = nested.get(segment)
    return value


def _fields_of(value: Value) -> Mapping[str, Value] | None:
    if isinstance(value, InstanceValue):
        return value.fields
    if isinstance(value, ReferenceValue) and value.resolved is not None:
        return value.resolved.fields
    return None
