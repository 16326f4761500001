# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution engine: four whole-document passes over a parsed Context.

1. Schema binding: inline instances (and instance rows) are bound to their
   struct schema. Positional placeholders are mapped to fields, raw strings
   are re-typed, defaults are applied, enum constraints are checked, and
   fields are put in schema order.
2. Primary-key indexing of every struct.
3. Reference resolution: every reference receives a deep copy of its target.
4. Template rendering of globals, then of every instance.

Each pass reads from a deep-copy snapshot taken when the pass starts and
mutates the live Context, so no pass observes its own partial output.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from tyco.compiler.templates import render_instance, render_value
from tyco.compiler.value_parser import ValueParser, is_placeholder_name, placeholder_index
from tyco.diagnostics import ResolutionError
from tyco.model.context import Context
from tyco.model.schema import FieldSchema, Struct
from tyco.model.values import ArrayValue, InstanceValue, NullValue, ReferenceValue, StringValue, Value

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def resolve(context: Context) -> Context:
    """Run all resolution passes over *context* in place and return it.

    Raises:
        ResolutionError: On an unknown struct or primary key, too many
            positional inline arguments, or an enum violation.
        ParseError: If a raw inline argument is not valid for its field type.
    """
    bind_schemas(context)
    index_primary_keys(context)
    resolve_references(context)
    render_templates(context)
    return context


def bind_schemas(context: Context) -> None:
    """Pass 1: bind instances to their schema against a registry snapshot."""
    binder = _SchemaBinder(context.snapshot_structs())
    for name, value in context.globals.items():
        context.globals[name] = binder.bind(value)
    for struct in context.structs.values():
        for instance in struct.instances:
            binder.bind_instance(instance)
    logger.debug("Bound schemas for %d struct(s)", len(context.structs))


def index_primary_keys(context: Context) -> None:
    """Pass 2: rebuild every struct's primary-key index."""
    for struct in context.structs.values():
        struct.build_primary_index()
        if struct.has_primary_key:
            logger.debug("Indexed %d key(s) for struct '%s'", len(struct.primary_index), struct.name)


def resolve_references(context: Context) -> None:
    """Pass 3: give every reference a deep copy of the row it names."""
    resolver = _ReferenceResolver(context.snapshot_structs())
    for value in context.globals.values():
        resolver.visit(value)
    for struct in context.structs.values():
        for instance in struct.instances:
            resolver.visit(instance)
    logger.debug("Resolved %d reference(s)", resolver.count)


def render_templates(context: Context) -> None:
    """Pass 4: render string templates against a document snapshot.

    Globals are rendered in declaration order and each rendered global
    replaces its entry in the scope, so later globals see rendered text.
    """
    globals_scope = context.snapshot().globals
    for name, value in context.globals.items():
        render_value(value, None, globals_scope)
        globals_scope[name] = value.clone()
    for struct in context.structs.values():
        for instance in struct.instances:
            render_instance(instance, globals_scope)
    logger.debug("Rendered templates")


# ################
# Implementation
# ################


class _SchemaBinder:
    """Binds instances to the struct schemas of a registry snapshot."""

    def __init__(self, structs: Mapping[str, Struct]) -> None:
        self._structs = structs
        self._values = ValueParser(structs)

    def bind(self, value: Value) -> Value:
        if isinstance(value, ArrayValue):
            value.items = [self.bind(item) for item in value.items]
        elif isinstance(value, InstanceValue):
            self.bind_instance(value)
        return value

    def bind_instance(self, instance: InstanceValue) -> None:
        """Bind *instance* to its schema, in place.

        A named argument wins over a positional one for the same field. The
        result holds the schema's fields in schema order, followed by any
        leftover fields in their original order.
        """
        struct = self._structs.get(instance.struct_name)
        if struct is None:
            for name, value in instance.fields.items():
                instance.fields[name] = self.bind(value)
            return

        positional: dict[int, Value] = {}
        leftovers: dict[str, Value] = {}
        for name, value in instance.fields.items():
            if is_placeholder_name(name):
                positional[placeholder_index(name)] = value
            else:
                leftovers[name] = value
        for index in positional:
            if index >= len(struct.fields):
                raise ResolutionError(
                    f"Too many positional arguments for struct '{struct.name}': "
                    f"it declares {len(struct.fields)} field(s)",
                    struct_name=struct.name,
                )

        bound: dict[str, Value] = {}
        for index, field in enumerate(struct.fields):
            if field.name in leftovers:
                value = self._retype(leftovers.pop(field.name), field)
            elif index in positional:
                value = self._retype(positional[index], field)
            elif field.default is not None:
                value = field.default.clone()
            elif field.is_nullable:
                value = NullValue()
            else:
                continue
            _check_enum(struct, field, value)
            bound[field.name] = self.bind(value)
        bound.update(leftovers)
        instance.fields = bound

    def _retype(self, value: Value, field: FieldSchema) -> Value:
        """Parse a raw string argument at the field's declared type."""
        if not isinstance(value, StringValue) or value.is_literal or field.descriptor == "str":
            return value
        return self._values.parse_value(value.value, field.descriptor)


def _check_enum(struct: Struct, field: FieldSchema, value: Value) -> None:
    if field.enum_choices is None or isinstance(value, NullValue):
        return
    text = value.render_text()
    for choice in field.enum_choices:
        if choice.kind == value.kind and choice.render_text() == text:
            return
    allowed = ", ".join(choice.render_text() for choice in field.enum_choices)
    raise ResolutionError(
        f"Invalid value '{text}' for field '{field.name}' of struct '{struct.name}': expected one of ({allowed})",
        struct_name=struct.name,
        field_name=field.name,
    )


class _ReferenceResolver:
    """Resolves references against a registry snapshot.

    References inside a resolved copy are resolved as well. The chain of
    references being followed is tracked: a reference that would revisit a
    row already on the chain is left unresolved and exports as null.
    """

    def __init__(self, structs: Mapping[str, Struct]) -> None:
        self._structs = structs
        self.count = 0

    def visit(self, value: Value, chain: tuple[tuple[str, str], ...] = ()) -> None:
        if isinstance(value, ArrayValue):
            for item in value.items:
                self.visit(item, chain)
        elif isinstance(value, InstanceValue):
            for field_value in value.fields.values():
                self.visit(field_value, chain)
        elif isinstance(value, ReferenceValue):
            self._resolve(value, chain)

    def _resolve(self, reference: ReferenceValue, chain: tuple[tuple[str, str], ...]) -> None:
        name = reference.struct_name
        key = reference.primary_key
        struct = self._structs.get(name)
        if struct is None:
            raise ResolutionError(f"Unknown struct '{name}'", struct_name=name, key=key)
        target = struct.find_by_primary_key(key)
        if target is None:
            raise ResolutionError(f"Unknown {name}({key})", struct_name=name, key=key)
        link = (name, key)
        if link in chain:
            logger.debug("Leaving %s(%s) unresolved inside its own expansion", name, key)
            return
        resolved = target.clone()
        self.visit(resolved, (*chain, link))
        reference.resolved = resolved
        self.count += 1
