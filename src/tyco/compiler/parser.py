# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line driver that turns classified source lines into a raw, unresolved Context.

Globals and struct fields are typed as soon as they are declared. Instance
rows are collected while a struct block is open and typed when the block
ends (at the next struct header or at end of input), so default overrides
and enum constraints declared anywhere in the block are already known.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from tyco.compiler.grammar import (
    DefaultOverride,
    FieldDeclaration,
    InstanceRow,
    RowContinuation,
    StructHeader,
    read_logical_lines,
)
from tyco.compiler.scanner import split_named_argument, split_top_level
from tyco.compiler.value_parser import ValueParser
from tyco.diagnostics import ParseError, ResolutionError, SourceLine, SourceSpan
from tyco.model.context import Context
from tyco.model.schema import FieldSchema, Struct, is_scalar_type, type_descriptor
from tyco.model.values import InstanceValue, Value

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def parse(lines: Sequence[SourceLine]) -> Context:
    """Parse include-expanded source lines into an unresolved Context.

    Args:
        lines: Physical source lines in document order.

    Returns:
        A Context holding globals, struct schemas and instance rows. Inline
        instances are not yet bound to their schema and references are not
        yet resolved.

    Raises:
        ParseError: On any lexical, structural or type error.
        ResolutionError: On an unknown field in a default override or row,
            too many positional row arguments, or a positional argument
            following a named one.
    """
    return _Parser(lines).parse()


# ################
# Implementation
# ################


@dataclass
class _PendingRow:
    text: str
    source: SourceLine
    column: int

    @property
    def span(self) -> SourceSpan:
        return self.source.span(self.column)


class _Parser:
    """Stateful driver over the logical-line stream of one document."""

    def __init__(self, lines: Sequence[SourceLine]) -> None:
        self._lines = lines
        self._context = Context()
        self._values = ValueParser(self._context.structs)
        self._struct: Struct | None = None
        self._pending: list[_PendingRow] = []

    def parse(self) -> Context:
        for logical in read_logical_lines(self._lines):
            if isinstance(logical, StructHeader):
                self._open_struct(logical)
            elif isinstance(logical, FieldDeclaration):
                if logical.is_global:
                    self._declare_global(logical)
                else:
                    self._declare_field(logical)
            elif isinstance(logical, DefaultOverride):
                self._override_field(logical)
            elif isinstance(logical, InstanceRow):
                self._pending.append(_PendingRow(logical.text, logical.source, logical.column))
            elif isinstance(logical, RowContinuation):
                self._pending[-1].text = f"{self._pending[-1].text} {logical.text}"
        self._flush_rows()
        logger.debug(
            "Parsed %d global(s) and %d struct(s)",
            len(self._context.globals),
            len(self._context.structs),
        )
        return self._context

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _open_struct(self, header: StructHeader) -> None:
        self._flush_rows()
        self._struct = self._context.ensure_struct(header.name)

    def _declare_global(self, decl: FieldDeclaration) -> None:
        span = decl.source.span(decl.value_column)
        if decl.modifier == "*":
            raise ParseError(f"Global '{decl.attr_name}' cannot be a primary key", decl.source.span())
        value = self._values.parse_value(decl.value, type_descriptor(decl.type_name, decl.is_array), span)
        self._context.set_global(decl.attr_name, value)

    def _declare_field(self, decl: FieldDeclaration) -> None:
        struct = self._require_struct()
        span = decl.source.span(decl.value_column)
        if struct.get_field(decl.attr_name) is not None:
            raise ParseError(
                f"Field '{decl.attr_name}' is already declared in struct '{struct.name}'",
                decl.source.span(),
            )
        field = FieldSchema(
            name=decl.attr_name,
            type_name=decl.type_name,
            is_primary_key=decl.modifier == "*",
            is_nullable=decl.modifier == "?",
            is_array=decl.is_array,
        )
        if _is_enum_list(decl.value):
            field.enum_choices = self._enum_choices(field, decl.value, span)
        elif decl.value:
            field.default = self._values.parse_value(decl.value, field.descriptor, span)
        struct.add_field(field)

    def _override_field(self, override: DefaultOverride) -> None:
        struct = self._require_struct()
        span = override.source.span(override.value_column)
        try:
            field = struct.require_field(override.attr_name)
        except ResolutionError as exc:
            raise exc.with_span(override.source.span()) from None
        if not override.value:
            struct.set_default(field.name, None)
        elif _is_enum_list(override.value):
            struct.set_enum_choices(field.name, self._enum_choices(field, override.value, span))
        else:
            struct.set_default(field.name, self._values.parse_value(override.value, field.descriptor, span))

    def _enum_choices(self, field: FieldSchema, text: str, span: SourceSpan) -> list[Value]:
        if field.is_array:
            raise ParseError(
                f"Enum constraints are only supported on scalar fields, not on array field '{field.name}'",
                span,
            )
        if not is_scalar_type(field.type_name):
            raise ParseError(
                f"Can only set enum values on scalar fields, not on '{field.name}' of type '{field.type_name}'",
                span,
            )
        return self._values.parse_enum_choices(text, field.type_name, span)

    def _require_struct(self) -> Struct:
        # The line grammar rejects struct-scoped lines outside a struct block.
        assert self._struct is not None
        return self._struct

    # ------------------------------------------------------------------
    # Instance rows
    # ------------------------------------------------------------------

    def _flush_rows(self) -> None:
        if not self._pending:
            return
        struct = self._require_struct()
        for row in self._pending:
            struct.add_instance(self._build_row(struct, row))
        logger.debug("Collected %d row(s) for struct '%s'", len(self._pending), struct.name)
        self._pending = []

    def _build_row(self, struct: Struct, row: _PendingRow) -> InstanceValue:
        """Type each row argument against the struct's field at that position or name.

        A blank positional argument is skipped without consuming a position,
        so the next argument fills the field it would have filled.
        """
        span = row.span
        instance = InstanceValue(struct_name=struct.name)
        position = 0
        seen_named = False
        for part in split_top_level(row.text):
            if not part:
                continue
            named = split_named_argument(part)
            if named is not None:
                name, raw = named
                field = struct.get_field(name)
                if field is None:
                    raise ResolutionError(
                        f"Unknown field '{name}' in struct '{struct.name}'",
                        span,
                        struct_name=struct.name,
                        field_name=name,
                    )
                instance.fields[name] = self._values.parse_value(raw, field.descriptor, span)
                seen_named = True
                continue
            if seen_named:
                raise ResolutionError(
                    f"Positional argument {part!r} follows a named argument in a row of struct '{struct.name}'",
                    span,
                    struct_name=struct.name,
                )
            if position >= len(struct.fields):
                raise ResolutionError(
                    f"Too many positional arguments for struct '{struct.name}': "
                    f"it declares {len(struct.fields)} field(s)",
                    span,
                    struct_name=struct.name,
                )
            field = struct.fields[position]
            instance.fields[field.name] = self._values.parse_value(part, field.descriptor, span)
            position += 1
        return instance


def _is_enum_list(value: str) -> bool:
    return value.startswith("(")

