# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typed value parsing: converts a raw token and a type descriptor into a Value.

Type descriptors are a scalar type name (``bool``, ``int``, ``float``,
``str``, ``date``, ``time``, ``datetime``), a struct name, or either of
those followed by ``[]``.
"""

from collections.abc import Mapping

from tyco.compiler.scanner import (
    TRIPLE_BASIC,
    TRIPLE_LITERAL,
    normalize_datetime,
    normalize_time,
    parse_float,
    parse_integer,
    split_named_argument,
    split_top_level,
    strip_leading_newline,
    unescape_basic_string,
)
from tyco.diagnostics import ParseError, SourceSpan, TycoError
from tyco.model.schema import Struct
from tyco.model.values import (
    ArrayValue,
    BoolValue,
    DateTimeValue,
    DateValue,
    FloatValue,
    InstanceValue,
    IntValue,
    NullValue,
    ReferenceValue,
    StringValue,
    TimeValue,
    Value,
)

# ###############
# Public Interface
# ###############

PLACEHOLDER_PREFIX = "_arg"


class ValueParser:
    """Parses value tokens against a struct registry.

    The registry decides how a struct call ``Name(args)`` is read: a declared
    struct with a primary key yields a reference, a declared struct without
    one yields an inline instance, and an undeclared name yields a reference.
    Because the registry grows as the source is read, this decision depends
    on where the call appears in the source.

    Args:
        structs: The struct registry visible at parse time.
    """

    def __init__(self, structs: Mapping[str, Struct]) -> None:
        self._structs = structs

    def parse_value(self, token: str, type_name: str, span: SourceSpan | None = None) -> Value:
        """Parse *token* as a value of type descriptor *type_name*.

        Raises:
            ParseError: If the token is not a valid literal of the given type.
        """
        try:
            return self._parse(token.strip(), type_name, span)
        except TycoError as exc:
            if exc.span is None and span is not None:
                raise exc.with_span(span) from None
            raise

    def parse_enum_choices(self, token: str, type_name: str, span: SourceSpan | None = None) -> list[Value]:
        """Parse a parenthesized ``(v1, v2, ...)`` list, each element at *type_name*.

        Raises:
            ParseError: If the list is not parenthesized, is empty, or has a blank element.
        """
        trimmed = token.strip()
        if len(trimmed) < 2 or trimmed[0] != "(" or trimmed[-1] != ")":
            raise ParseError("Enum choices must be enclosed in parentheses", span)
        parts = split_top_level(trimmed[1:-1])
        if not parts or any(not part for part in parts):
            raise ParseError("Enum declaration must contain at least one choice and no blank choices", span)
        return [self.parse_value(part, type_name, span) for part in parts]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _parse(self, trimmed: str, type_name: str, span: SourceSpan | None) -> Value:
        if trimmed.lower() == "null":
            return NullValue()
        if type_name == "bool":
            if trimmed == "true":
                return BoolValue(value=True)
            if trimmed == "false":
                return BoolValue(value=False)
            raise ParseError(f"Invalid bool literal {trimmed!r}", span)
        if type_name == "int":
            return IntValue(value=parse_integer(trimmed))
        if type_name == "float":
            return FloatValue(value=parse_float(trimmed))
        if type_name == "str":
            return parse_string_literal(trimmed, span)
        if type_name == "date":
            return DateValue(value=_decoded_text(trimmed, span))
        if type_name == "time":
            return TimeValue(value=normalize_time(_decoded_text(trimmed, span)))
        if type_name == "datetime":
            return DateTimeValue(value=normalize_datetime(_decoded_text(trimmed, span)))
        if type_name.endswith("[]"):
            return self._parse_array(trimmed, type_name[:-2], span)
        return self._parse_struct_call(trimmed, type_name, span)

    def _parse_array(self, token: str, element_type: str, span: SourceSpan | None) -> ArrayValue:
        if token == "[]":
            return ArrayValue()
        if not (token.startswith("[") and token.endswith("]")):
            raise ParseError(f"Array literal must be wrapped in []: {token}", span)
        items = [self._parse(part, element_type, span) for part in split_top_level(token[1:-1]) if part]
        return ArrayValue(items=items)

    def _parse_struct_call(self, token: str, type_name: str, span: SourceSpan | None) -> Value:
        call = _split_struct_call(token)
        if call is None:
            raise ParseError(f"Cannot parse value {token!r} as type {type_name!r}", span)
        struct_name, args = call
        struct = self._structs.get(struct_name)
        if struct is not None and not struct.has_primary_key:
            return self._parse_inline_instance(struct_name, args, span)
        primary_key = _decoded_text(args, span)
        return ReferenceValue(struct_name=struct_name, primary_key=primary_key)

    def _parse_inline_instance(self, struct_name: str, args: str, span: SourceSpan | None) -> InstanceValue:
        """Build an inline instance whose fields are still untyped strings.

        Named arguments keep their names; positional ones are stored as
        ``_arg0``, ``_arg1``, ... until the instance is bound to its schema.
        A blank positional argument is kept as an empty string; a trailing
        comma does not add one.
        """
        instance = InstanceValue(struct_name=struct_name)
        position = 0
        parts = split_top_level(args)
        if parts and not parts[-1]:
            parts.pop()
        for part in parts:
            named = split_named_argument(part)
            if named is not None:
                name, value = named
                instance.fields[name] = _raw_argument(value, span)
                continue
            instance.fields[f"{PLACEHOLDER_PREFIX}{position}"] = _raw_argument(part, span)
            position += 1
        return instance


def parse_string_literal(token: str, span: SourceSpan | None = None) -> StringValue:
    """Parse a quoted or bare string token.

    * ``"..."`` and ``\"\"\"...\"\"\"`` decode escape sequences and may hold
      templates; the triple form drops one leading newline.
    * ``'...'`` and ``'''...'''`` are literal: no escapes, never templated.
    * A bare token is kept as written, with escape processing disabled.

    Escapes of a string that holds placeholders are decoded after rendering
    rather than here, so that they are decoded exactly once.
    """
    if token.startswith(TRIPLE_BASIC):
        rest = token[3:]
        end = rest.find(TRIPLE_BASIC)
        if end < 0:
            raise ParseError("Unterminated multi-line string literal", span)
        return _basic_string(strip_leading_newline(rest[:end]))
    if token.startswith(TRIPLE_LITERAL):
        rest = token[3:]
        end = rest.find(TRIPLE_LITERAL)
        if end < 0:
            raise ParseError("Unterminated multi-line literal string", span)
        return StringValue(value=rest[:end], is_literal=True)
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return _basic_string(token[1:-1])
    if len(token) >= 2 and token[0] == "'" and token[-1] == "'":
        return StringValue(value=token[1:-1], is_literal=True)
    return StringValue(value=token, has_template=_has_template(token))


def is_placeholder_name(name: str) -> bool:
    """Return True for synthetic positional names such as ``_arg0``."""
    return name.startswith(PLACEHOLDER_PREFIX) and name[len(PLACEHOLDER_PREFIX) :].isdigit()


def placeholder_index(name: str) -> int:
    return int(name[len(PLACEHOLDER_PREFIX) :])


# ################
# Implementation
# ################


def _has_template(text: str) -> bool:
    return "{" in text and "}" in text


def _basic_string(raw: str) -> StringValue:
    if _has_template(raw):
        return StringValue(value=raw, has_template=True, escaped=True)
    return StringValue(value=unescape_basic_string(raw))


def _raw_argument(token: str, span: SourceSpan | None) -> Value:
    if token.lower() == "null":
        return NullValue()
    return parse_string_literal(token, span)


def _decoded_text(token: str, span: SourceSpan | None) -> str:
    """Return the text of a string token with escapes already decoded."""
    parsed = parse_string_literal(token, span)
    if parsed.escaped:
        return unescape_basic_string(parsed.value)
    return parsed.value


def _split_struct_call(token: str) -> tuple[str, str] | None:
    """Split ``Name(args)`` into its name and trimmed argument text."""
    open_idx = token.find("(")
    if open_idx <= 0 or not token.endswith(")"):
        return None
    name = token[:open_idx]
    if not (("a" <= name[0].lower() <= "z") and all(ch.isascii() and (ch.isalnum() or ch == "_") for ch in name)):
        return None
    return name, token[open_idx + 1 : -1].strip()
