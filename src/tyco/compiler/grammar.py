# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line grammar for Tyco source text.

Groups physical source lines into logical lines (joining multi-line string
literals, multi-line enum lists, and backslash-continued instance rows) and
classifies each logical line by shape. Shapes are tried in a fixed order
because some inputs structurally match more than one:

1. struct header        ``Name:``
2. field declaration    ``[*?]type[[]] name: [value]``
3. default override     ``    name: [value]`` (inside a struct block)
4. instance row         ``- arg, arg, ...``
5. row continuation     an indented line following an instance row
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from tyco.compiler.scanner import (
    has_unclosed_delimiter,
    has_unclosed_parentheses,
    open_triple_delimiter,
    strip_inline_comment,
)
from tyco.diagnostics import ParseError, SourceLine

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class StructHeader:
    """Opens the block of struct *name*."""

    name: str
    source: SourceLine


@dataclass(frozen=True)
class FieldDeclaration:
    """A typed field: a global when unindented, otherwise a field of the open struct.

    Attributes:
        modifier: ``"*"`` (primary key), ``"?"`` (nullable), or ``""``.
        type_name: The declared type without the array marker.
        is_array: True when declared with ``[]``.
        attr_name: The field name.
        value: The comment-stripped, trimmed value expression (may be empty).
        is_global: True when the line has no leading whitespace.
        source: The first physical line of the declaration.
        value_column: 1-based column where the value expression starts.
    """

    modifier: str
    type_name: str
    is_array: bool
    attr_name: str
    value: str
    is_global: bool
    source: SourceLine
    value_column: int


@dataclass(frozen=True)
class DefaultOverride:
    """Changes (or, with an empty value, clears) the default of a declared field."""

    attr_name: str
    value: str
    source: SourceLine
    value_column: int


@dataclass(frozen=True)
class InstanceRow:
    """One data row of the open struct, with continuations already joined."""

    text: str
    source: SourceLine
    column: int


@dataclass(frozen=True)
class RowContinuation:
    """An indented line that extends the previous instance row."""

    text: str
    source: SourceLine


LogicalLine = StructHeader | FieldDeclaration | DefaultOverride | InstanceRow | RowContinuation


def read_logical_lines(lines: Sequence[SourceLine]) -> Iterator[LogicalLine]:
    """Classify *lines* into a stream of logical lines.

    Blank and comment-only lines are skipped.

    Raises:
        ParseError: On a struct field before any struct header, an instance
            row outside a struct block, an unterminated multi-line literal or
            enum list, or a line matching no known shape.
    """
    return _LineReader(lines).read()


def match_struct_header(text: str) -> str | None:
    """Return the struct name if *text* (comment-stripped, trimmed) is a struct header."""
    if not text.endswith(":"):
        return None
    name = text[:-1].rstrip()
    if not name or not ("A" <= name[0] <= "Z"):
        return None
    if not all(_is_word_char(ch) for ch in name[1:]):
        return None
    return name


def match_field_declaration(text: str) -> tuple[str, str, bool, str, str, int] | None:
    """Match a field declaration on a raw line.

    Returns ``(modifier, type_name, is_array, attr_name, value, value_column)``
    or None. The value is returned raw (comments not yet stripped).
    """
    cursor = _Cursor(text)
    cursor.skip_spaces()
    modifier = ""
    if cursor.current() in ("*", "?"):
        modifier = cursor.advance()
    type_name = cursor.take_type_name()
    if type_name is None:
        return None
    is_array = False
    if cursor.current() == "[" and cursor.peek() == "]":
        cursor.advance()
        cursor.advance()
        is_array = True
    if not cursor.skip_spaces():
        return None
    attr_name = cursor.take_attr_name()
    if attr_name is None:
        return None
    tail = cursor.take_colon_tail()
    if tail is None:
        return None
    value, value_column = tail
    return modifier, type_name, is_array, attr_name, value, value_column


def match_default_override(text: str) -> tuple[str, str, int] | None:
    """Match an indented ``name: value`` line.

    Returns ``(attr_name, value, value_column)`` or None.
    """
    cursor = _Cursor(text)
    if not cursor.skip_spaces():
        return None
    attr_name = cursor.take_attr_name()
    if attr_name is None:
        return None
    tail = cursor.take_colon_tail()
    if tail is None:
        return None
    value, value_column = tail
    return attr_name, value, value_column


# ################
# Implementation
# ################


def _is_ascii_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_word_char(ch: str) -> bool:
    return _is_ascii_letter(ch) or ("0" <= ch <= "9") or ch == "_"


class _Cursor:
    """Character cursor over a single physical line."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def current(self) -> str:
        """Return the character at the current position, or '' at end of line."""
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def peek(self) -> str:
        """Return the character one position ahead, or '' at end of line."""
        if self._pos + 1 < len(self._text):
            return self._text[self._pos + 1]
        return ""

    def advance(self) -> str:
        ch = self._text[self._pos]
        self._pos += 1
        return ch

    def skip_spaces(self) -> bool:
        """Skip whitespace; return True if at least one character was skipped."""
        start = self._pos
        while self.current() and self.current().isspace():
            self._pos += 1
        return self._pos > start

    def take_type_name(self) -> str | None:
        """Consume ``[A-Za-z][A-Za-z0-9_]*``."""
        if not _is_ascii_letter(self.current()):
            return None
        start = self._pos
        while self.current() and _is_word_char(self.current()):
            self._pos += 1
        return self._text[start : self._pos]

    def take_attr_name(self) -> str | None:
        """Consume ``[a-z_][A-Za-z0-9_]*`` followed by any ``.segment`` parts."""
        first = self.current()
        if not (("a" <= first <= "z") or first == "_"):
            return None
        start = self._pos
        while self.current() and _is_word_char(self.current()):
            self._pos += 1
        while self.current() == "." and self.peek() and _is_word_char(self.peek()):
            self._pos += 1
            while self.current() and _is_word_char(self.current()):
                self._pos += 1
        return self._text[start : self._pos]

    def take_colon_tail(self) -> tuple[str, int] | None:
        """Consume optional spaces, a colon, and the rest of the line.

        The colon must end the line or be followed by whitespace. Returns the
        value text with leading whitespace removed and its 1-based column.
        """
        self.skip_spaces()
        if self.current() != ":":
            return None
        self._pos += 1
        if not self.current():
            return "", self._pos + 1
        if not self.skip_spaces():
            return None
        return self._text[self._pos :], self._pos + 1


class _LineReader:
    """Stateful scanner turning physical lines into logical lines."""

    def __init__(self, lines: Sequence[SourceLine]) -> None:
        self._lines = lines
        self._pos = 0
        self._in_struct = False
        self._rows_pending = False

    def read(self) -> Iterator[LogicalLine]:
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            self._pos += 1
            logical = self._classify(line)
            if logical is not None:
                yield logical

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _classify(self, line: SourceLine) -> LogicalLine | None:
        """Classify one physical line, consuming any lines it continues onto."""
        stripped = strip_inline_comment(line.text).strip()
        if not stripped:
            return None

        name = match_struct_header(stripped)
        if name is not None:
            self._in_struct = True
            self._rows_pending = False
            return StructHeader(name=name, source=line)

        field = match_field_declaration(line.text)
        if field is not None:
            return self._field_declaration(line, *field)

        if self._in_struct:
            override = match_default_override(line.text)
            if override is not None:
                attr_name, raw_value, value_column = override
                return DefaultOverride(
                    attr_name=attr_name,
                    value=self._complete_value(raw_value, line),
                    source=line,
                    value_column=value_column,
                )

        if stripped.startswith("-"):
            if not self._in_struct:
                raise ParseError(
                    "Instance data encountered outside of a struct block",
                    line.span(_first_non_space_column(line.text)),
                )
            self._rows_pending = True
            return self._instance_row(line, stripped)

        if self._rows_pending and line.text[:1].isspace():
            return RowContinuation(text=stripped, source=line)

        raise ParseError(
            f"Unrecognized line {stripped!r}: expected a struct header, field declaration, or instance row",
            line.span(_first_non_space_column(line.text)),
        )

    def _field_declaration(
        self,
        line: SourceLine,
        modifier: str,
        type_name: str,
        is_array: bool,
        attr_name: str,
        raw_value: str,
        value_column: int,
    ) -> FieldDeclaration:
        is_global = not line.text[:1].isspace()
        if not is_global and not self._in_struct:
            raise ParseError("Struct field defined before struct header", line.span(_first_non_space_column(line.text)))
        return FieldDeclaration(
            modifier=modifier,
            type_name=type_name,
            is_array=is_array,
            attr_name=attr_name,
            value=self._complete_value(raw_value, line),
            is_global=is_global,
            source=line,
            value_column=value_column,
        )

    def _instance_row(self, line: SourceLine, stripped: str) -> InstanceRow:
        column = line.text.find("-") + 2
        text = stripped[1:].strip()
        while text.endswith("\\") and self._pos < len(self._lines):
            text = text[:-1].rstrip()
            following = self._lines[self._pos]
            self._pos += 1
            text = f"{text} {strip_inline_comment(following.text).strip()}"
        delimiter = open_triple_delimiter(text)
        if delimiter is not None:
            text = self._accumulate_multiline(text, delimiter, line)
        return InstanceRow(text=text, source=line, column=column)

    # ------------------------------------------------------------------
    # Multi-line accumulation
    # ------------------------------------------------------------------

    def _complete_value(self, raw_value: str, line: SourceLine) -> str:
        """Accumulate a field value spanning several lines and strip its comment."""
        value = raw_value
        delimiter = open_triple_delimiter(value)
        if delimiter is not None:
            value = self._accumulate_multiline(value, delimiter, line)
        value = strip_inline_comment(value).strip()
        if value.startswith("(") and has_unclosed_parentheses(value):
            value = strip_inline_comment(self._accumulate_enum_list(value, line)).strip()
        return value

    def _accumulate_multiline(self, text: str, delimiter: str, start: SourceLine) -> str:
        parts = [text]
        joined = text
        while self._pos < len(self._lines) and has_unclosed_delimiter(joined, delimiter):
            parts.append(self._lines[self._pos].text)
            self._pos += 1
            joined = "\n".join(parts)
        if has_unclosed_delimiter(joined, delimiter):
            raise ParseError(f"Unterminated {delimiter} string literal", start.span(start.text.find(delimiter) + 1))
        return joined

    def _accumulate_enum_list(self, text: str, start: SourceLine) -> str:
        parts = [text]
        joined = text
        while self._pos < len(self._lines) and has_unclosed_parentheses(strip_inline_comment(joined)):
            parts.append(self._lines[self._pos].text)
            self._pos += 1
            joined = "\n".join(parts)
        if has_unclosed_parentheses(strip_inline_comment(joined)):
            raise ParseError("Unterminated enum declaration", start.span(start.text.find("(") + 1))
        return joined


def _first_non_space_column(text: str) -> int:
    return len(text) - len(text.lstrip()) + 1
