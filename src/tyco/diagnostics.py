# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source locations and the error hierarchy shared by every Tyco stage.

All errors are fatal: the first one aborts the whole load, and callers
receive a single exception rather than a partial document.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

# ###############
# Public Interface
# ###############

_TAB_WIDTH = 8


@dataclass(frozen=True)
class SourceLine:
    """One physical line of (include-expanded) source text.

    Attributes:
        text: The raw line, without its trailing newline.
        path: The file the line came from, or None for in-memory text.
        line_number: 1-based line number within *path*.
    """

    text: str
    path: str | None
    line_number: int

    def span(self, column: int = 1) -> SourceSpan:
        """Return a span pointing at *column* (1-based) of this line."""
        return SourceSpan(self.path, self.line_number, max(column, 1), self.text)


@dataclass(frozen=True)
class SourceSpan:
    """A source position renderable as a two-line ``source`` + ``caret`` display."""

    path: str | None
    line: int
    column: int
    text: str

    def location(self) -> str:
        if self.path:
            return f'File "{self.path}", line {self.line}, column {self.column}'
        return f"Line {self.line}, column {self.column}"

    def render(self) -> str:
        """Render the location header, the source line, and a caret under the column.

        Tabs before the column advance the caret to the next multiple of 8.
        """
        visual_col = 0
        for ch in self.text[: self.column - 1]:
            if ch == "\t":
                visual_col = (visual_col // _TAB_WIDTH + 1) * _TAB_WIDTH
            else:
                visual_col += 1
        pointer = " " * visual_col + "^"
        return f"{self.location()}:\n{self.text}\n{pointer}"


class TycoError(Exception):
    """Base class for every error raised while loading a Tyco document.

    Attributes:
        message: The bare message without location information.
        span: The source position of the error, when known.
    """

    def __init__(self, message: str, span: SourceSpan | None = None) -> None:
        text = message if span is None else f"{span.location()}: {message}"
        super().__init__(text)
        self.message = message
        self.span = span

    @property
    def line(self) -> int | None:
        return self.span.line if self.span is not None else None

    @property
    def column(self) -> int | None:
        return self.span.column if self.span is not None else None

    def with_span(self, span: SourceSpan) -> TycoError:
        """Return a copy of this error located at *span*."""
        clone = _copy_error(self)
        TycoError.__init__(clone, self.message, span)
        return clone

    def render(self) -> str:
        """Return the message followed by the caret display when a span is known."""
        if self.span is None:
            return self.message
        return f"{self.span.render()}\n{self.message}"


class ParseError(TycoError):
    """Raised for lexical, structural, and type/value errors in the source text."""


class ResolutionError(TycoError):
    """Raised when the document is well-formed but cannot be resolved.

    Attributes:
        struct_name: The struct involved, when known.
        field_name: The field involved, when known.
        key: The primary key involved, when known.
    """

    def __init__(
        self,
        message: str,
        span: SourceSpan | None = None,
        *,
        struct_name: str | None = None,
        field_name: str | None = None,
        key: str | None = None,
    ) -> None:
        super().__init__(message, span)
        self.struct_name = struct_name
        self.field_name = field_name
        self.key = key


def located(span: SourceSpan, column: int) -> SourceSpan:
    """Return *span* moved to *column* of the same line."""
    return replace(span, column=max(column, 1))


# ################
# Implementation
# ################


def _copy_error(error: TycoError) -> TycoError:
    clone = error.__class__.__new__(error.__class__)
    clone.__dict__.update(error.__dict__)
    return clone
