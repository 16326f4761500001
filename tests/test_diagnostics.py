# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for source spans and the rendering of located errors."""

from tyco.diagnostics import ParseError, ResolutionError, SourceLine, SourceSpan, located

# ###############
# Source Spans
# ###############


class TestSourceSpan:
    def test_location_without_path(self) -> None:
        assert SourceSpan(None, 3, 7, "int x: 1").location() == "Line 3, column 7"

    def test_location_with_path(self) -> None:
        span = SourceSpan("conf/app.tyco", 2, 5, "str a: b")
        assert span.location() == 'File "conf/app.tyco", line 2, column 5'

    def test_render_points_at_column(self) -> None:
        span = SourceSpan(None, 1, 8, "int x: abc")
        assert span.render() == "Line 1, column 8:\nint x: abc\n       ^"

    def test_render_expands_leading_tab(self) -> None:
        span = SourceSpan(None, 1, 9, "\tint x: abc")
        assert span.render() == "Line 1, column 9:\n\tint x: abc\n" + " " * 15 + "^"

    def test_render_tab_advances_to_next_multiple_of_eight(self) -> None:
        span = SourceSpan(None, 4, 4, "ab\tc")
        assert span.render() == "Line 4, column 4:\nab\tc\n" + " " * 8 + "^"

    def test_source_line_span_clamps_column(self) -> None:
        span = SourceLine("x", None, 5).span(0)
        assert span == SourceSpan(None, 5, 1, "x")

    def test_located_moves_column(self) -> None:
        assert located(SourceSpan(None, 1, 1, "abc"), 3).column == 3


# ###############
# Errors
# ###############


class TestErrors:
    def test_message_without_span(self) -> None:
        error = ParseError("Bad token")
        assert str(error) == "Bad token"
        assert error.render() == "Bad token"
        assert error.line is None

    def test_render_with_span(self) -> None:
        error = ParseError("Invalid int literal 'abc'", SourceSpan(None, 1, 9, "\tint x: abc"))
        assert error.render() == "Line 1, column 9:\n\tint x: abc\n" + " " * 15 + "^\nInvalid int literal 'abc'"
        assert str(error) == "Line 1, column 9: Invalid int literal 'abc'"

    def test_with_span_keeps_type_and_details(self) -> None:
        error = ResolutionError("Unknown Port(ftp)", struct_name="Port", key="ftp")
        moved = error.with_span(SourceSpan("a.tyco", 6, 2, "  - x, Port(ftp)"))
        assert isinstance(moved, ResolutionError)
        assert moved.key == "ftp"
        assert moved.line == 6
        assert error.span is None
