# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Quote- and bracket-aware text scanning helpers for Tyco source lines.

These helpers operate on plain strings and know nothing about the document
model. Errors are raised without a source span; callers attach the span of
the line being processed.
"""

import re

from tyco.diagnostics import ParseError

# ###############
# Public Interface
# ###############

TRIPLE_BASIC = '"""'
TRIPLE_LITERAL = "'''"

_QUOTES = "\"'"
_OPENERS = "([{"
_CLOSERS = ")]}"

_INT64_MAX = 2**63 - 1
_ESCAPED_NEWLINE = re.compile(r"\\\s*\r?\n\s*")
_SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    '"': '"',
    "\\": "\\",
}
_DIGITS_BY_BASE: dict[int, frozenset[str]] = {
    2: frozenset("01"),
    8: frozenset("01234567"),
    10: frozenset("0123456789"),
    16: frozenset("0123456789abcdefABCDEF"),
}


def strip_inline_comment(line: str) -> str:
    """Remove a trailing ``#`` comment and trailing whitespace from *line*.

    A ``#`` inside a single- or double-quoted string is not a comment marker,
    and a backslash inside a string escapes the following character.
    """
    in_quotes = False
    escape = False
    quote = ""
    for idx, ch in enumerate(line):
        if escape:
            escape = False
            continue
        if in_quotes:
            if ch == "\\":
                escape = True
            elif ch == quote:
                in_quotes = False
            continue
        if ch in _QUOTES:
            in_quotes = True
            quote = ch
        elif ch == "#":
            return line[:idx].rstrip()
    return line.rstrip()


def has_unclosed_delimiter(text: str, delimiter: str) -> bool:
    """Return True if *delimiter* opens in *text* without a matching close after it."""
    start = text.find(delimiter)
    if start < 0:
        return False
    return text.find(delimiter, start + len(delimiter)) < 0


def open_triple_delimiter(text: str) -> str | None:
    """Return the triple-quote delimiter left open in *text*, or None."""
    if has_unclosed_delimiter(text, TRIPLE_BASIC) or has_unclosed_delimiter(text, TRIPLE_LITERAL):
        return TRIPLE_LITERAL if TRIPLE_LITERAL in text else TRIPLE_BASIC
    return None


def has_unclosed_parentheses(text: str) -> bool:
    """Return True if *text* opens more ``(`` than it closes, outside quotes."""
    depth = 0
    in_quotes = False
    escape = False
    quote = ""
    for ch in text:
        if escape:
            escape = False
            continue
        if in_quotes:
            if ch == "\\":
                escape = True
            elif ch == quote:
                in_quotes = False
            continue
        if ch in _QUOTES:
            in_quotes = True
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
    return depth > 0


def split_top_level(text: str, delimiter: str = ",") -> list[str]:
    """Split *text* on *delimiter* outside quotes and outside ``()``/``[]``/``{}``.

    Every part is whitespace-trimmed and kept, including empty ones, so that
    callers can decide whether a blank slot is meaningful. Text that is blank
    altogether yields an empty list.
    """
    if not text.strip():
        return []
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    in_quotes = False
    escape = False
    quote = ""
    for ch in text:
        if escape:
            current.append(ch)
            escape = False
            continue
        if in_quotes:
            current.append(ch)
            if ch == "\\":
                escape = True
            elif ch == quote:
                in_quotes = False
            continue
        if ch in _QUOTES:
            in_quotes = True
            quote = ch
            current.append(ch)
        elif ch == "\\":
            current.append(ch)
            escape = True
        elif ch in _OPENERS:
            depth += 1
            current.append(ch)
        elif ch in _CLOSERS:
            if depth > 0:
                depth -= 1
            current.append(ch)
        elif ch == delimiter and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    parts.append("".join(current).strip())
    return parts


def split_named_argument(part: str) -> tuple[str, str] | None:
    """Split ``name: value`` at the first top-level colon.

    Returns None when *part* is positional: no top-level colon, a name that
    is not identifier-shaped, or an empty value.
    """
    depth = 0
    in_quotes = False
    quote = ""
    idx = 0
    while idx < len(part):
        ch = part[idx]
        if in_quotes:
            if ch == "\\":
                idx += 1
            elif ch == quote:
                in_quotes = False
        elif ch in _QUOTES:
            in_quotes = True
            quote = ch
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            if depth > 0:
                depth -= 1
        elif ch == ":" and depth == 0:
            name = part[:idx].strip()
            value = part[idx + 1 :].strip()
            if is_identifier(name) and value:
                return name, value
            return None
        idx += 1
    return None


def is_identifier(name: str) -> bool:
    """Return True for a letter or underscore followed by letters, digits, or underscores."""
    if not name or not (name[0].isalpha() or name[0] == "_"):
        return False
    return all(ch.isalnum() or ch == "_" for ch in name[1:])


def parse_integer(token: str) -> int:
    """Parse a decimal, ``0x`` hex, ``0o`` octal, or ``0b`` binary integer literal.

    An optional leading ``-`` negates the unsigned body. The result must fit
    in a signed 64-bit integer.
    """
    trimmed = token.strip()
    if not trimmed:
        raise ParseError(f"Empty integer literal: {token!r}")
    negative = trimmed.startswith("-")
    body = trimmed[1:] if negative else trimmed
    base = 10
    prefix = body[:2].lower()
    if prefix == "0x":
        base = 16
    elif prefix == "0o":
        base = 8
    elif prefix == "0b":
        base = 2
    if base != 10:
        body = body[2:]
    if not body or any(ch not in _DIGITS_BY_BASE[base] for ch in body):
        raise ParseError(f"Failed to parse integer {token!r}")
    value = int(body, base)
    limit = _INT64_MAX + 1 if negative else _INT64_MAX
    if value > limit:
        raise ParseError(f"Integer literal {token!r} is out of range")
    return -value if negative else value


def parse_float(token: str) -> float:
    """Parse a locale-independent decimal floating-point literal."""
    trimmed = token.strip()
    if "_" in trimmed:
        raise ParseError(f"Invalid float literal {token!r}")
    try:
        return float(trimmed)
    except ValueError:
        raise ParseError(f"Invalid float literal {token!r}") from None


def unescape_basic_string(value: str) -> str:
    """Decode the escape sequences of a double-quoted string.

    A backslash followed by a newline removes the newline and the whitespace
    around it. Unknown escapes are kept verbatim.
    """
    value = _ESCAPED_NEWLINE.sub("", value)
    chars: list[str] = []
    idx = 0
    while idx < len(value):
        ch = value[idx]
        if ch != "\\":
            chars.append(ch)
            idx += 1
            continue
        if idx + 1 >= len(value):
            chars.append("\\")
            break
        esc = value[idx + 1]
        if esc in _SIMPLE_ESCAPES:
            chars.append(_SIMPLE_ESCAPES[esc])
            idx += 2
        elif esc in "uU":
            length = 4 if esc == "u" else 8
            digits = value[idx + 2 : idx + 2 + length]
            if len(digits) < length:
                raise ParseError("Incomplete unicode escape sequence")
            chars.append(_code_point(digits))
            idx += 2 + length
        else:
            chars.append("\\" + esc)
            idx += 2
    return "".join(chars)


def strip_leading_newline(value: str) -> str:
    return value[1:] if value.startswith("\n") else value


def normalize_time(value: str) -> str:
    """Pad or truncate the fractional-seconds component of *value* to exactly 6 digits."""
    dot = value.find(".")
    if dot < 0:
        return value
    head = value[: dot + 1]
    rest = value[dot + 1 :]
    count = 0
    while count < len(rest) and rest[count].isdigit():
        count += 1
    digits = rest[:count][:6].ljust(6, "0")
    return head + digits + rest[count:]


def normalize_datetime(value: str) -> str:
    """Normalize a timestamp: ``T`` separator, ``+00:00`` for ``Z``, 6-digit fraction."""
    result = value.replace(" ", "T")
    if result.endswith("Z"):
        result = result[:-1] + "+00:00"
    dot = result.find(".")
    if dot < 0:
        return result
    tz_start = len(result)
    for idx in range(dot, len(result)):
        if result[idx] in "+-":
            tz_start = idx
            break
    return result[:dot] + normalize_time(result[dot:tz_start]) + result[tz_start:]


# ################
# Implementation
# ################


def _code_point(digits: str) -> str:
    if any(ch not in _DIGITS_BY_BASE[16] for ch in digits):
        raise ParseError(f"Invalid unicode escape sequence '\\u{digits}'")
    try:
        return chr(int(digits, 16))
    except (ValueError, OverflowError):
        raise ParseError(f"Invalid unicode code point U+{digits}") from None
