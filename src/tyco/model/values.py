# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tagged-union value representations for the Tyco document model.

Every value is a small pydantic model discriminated by its ``kind`` field.
Values are copied, never shared: :meth:`clone` always returns a fully
independent deep copy so that resolution passes can work against snapshots.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

# A generic export node: the JSON-compatible tree produced by to_export_node().
ExportNode = None | bool | int | float | str | list[Any] | dict[str, Any]


class _BaseValue(BaseModel):
    """Behavior shared by all value variants."""

    def clone(self) -> Self:
        """Return a deep copy of this value."""
        return self.model_copy(deep=True)

    def render_text(self) -> str:
        """Return the canonical text form used for templates and primary-key lookup."""
        return ""

    def to_export_node(self) -> ExportNode:
        """Return the generic export node for this value."""
        return None


class NullValue(_BaseValue):
    """The explicit ``null`` value."""

    kind: Literal["null"] = "null"


class BoolValue(_BaseValue):
    """A boolean value."""

    kind: Literal["bool"] = "bool"
    value: bool

    def render_text(self) -> str:
        return "true" if self.value else "false"

    def to_export_node(self) -> ExportNode:
        return self.value


class IntValue(_BaseValue):
    """A signed 64-bit integer value."""

    kind: Literal["int"] = "int"
    value: int

    def render_text(self) -> str:
        return str(self.value)

    def to_export_node(self) -> ExportNode:
        return self.value


class FloatValue(_BaseValue):
    """A 64-bit floating-point value."""

    kind: Literal["float"] = "float"
    value: float

    def render_text(self) -> str:
        return format_float(self.value)

    def to_export_node(self) -> ExportNode:
        return self.value


class StringValue(_BaseValue):
    """A string value.

    Attributes:
        value: The stored text.
        has_template: True while the text still holds ``{...}`` placeholders
            that have not been rendered.
        is_literal: True for single-quoted literals, which never undergo
            escape processing or template rendering.
        escaped: True when ``value`` still contains escape sequences that
            must be decoded once rendering is complete.
    """

    kind: Literal["str"] = "str"
    value: str
    has_template: bool = False
    is_literal: bool = False
    escaped: bool = False

    def render_text(self) -> str:
        return self.value

    def to_export_node(self) -> ExportNode:
        return self.value


class DateValue(_BaseValue):
    """A calendar date, stored as text."""

    kind: Literal["date"] = "date"
    value: str

    def render_text(self) -> str:
        return self.value

    def to_export_node(self) -> ExportNode:
        return self.value


class TimeValue(_BaseValue):
    """A time of day, stored as text with a six-digit fraction when present."""

    kind: Literal["time"] = "time"
    value: str

    def render_text(self) -> str:
        return self.value

    def to_export_node(self) -> ExportNode:
        return self.value


class DateTimeValue(_BaseValue):
    """A timestamp, stored as normalized ISO-8601 text."""

    kind: Literal["datetime"] = "datetime"
    value: str

    def render_text(self) -> str:
        return self.value

    def to_export_node(self) -> ExportNode:
        return self.value


class ArrayValue(_BaseValue):
    """An ordered sequence of values."""

    kind: Literal["array"] = "array"
    items: list[Value] = _Field(default_factory=list)

    def to_export_node(self) -> ExportNode:
        return [item.to_export_node() for item in self.items]


class InstanceValue(_BaseValue):
    """One row of a struct: the struct name and its insertion-ordered fields."""

    kind: Literal["instance"] = "instance"
    struct_name: str
    fields: dict[str, Value] = _Field(default_factory=dict)

    def get(self, name: str) -> Value | None:
        """Return the value of field *name*, or None if the field is absent."""
        return self.fields.get(name)

    def to_export_node(self) -> ExportNode:
        return {name: value.to_export_node() for name, value in self.fields.items()}


class ReferenceValue(_BaseValue):
    """A reference to another struct's row by primary key.

    The ``resolved`` slot holds an owned deep copy of the target row once
    reference resolution has run; it never aliases the registry's storage.
    """

    kind: Literal["reference"] = "reference"
    struct_name: str
    primary_key: str
    resolved: InstanceValue | None = None

    def render_text(self) -> str:
        return self.primary_key

    def to_export_node(self) -> ExportNode:
        if self.resolved is None:
            return None
        return self.resolved.to_export_node()


# A Tyco value: any of the scalar, container, or struct-related variants.
Value = Annotated[
    NullValue
    | BoolValue
    | IntValue
    | FloatValue
    | StringValue
    | DateValue
    | TimeValue
    | DateTimeValue
    | ArrayValue
    | InstanceValue
    | ReferenceValue,
    _Field(discriminator="kind"),
]

TEXT_VALUE_TYPES = (StringValue, DateValue, TimeValue, DateTimeValue)


def format_float(value: float) -> str:
    """Format a float in general numeric form.

    Integral values print without a fractional part (``2.0`` -> ``"2"``);
    everything else uses the shortest representation that round-trips.
    """
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


# Resolve forward references for the recursive container models.
ArrayValue.model_rebuild()
InstanceValue.model_rebuild()
ReferenceValue.model_rebuild()
