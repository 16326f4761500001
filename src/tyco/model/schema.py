# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Struct schemas: ordered field definitions, instance rows, and the primary-key index."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

from tyco.diagnostics import ResolutionError
from tyco.model.values import InstanceValue, Value

# ###############
# Public Interface
# ###############

SCALAR_TYPES: tuple[str, ...] = ("bool", "int", "float", "str", "date", "time", "datetime")


class FieldSchema(BaseModel):
    """A declared field of a struct.

    Attributes:
        name: The attribute name.
        type_name: A scalar type name or a struct name (without the ``[]`` marker).
        is_primary_key: Declared with the ``*`` modifier.
        is_nullable: Declared with the ``?`` modifier.
        is_array: Declared with the ``[]`` marker.
        default: Value copied into instances that omit this field.
        enum_choices: Permitted values, for non-array scalar fields only.
    """

    name: str
    type_name: str
    is_primary_key: bool = False
    is_nullable: bool = False
    is_array: bool = False
    default: Value | None = None
    enum_choices: list[Value] | None = None

    @property
    def descriptor(self) -> str:
        """The type descriptor used by the value parser, e.g. ``int`` or ``str[]``."""
        return type_descriptor(self.type_name, self.is_array)


class Struct(BaseModel):
    """A named record schema together with its collected instance rows."""

    name: str
    fields: list[FieldSchema] = _Field(default_factory=list)
    instances: list[InstanceValue] = _Field(default_factory=list)
    primary_key: str | None = None
    primary_index: dict[str, InstanceValue] = _Field(default_factory=dict)

    @property
    def has_primary_key(self) -> bool:
        return self.primary_key is not None

    def add_field(self, field: FieldSchema) -> None:
        """Append *field*; a primary-key field replaces any earlier primary-key designation."""
        if field.is_primary_key:
            self.primary_key = field.name
        self.fields.append(field)

    def get_field(self, name: str) -> FieldSchema | None:
        """Return the field named *name*, or None."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def require_field(self, name: str) -> FieldSchema:
        """Return the field named *name*.

        Raises:
            ResolutionError: If the struct has no such field.
        """
        field = self.get_field(name)
        if field is None:
            raise ResolutionError(
                f"Unknown field '{name}' in struct '{self.name}'",
                struct_name=self.name,
                field_name=name,
            )
        return field

    def set_default(self, name: str, value: Value | None) -> None:
        """Replace the default of field *name*; None clears it."""
        self.require_field(name).default = value.clone() if value is not None else None

    def set_enum_choices(self, name: str, choices: list[Value]) -> None:
        """Replace the enum constraint of field *name*."""
        self.require_field(name).enum_choices = [choice.clone() for choice in choices]

    def add_instance(self, instance: InstanceValue) -> None:
        self.instances.append(instance)

    def build_primary_index(self) -> None:
        """Rebuild the primary-key index from the current instance list.

        Keys are the rendered text of each instance's primary-key value, so two
        keys that render identically collide and the later instance wins.
        Instances without a primary-key value are skipped.
        """
        self.primary_index.clear()
        if self.primary_key is None:
            return
        for instance in self.instances:
            value = instance.get(self.primary_key)
            if value is not None:
                self.primary_index[value.render_text()] = instance

    def find_by_primary_key(self, key: str) -> InstanceValue | None:
        """Return the instance whose primary key renders exactly as *key*."""
        return self.primary_index.get(key)


def type_descriptor(type_name: str, is_array: bool) -> str:
    """Combine a base type name and array flag into a value-parser type descriptor."""
    return f"{type_name}[]" if is_array else type_name


def is_scalar_type(type_name: str) -> bool:
    return type_name in SCALAR_TYPES
