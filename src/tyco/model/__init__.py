# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Document model for Tyco (values, struct schemas, and the context aggregate)."""

from tyco.model.context import Context
from tyco.model.schema import SCALAR_TYPES, FieldSchema, Struct
from tyco.model.values import (
    ArrayValue,
    BoolValue,
    DateTimeValue,
    DateValue,
    ExportNode,
    FloatValue,
    InstanceValue,
    IntValue,
    NullValue,
    ReferenceValue,
    StringValue,
    TimeValue,
    Value,
)

__all__ = [
    # Values
    "Value",
    "ExportNode",
    "NullValue",
    "BoolValue",
    "IntValue",
    "FloatValue",
    "StringValue",
    "DateValue",
    "TimeValue",
    "DateTimeValue",
    "ArrayValue",
    "InstanceValue",
    "ReferenceValue",
    # Schema
    "SCALAR_TYPES",
    "FieldSchema",
    "Struct",
    # Document
    "Context",
]
