# Copyright 2026 Tyco Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for struct schemas, the primary-key index, and the document context."""

import pytest

from tyco.diagnostics import ResolutionError
from tyco.model.context import Context
from tyco.model.schema import FieldSchema, Struct, is_scalar_type, type_descriptor
from tyco.model.values import FloatValue, InstanceValue, IntValue, StringValue

# ###############
# Test Helpers
# ###############


def _host_struct() -> Struct:
    struct = Struct(name="Host")
    struct.add_field(FieldSchema(name="hostname", type_name="str", is_primary_key=True))
    struct.add_field(FieldSchema(name="cores", type_name="int"))
    return struct


def _host(hostname: str, cores: int) -> InstanceValue:
    return InstanceValue(
        struct_name="Host",
        fields={"hostname": StringValue(value=hostname), "cores": IntValue(value=cores)},
    )


# ###############
# Fields
# ###############


class TestFields:
    def test_fields_keep_declaration_order(self) -> None:
        struct = _host_struct()
        assert [field.name for field in struct.fields] == ["hostname", "cores"]

    def test_primary_key_is_recorded(self) -> None:
        struct = _host_struct()
        assert struct.has_primary_key
        assert struct.primary_key == "hostname"

    def test_struct_without_primary_key(self) -> None:
        struct = Struct(name="Point")
        struct.add_field(FieldSchema(name="x", type_name="int"))
        assert not struct.has_primary_key

    def test_later_primary_key_wins(self) -> None:
        struct = _host_struct()
        struct.add_field(FieldSchema(name="serial", type_name="str", is_primary_key=True))
        assert struct.primary_key == "serial"

    def test_get_field_returns_none_for_unknown(self) -> None:
        assert _host_struct().get_field("missing") is None

    def test_descriptor(self) -> None:
        assert FieldSchema(name="tags", type_name="str", is_array=True).descriptor == "str[]"
        assert FieldSchema(name="port", type_name="Port").descriptor == "Port"
        assert type_descriptor("int", False) == "int"

    def test_scalar_types(self) -> None:
        assert is_scalar_type("datetime")
        assert not is_scalar_type("Port")


class TestDefaults:
    def test_set_default_stores_a_copy(self) -> None:
        struct = _host_struct()
        default = IntValue(value=4)
        struct.set_default("cores", default)
        field = struct.get_field("cores")
        assert field is not None
        assert field.default == IntValue(value=4)
        assert field.default is not default

    def test_set_default_none_clears(self) -> None:
        struct = _host_struct()
        struct.set_default("cores", IntValue(value=4))
        struct.set_default("cores", None)
        field = struct.get_field("cores")
        assert field is not None
        assert field.default is None

    def test_set_default_unknown_field(self) -> None:
        with pytest.raises(ResolutionError, match="Unknown field 'ram' in struct 'Host'") as exc_info:
            _host_struct().set_default("ram", IntValue(value=1))
        assert exc_info.value.struct_name == "Host"
        assert exc_info.value.field_name == "ram"

    def test_set_enum_choices(self) -> None:
        struct = _host_struct()
        struct.set_enum_choices("cores", [IntValue(value=2), IntValue(value=4)])
        field = struct.get_field("cores")
        assert field is not None
        assert field.enum_choices == [IntValue(value=2), IntValue(value=4)]

    def test_set_enum_choices_unknown_field(self) -> None:
        with pytest.raises(ResolutionError):
            _host_struct().set_enum_choices("ram", [])


# ###############
# Primary-Key Index
# ###############


class TestPrimaryIndex:
    def test_lookup_by_rendered_text(self) -> None:
        struct = _host_struct()
        struct.add_instance(_host("a", 1))
        struct.add_instance(_host("b", 2))
        struct.build_primary_index()
        found = struct.find_by_primary_key("b")
        assert found is not None
        assert found.fields["cores"] == IntValue(value=2)

    def test_missing_key(self) -> None:
        struct = _host_struct()
        struct.add_instance(_host("a", 1))
        struct.build_primary_index()
        assert struct.find_by_primary_key("z") is None

    def test_colliding_text_last_instance_wins(self) -> None:
        struct = Struct(name="Rate")
        struct.add_field(FieldSchema(name="ratio", type_name="float", is_primary_key=True))
        struct.add_field(FieldSchema(name="label", type_name="str"))
        struct.add_instance(
            InstanceValue(struct_name="Rate", fields={"ratio": FloatValue(value=1.0), "label": StringValue(value="a")})
        )
        struct.add_instance(
            InstanceValue(struct_name="Rate", fields={"ratio": IntValue(value=1), "label": StringValue(value="b")})
        )
        struct.build_primary_index()
        assert len(struct.primary_index) == 1
        found = struct.find_by_primary_key("1")
        assert found is not None
        assert found.fields["label"] == StringValue(value="b")

    def test_instance_without_key_is_skipped(self) -> None:
        struct = _host_struct()
        struct.add_instance(InstanceValue(struct_name="Host", fields={"cores": IntValue(value=1)}))
        struct.build_primary_index()
        assert struct.primary_index == {}

    def test_rebuild_reflects_current_instances(self) -> None:
        struct = _host_struct()
        struct.add_instance(_host("a", 1))
        struct.build_primary_index()
        struct.instances.clear()
        struct.add_instance(_host("b", 2))
        struct.build_primary_index()
        assert list(struct.primary_index) == ["b"]

    def test_struct_without_primary_key_has_empty_index(self) -> None:
        struct = Struct(name="Point")
        struct.add_field(FieldSchema(name="x", type_name="int"))
        struct.add_instance(InstanceValue(struct_name="Point", fields={"x": IntValue(value=1)}))
        struct.build_primary_index()
        assert struct.primary_index == {}


# ###############
# Context
# ###############


class TestContext:
    def test_ensure_struct_registers_once(self) -> None:
        context = Context()
        first = context.ensure_struct("Host")
        assert context.ensure_struct("Host") is first
        assert list(context.structs) == ["Host"]

    def test_globals_keep_order(self) -> None:
        context = Context()
        context.set_global("b", IntValue(value=1))
        context.set_global("a", IntValue(value=2))
        assert list(context.globals) == ["b", "a"]
        assert context.get_global("a") == IntValue(value=2)
        assert context.get_global("missing") is None

    def test_snapshot_is_independent(self) -> None:
        context = Context()
        context.set_global("n", IntValue(value=1))
        struct = context.ensure_struct("Host")
        struct.add_instance(_host("a", 1))
        snapshot = context.snapshot()
        context.globals["n"] = IntValue(value=2)
        struct.instances[0].fields["cores"] = IntValue(value=99)
        assert snapshot.globals["n"] == IntValue(value=1)
        assert snapshot.structs["Host"].instances[0].fields["cores"] == IntValue(value=1)

    def test_snapshot_structs_is_independent(self) -> None:
        context = Context()
        context.ensure_struct("Host").add_field(FieldSchema(name="hostname", type_name="str"))
        copy = context.snapshot_structs()
        copy["Host"].fields.clear()
        assert len(context.structs["Host"].fields) == 1
