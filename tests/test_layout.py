"""Tests for type layout resolution."""

import pytest

from anchor_codec import Idl, SchemaError, TypeTable, parse_idl_type, resolve_layout
from anchor_codec.idl import IdlTypeDefined, IdlTypeDef
from anchor_codec.idl.types import parse_type_def_body


def table(*type_defs):
    return TypeTable(
        IdlTypeDef(name=name, type=parse_type_def_body(body)) for name, body in type_defs
    )


class TestPrimitiveLayouts:
    @pytest.mark.parametrize(
        "name,size",
        [
            ("bool", 1),
            ("u8", 1),
            ("i16", 2),
            ("u32", 4),
            ("f32", 4),
            ("i64", 8),
            ("f64", 8),
            ("u128", 16),
            ("pubkey", 32),
        ],
    )
    def test_fixed_sizes(self, name, size):
        layout = resolve_layout(parse_idl_type(name), TypeTable())
        assert layout.is_fixed_size
        assert layout.min_size == size
        assert layout.max_size == size
        assert layout.size == size

    @pytest.mark.parametrize("raw", ["string", "bytes", {"vec": "u64"}])
    def test_length_prefixed(self, raw):
        layout = resolve_layout(parse_idl_type(raw), TypeTable())
        assert not layout.is_fixed_size
        assert layout.min_size == 4
        assert layout.max_size is None
        assert layout.size is None


class TestCompositeLayouts:
    def test_option(self):
        layout = resolve_layout(parse_idl_type({"option": "u32"}), TypeTable())
        assert not layout.is_fixed_size
        assert layout.min_size == 1
        assert layout.max_size == 5

    def test_option_of_unbounded(self):
        layout = resolve_layout(parse_idl_type({"option": "string"}), TypeTable())
        assert layout.min_size == 1
        assert layout.max_size is None

    def test_array(self):
        layout = resolve_layout(parse_idl_type({"array": ["u16", 10]}), TypeTable())
        assert layout.is_fixed_size
        assert layout.size == 20

    def test_array_of_variable(self):
        layout = resolve_layout(parse_idl_type({"array": ["string", 3]}), TypeTable())
        assert not layout.is_fixed_size
        assert layout.min_size == 12

    def test_struct(self, idl):
        types = TypeTable(idl.types)
        point = types.layout(IdlTypeDefined("Point"))
        assert point.is_fixed_size
        assert point.size == 8
        assert [f.name for f in point.fields] == ["x", "y"]

        data = types.layout(IdlTypeDefined("Data"))
        assert not data.is_fixed_size
        assert data.min_size == 8 + 4 + 1

    def test_enum(self, idl):
        shape = TypeTable(idl.types).layout(IdlTypeDefined("Shape"))
        assert not shape.is_fixed_size
        assert shape.min_size == 1
        assert shape.max_size == 1 + 16
        assert len(shape.variants) == 3

    def test_enum_equal_variants_is_fixed(self):
        types = table(
            (
                "Side",
                {
                    "kind": "enum",
                    "variants": [
                        {"name": "Bid", "fields": ["u64"]},
                        {"name": "Ask", "fields": ["i64"]},
                    ],
                },
            )
        )
        layout = types.cached_layout("Side")
        assert layout.is_fixed_size
        assert layout.size == 9

    def test_unit_enum(self):
        types = table(("Status", {"kind": "enum", "variants": [{"name": "On"}, {"name": "Off"}]}))
        assert types.cached_layout("Status").size == 1

    def test_recursive_type_terminates(self):
        types = table(
            (
                "Node",
                {
                    "kind": "struct",
                    "fields": [
                        {"name": "value", "type": "u8"},
                        {"name": "next", "type": {"option": {"defined": "Node"}}},
                    ],
                },
            )
        )
        layout = types.cached_layout("Node")
        assert not layout.is_fixed_size
        assert layout.min_size == 2
        assert layout.max_size is None


class TestTypeTable:
    def test_unresolved_reference(self):
        with pytest.raises(SchemaError, match="Missing"):
            table(
                (
                    "Holder",
                    {"kind": "struct", "fields": [{"name": "m", "type": {"defined": "Missing"}}]},
                )
            )

    def test_unresolved_reference_in_instruction(self):
        idl = Idl.from_dict(
            {"instructions": [{"name": "go", "accounts": [], "args": [{"name": "a", "type": {"defined": "Nope"}}]}]}
        )
        with pytest.raises(SchemaError, match="Nope"):
            TypeTable.from_idl(idl)

    def test_duplicate_names(self):
        body = {"kind": "struct", "fields": []}
        with pytest.raises(SchemaError, match="Duplicate"):
            table(("A", body), ("A", body))

    def test_get_unknown(self):
        with pytest.raises(SchemaError):
            TypeTable().get("Nope")

    def test_membership(self, idl):
        types = TypeTable(idl.types)
        assert "Point" in types
        assert "Nope" not in types
        assert len(types) == 4
        assert types.names() == ["Data", "Transfer", "Point", "Shape"]


class TestDirectCycles:
    def test_alias_to_itself(self):
        with pytest.raises(SchemaError, match="A -> A"):
            table(("A", {"kind": "type", "alias": {"defined": "A"}}))

    def test_alias_loop(self):
        with pytest.raises(SchemaError, match="contains itself"):
            table(
                ("A", {"kind": "type", "alias": {"defined": "B"}}),
                ("B", {"kind": "type", "alias": {"defined": "A"}}),
            )

    def test_struct_field_loop(self):
        with pytest.raises(SchemaError, match="Outer -> Inner -> Outer"):
            table(
                ("Outer", {"kind": "struct", "fields": [{"name": "inner", "type": {"defined": "Inner"}}]}),
                (
                    "Inner",
                    {"kind": "struct", "fields": [{"name": "items", "type": {"array": [{"defined": "Outer"}, 2]}}]},
                ),
            )

    @pytest.mark.parametrize(
        "field_type",
        [
            {"option": {"defined": "Tree"}},
            {"vec": {"defined": "Tree"}},
            {"array": [{"defined": "Tree"}, 0]},
        ],
    )
    def test_indirect_recursion_allowed(self, field_type):
        types = table(("Tree", {"kind": "struct", "fields": [{"name": "child", "type": field_type}]}))
        assert "Tree" in types

    def test_recursion_through_enum_allowed(self):
        types = table(
            (
                "Expr",
                {
                    "kind": "enum",
                    "variants": [
                        {"name": "Leaf", "fields": ["u8"]},
                        {"name": "Neg", "fields": [{"defined": "Expr"}]},
                    ],
                },
            )
        )
        assert not types.cached_layout("Expr").is_fixed_size
