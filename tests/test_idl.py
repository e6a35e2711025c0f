"""Tests for IDL parsing."""

import pytest

from anchor_codec import Idl, SchemaError, parse_idl_type
from anchor_codec.idl import (
    IdlSeedAccount,
    IdlSeedConst,
    IdlTypeArray,
    IdlTypeDefined,
    IdlTypeEnum,
    IdlTypeOption,
    IdlTypePrimitive,
    IdlTypeStruct,
    IdlTypeVec,
    idl_type_name,
    idl_type_to_json,
)


class TestParseIdlType:
    def test_primitives(self):
        assert parse_idl_type("u64") == IdlTypePrimitive("u64")
        assert parse_idl_type("bytes") == IdlTypePrimitive("bytes")

    def test_public_key_alias(self):
        assert parse_idl_type("publicKey") == IdlTypePrimitive("pubkey")

    def test_containers(self):
        assert parse_idl_type({"vec": "u8"}) == IdlTypeVec(IdlTypePrimitive("u8"))
        assert parse_idl_type({"option": "string"}) == IdlTypeOption(IdlTypePrimitive("string"))
        assert parse_idl_type({"array": ["u8", 32]}) == IdlTypeArray(IdlTypePrimitive("u8"), 32)

    def test_defined_both_forms(self):
        assert parse_idl_type({"defined": "Point"}) == IdlTypeDefined("Point")
        assert parse_idl_type({"defined": {"name": "Point"}}) == IdlTypeDefined("Point")

    def test_unknown_primitive(self):
        with pytest.raises(SchemaError):
            parse_idl_type("u256")

    def test_bad_array(self):
        with pytest.raises(SchemaError):
            parse_idl_type({"array": ["u8"]})
        with pytest.raises(SchemaError):
            parse_idl_type({"array": ["u8", -1]})

    def test_unknown_kind(self):
        with pytest.raises(SchemaError):
            parse_idl_type({"map": ["u8", "u8"]})

    def test_type_names(self):
        assert idl_type_name(parse_idl_type({"vec": "u8"})) == "vec<u8>"
        assert idl_type_name(parse_idl_type({"array": ["u8", 32]})) == "[u8; 32]"
        assert idl_type_name(parse_idl_type({"option": {"defined": "X"}})) == "option<X>"

    def test_to_json(self):
        raw = {"option": {"vec": {"defined": {"name": "Point"}}}}
        assert idl_type_to_json(parse_idl_type(raw)) == raw


class TestIdlFromDict:
    def test_current_format(self, idl):
        assert idl.name == "sample_program"
        assert idl.metadata.version == "0.1.0"
        assert idl.address == "Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS"
        assert [ix.name for ix in idl.instructions] == ["initialize", "set_active"]
        assert idl.accounts[0].discriminator == bytes([1, 2, 3, 4, 5, 6, 7, 8])
        assert idl.events[0].discriminator is None
        assert idl.find_error(6000).name == "Unauthorized"

    def test_type_definitions(self, idl):
        shape = idl.find_type("Shape").type
        assert isinstance(shape, IdlTypeEnum)
        empty, circle, line = shape.variants
        assert empty.is_unit
        assert circle.is_named
        assert not line.is_named
        assert line.fields == (IdlTypeDefined("Point"), IdlTypeDefined("Point"))

    def test_instruction_accounts(self, idl):
        ix = idl.find_instruction("initialize")
        data, authority, system = ix.flat_accounts()
        assert data.writable and not data.signer
        assert authority.signer
        assert system.address == "11111111111111111111111111111111"
        assert data.pda.seeds[0] == IdlSeedConst(b"data")
        assert data.pda.seeds[1] == IdlSeedAccount(path="authority")

    def test_legacy_format(self):
        idl = Idl.from_dict(
            {
                "name": "legacy",
                "version": "0.0.1",
                "instructions": [
                    {
                        "name": "init",
                        "accounts": [
                            {"name": "user", "isMut": True, "isSigner": True},
                            {
                                "name": "group",
                                "accounts": [{"name": "inner", "isMut": False, "isSigner": False}],
                            },
                        ],
                        "args": [{"name": "owner", "type": "publicKey"}],
                    }
                ],
                "accounts": [
                    {
                        "name": "Counter",
                        "type": {"kind": "struct", "fields": [{"name": "count", "type": "u64"}]},
                    }
                ],
                "events": [
                    {"name": "Ticked", "fields": [{"name": "count", "type": "u64", "index": False}]}
                ],
            }
        )
        assert idl.name == "legacy"
        ix = idl.instructions[0]
        assert ix.args[0].type == IdlTypePrimitive("pubkey")
        user, inner = ix.flat_accounts()
        assert user.writable and user.signer
        assert inner.name == "inner"
        assert isinstance(idl.accounts[0].type, IdlTypeStruct)
        assert idl.events[0].inline_type.fields[0].name == "count"

    def test_missing_name_is_schema_error(self):
        with pytest.raises(SchemaError):
            Idl.from_dict({"instructions": [{"args": []}]})

    def test_bad_discriminator_byte(self):
        with pytest.raises(SchemaError):
            Idl.from_dict({"accounts": [{"name": "A", "discriminator": [1, 2, 300]}]})

    def test_from_json(self):
        idl = Idl.from_json('{"metadata": {"name": "x", "version": "1"}}')
        assert idl.name == "x"
        assert idl.instructions == ()

    def test_from_json_invalid(self):
        with pytest.raises(SchemaError):
            Idl.from_json("{not json")

    def test_type_alias(self):
        idl = Idl.from_dict(
            {"types": [{"name": "Amount", "type": {"kind": "type", "alias": "u64"}}]}
        )
        assert idl.find_type("Amount").type == IdlTypePrimitive("u64")

    def test_numeric_const_seed(self):
        idl = Idl.from_dict(
            {
                "name": "legacy",
                "version": "0.0.1",
                "instructions": [
                    {
                        "name": "init",
                        "accounts": [
                            {
                                "name": "slot",
                                "isMut": True,
                                "isSigner": False,
                                "pda": {"seeds": [{"kind": "const", "type": "u8", "value": 1}]},
                            }
                        ],
                        "args": [],
                    }
                ],
            }
        )
        seed = idl.instructions[0].flat_accounts()[0].pda.seeds[0]
        assert seed == IdlSeedConst(1, type=IdlTypePrimitive("u8"))

    def test_unsupported_const_seed(self):
        with pytest.raises(SchemaError, match="const seed"):
            Idl.from_dict(
                {
                    "instructions": [
                        {
                            "name": "init",
                            "accounts": [
                                {"name": "a", "pda": {"seeds": [{"kind": "const", "value": 1.5}]}}
                            ],
                            "args": [],
                        }
                    ]
                }
            )
