"""IDL schema model."""

from .schema import (
    Idl,
    IdlAccount,
    IdlConst,
    IdlErrorCode,
    IdlEvent,
    IdlInstruction,
    IdlInstructionAccount,
    IdlInstructionAccounts,
    IdlMetadata,
    IdlPda,
    IdlSeed,
    IdlSeedAccount,
    IdlSeedArg,
    IdlSeedConst,
    IdlTypeDef,
)
from .types import (
    PRIMITIVE_TYPES,
    IdlEnumVariant,
    IdlField,
    IdlType,
    IdlTypeArray,
    IdlTypeDefined,
    IdlTypeEnum,
    IdlTypeOption,
    IdlTypePrimitive,
    IdlTypeStruct,
    IdlTypeVec,
    idl_type_name,
    idl_type_to_json,
    parse_idl_type,
    primitive,
)

__all__ = [
    # Document
    "Idl",
    "IdlAccount",
    "IdlConst",
    "IdlErrorCode",
    "IdlEvent",
    "IdlInstruction",
    "IdlInstructionAccount",
    "IdlInstructionAccounts",
    "IdlMetadata",
    "IdlTypeDef",
    # PDA seeds
    "IdlPda",
    "IdlSeed",
    "IdlSeedAccount",
    "IdlSeedArg",
    "IdlSeedConst",
    # Types
    "PRIMITIVE_TYPES",
    "IdlEnumVariant",
    "IdlField",
    "IdlType",
    "IdlTypeArray",
    "IdlTypeDefined",
    "IdlTypeEnum",
    "IdlTypeOption",
    "IdlTypePrimitive",
    "IdlTypeStruct",
    "IdlTypeVec",
    "idl_type_name",
    "idl_type_to_json",
    "parse_idl_type",
    "primitive",
]
