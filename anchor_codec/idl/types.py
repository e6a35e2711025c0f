"""IDL type model.

Every IDL type is one of a closed set of frozen dataclasses. The codec and the
layout resolver dispatch on the class, so adding a kind means touching both.

JSON forms accepted by ``parse_idl_type``::

    "u64" | "string" | "pubkey" | "publicKey" | "bytes" | ...
    {"vec": T}
    {"option": T}
    {"array": [T, N]}
    {"defined": "Name"} | {"defined": {"name": "Name"}}

Type definition bodies (``types[].type``)::

    {"kind": "struct", "fields": [...]}
    {"kind": "enum", "variants": [...]}
    {"kind": "type", "alias": T}
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union

from ..errors import SchemaError

INTEGER_WIDTHS = {
    "u8": (1, False),
    "i8": (1, True),
    "u16": (2, False),
    "i16": (2, True),
    "u32": (4, False),
    "i32": (4, True),
    "u64": (8, False),
    "i64": (8, True),
    "u128": (16, False),
    "i128": (16, True),
}

FLOAT_FORMATS = {
    "f32": ("<f", 4),
    "f64": ("<d", 8),
}

PRIMITIVE_TYPES = frozenset(
    set(INTEGER_WIDTHS) | set(FLOAT_FORMATS) | {"bool", "string", "pubkey", "bytes"}
)

_PRIMITIVE_ALIASES = {
    "publicKey": "pubkey",
}


@dataclass(frozen=True)
class IdlTypePrimitive:
    name: str


@dataclass(frozen=True)
class IdlTypeVec:
    inner: "IdlType"


@dataclass(frozen=True)
class IdlTypeArray:
    inner: "IdlType"
    length: int


@dataclass(frozen=True)
class IdlTypeOption:
    inner: "IdlType"


@dataclass(frozen=True)
class IdlTypeDefined:
    name: str


@dataclass(frozen=True)
class IdlField:
    name: str
    type: "IdlType"
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class IdlEnumVariant:
    """Enum variant with no fields, named fields, or tuple fields."""

    name: str
    fields: Tuple[Union[IdlField, "IdlType"], ...] = ()

    @property
    def is_unit(self) -> bool:
        return not self.fields

    @property
    def is_named(self) -> bool:
        return bool(self.fields) and isinstance(self.fields[0], IdlField)


@dataclass(frozen=True)
class IdlTypeStruct:
    fields: Tuple[IdlField, ...] = ()


@dataclass(frozen=True)
class IdlTypeEnum:
    variants: Tuple[IdlEnumVariant, ...] = ()


IdlType = Union[
    IdlTypePrimitive,
    IdlTypeVec,
    IdlTypeArray,
    IdlTypeOption,
    IdlTypeDefined,
    IdlTypeStruct,
    IdlTypeEnum,
]


# ============================================================================
# PARSING
# ============================================================================


def primitive(name: str) -> IdlTypePrimitive:
    """Create a primitive type, normalising legacy spellings."""
    name = _PRIMITIVE_ALIASES.get(name, name)
    if name not in PRIMITIVE_TYPES:
        raise SchemaError(f"Unknown primitive type: {name}")
    return IdlTypePrimitive(name)


def parse_idl_type(raw: Any) -> IdlType:
    """Parse a field type from its JSON form."""
    if isinstance(raw, str):
        return primitive(raw)

    if not isinstance(raw, dict) or len(raw) != 1:
        raise SchemaError(f"Invalid type definition: {raw!r}")

    kind, value = next(iter(raw.items()))
    if kind == "vec":
        return IdlTypeVec(parse_idl_type(value))
    if kind == "option":
        return IdlTypeOption(parse_idl_type(value))
    if kind == "array":
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise SchemaError(f"Invalid array type definition: {raw!r}")
        inner, length = value
        if isinstance(length, bool) or not isinstance(length, int) or length < 0:
            raise SchemaError(f"Array length must be a non-negative integer: {raw!r}")
        return IdlTypeArray(parse_idl_type(inner), length)
    if kind == "defined":
        # Old format: {"defined": "MyType"}, new format: {"defined": {"name": "MyType"}}
        name = value.get("name") if isinstance(value, dict) else value
        if not isinstance(name, str) or not name:
            raise SchemaError(f"Invalid defined type: {raw!r}")
        return IdlTypeDefined(name)

    raise SchemaError(f"Unsupported type kind: {kind}")


def parse_field(raw: dict) -> IdlField:
    """Parse a named field (``{"name": ..., "type": ...}``)."""
    try:
        name = raw["name"]
        type_json = raw["type"]
    except (KeyError, TypeError) as e:
        raise SchemaError(f"Field is missing {e}: {raw!r}") from e
    return IdlField(name=name, type=parse_idl_type(type_json), docs=tuple(raw.get("docs") or ()))


def parse_fields(raw: list) -> Tuple[IdlField, ...]:
    """Parse a field list; tuple-struct fields are named by position."""
    fields = []
    for i, item in enumerate(raw or []):
        if isinstance(item, dict) and "name" in item:
            fields.append(parse_field(item))
        else:
            fields.append(IdlField(name=str(i), type=parse_idl_type(item)))
    return tuple(fields)


def _parse_variant(raw: dict) -> IdlEnumVariant:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise SchemaError(f"Enum variant is missing a name: {raw!r}")
    entries = raw.get("fields") or []
    fields: list = []
    for item in entries:
        if isinstance(item, dict) and "name" in item:
            fields.append(parse_field(item))
        else:
            fields.append(parse_idl_type(item))
    if fields and len({isinstance(f, IdlField) for f in fields}) > 1:
        raise SchemaError(f"Variant {raw.get('name')} mixes named and tuple fields")
    return IdlEnumVariant(name=raw["name"], fields=tuple(fields))


def parse_type_def_body(raw: dict) -> IdlType:
    """Parse the body of a type definition (struct, enum or alias)."""
    if not isinstance(raw, dict):
        raise SchemaError(f"Invalid type definition body: {raw!r}")
    kind = raw.get("kind")
    if kind == "struct":
        return IdlTypeStruct(parse_fields(raw.get("fields") or []))
    if kind == "enum":
        return IdlTypeEnum(tuple(_parse_variant(v) for v in raw.get("variants") or []))
    if kind == "type":
        if "alias" not in raw:
            raise SchemaError(f"Type alias is missing 'alias': {raw!r}")
        return parse_idl_type(raw["alias"])
    raise SchemaError(f"Unsupported type definition kind: {kind}")


# ============================================================================
# RENDERING
# ============================================================================


def idl_type_to_json(idl_type: IdlType) -> Any:
    """Render a type back to its JSON form."""
    if isinstance(idl_type, IdlTypePrimitive):
        return idl_type.name
    if isinstance(idl_type, IdlTypeVec):
        return {"vec": idl_type_to_json(idl_type.inner)}
    if isinstance(idl_type, IdlTypeOption):
        return {"option": idl_type_to_json(idl_type.inner)}
    if isinstance(idl_type, IdlTypeArray):
        return {"array": [idl_type_to_json(idl_type.inner), idl_type.length]}
    if isinstance(idl_type, IdlTypeDefined):
        return {"defined": {"name": idl_type.name}}
    if isinstance(idl_type, IdlTypeStruct):
        return {
            "kind": "struct",
            "fields": [
                {"name": f.name, "type": idl_type_to_json(f.type)} for f in idl_type.fields
            ],
        }
    if isinstance(idl_type, IdlTypeEnum):
        variants = []
        for variant in idl_type.variants:
            entry: dict = {"name": variant.name}
            if variant.is_named:
                entry["fields"] = [
                    {"name": f.name, "type": idl_type_to_json(f.type)} for f in variant.fields
                ]
            elif variant.fields:
                entry["fields"] = [idl_type_to_json(t) for t in variant.fields]
            variants.append(entry)
        return {"kind": "enum", "variants": variants}
    raise TypeError(f"Not an IDL type: {idl_type!r}")


def idl_type_name(idl_type: IdlType) -> str:
    """Human-readable type name, e.g. ``vec<u8>`` or ``[u8; 32]``."""
    if isinstance(idl_type, IdlTypePrimitive):
        return idl_type.name
    if isinstance(idl_type, IdlTypeVec):
        return f"vec<{idl_type_name(idl_type.inner)}>"
    if isinstance(idl_type, IdlTypeOption):
        return f"option<{idl_type_name(idl_type.inner)}>"
    if isinstance(idl_type, IdlTypeArray):
        return f"[{idl_type_name(idl_type.inner)}; {idl_type.length}]"
    if isinstance(idl_type, IdlTypeDefined):
        return idl_type.name
    if isinstance(idl_type, IdlTypeStruct):
        return "struct"
    if isinstance(idl_type, IdlTypeEnum):
        return "enum"
    raise TypeError(f"Not an IDL type: {idl_type!r}")
