"""Schema-driven Borsh encoder and decoder.

Wire format (all integers little-endian):

- bool: 1 byte, 0 or 1
- u8..u128 / i8..i128: fixed-width two's complement
- f32 / f64: IEEE-754
- string / bytes: u32 byte length + payload
- vec<T>: u32 element count + elements
- [T; N]: N elements, no prefix
- option<T>: 0, or 1 followed by the value
- struct: fields in declared order
- enum: u8 variant index + variant payload
- pubkey: 32 raw bytes

Python values: structs are dicts keyed by field name, enums are
``{"Variant": payload}`` with a dict (named fields), list (tuple fields) or
``{}`` (unit), and pubkeys decode to ``solders.pubkey.Pubkey``.
"""

import struct
from collections.abc import Mapping
from typing import Any, Tuple

from solders.pubkey import Pubkey

from ..constants import ENUM_TAG_SIZE, LENGTH_PREFIX_SIZE, OPTION_TAG_SIZE, PUBKEY_SIZE
from ..errors import ArgumentError, BorshDecodeError, BufferUnderflowError, EncodeError
from ..idl.types import (
    FLOAT_FORMATS,
    INTEGER_WIDTHS,
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
)
from ..utils import int_range, to_pubkey
from .layout import TypeTable


def _take(data: bytes, offset: int, size: int) -> bytes:
    """Slice ``size`` bytes at ``offset`` or raise BufferUnderflowError."""
    available = len(data) - offset
    if size > available:
        raise BufferUnderflowError(offset, size, max(available, 0))
    return data[offset : offset + size]


def _get_field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        if name not in value:
            raise EncodeError(f"missing field '{name}'")
        return value[name]
    if hasattr(value, name):
        return getattr(value, name)
    raise EncodeError(f"missing field '{name}' on {type(value).__name__}")


class BorshCodec:
    """Encode and decode values of IDL types.

    The codec only reads its type table, so one instance can be shared by any
    number of threads.
    """

    def __init__(self, type_table: TypeTable):
        self.type_table = type_table

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode(self, value: Any, idl_type: IdlType) -> bytes:
        """Encode a value as the given type.

        Raises:
            EncodeError: If the value does not fit the type
        """
        out = bytearray()
        try:
            self.encode_into(out, value, idl_type)
        except RecursionError:
            raise EncodeError(f"value of {idl_type_name(idl_type)} is nested too deeply") from None
        return bytes(out)

    def encode_into(self, out: bytearray, value: Any, idl_type: IdlType) -> None:
        """Append the encoding of ``value`` to ``out``."""
        if isinstance(idl_type, IdlTypePrimitive):
            self._encode_primitive(out, value, idl_type.name)
        elif isinstance(idl_type, IdlTypeVec):
            items = self._sequence(value, idl_type)
            if items and self._zero_sized(idl_type.inner):
                raise EncodeError(f"{idl_type_name(idl_type)} has zero-sized elements")
            out.extend(struct.pack("<I", len(items)))
            for item in items:
                self.encode_into(out, item, idl_type.inner)
        elif isinstance(idl_type, IdlTypeArray):
            items = self._sequence(value, idl_type)
            if len(items) != idl_type.length:
                raise EncodeError(
                    f"{idl_type_name(idl_type)} expects {idl_type.length} elements, "
                    f"got {len(items)}"
                )
            for item in items:
                self.encode_into(out, item, idl_type.inner)
        elif isinstance(idl_type, IdlTypeOption):
            if value is None:
                out.append(0)
            else:
                out.append(1)
                self.encode_into(out, value, idl_type.inner)
        elif isinstance(idl_type, IdlTypeDefined):
            try:
                self.encode_into(out, value, self.type_table.get(idl_type.name))
            except EncodeError as e:
                raise EncodeError(f"{idl_type.name}: {e.message}") from None
        elif isinstance(idl_type, IdlTypeStruct):
            self._encode_fields(out, value, idl_type.fields)
        elif isinstance(idl_type, IdlTypeEnum):
            self._encode_enum(out, value, idl_type)
        else:
            raise EncodeError(f"not an IDL type: {idl_type!r}")

    def _encode_primitive(self, out: bytearray, value: Any, name: str) -> None:
        if name in INTEGER_WIDTHS:
            width, signed = INTEGER_WIDTHS[name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise EncodeError(f"{name} expects an int, got {type(value).__name__}")
            low, high = int_range(width, signed)
            if not low <= value <= high:
                raise EncodeError(f"{name} value out of range: {value} (must be {low}-{high})")
            out.extend(value.to_bytes(width, "little", signed=signed))
        elif name == "bool":
            if not isinstance(value, bool):
                raise EncodeError(f"bool expects a bool, got {type(value).__name__}")
            out.append(1 if value else 0)
        elif name in FLOAT_FORMATS:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise EncodeError(f"{name} expects a float, got {type(value).__name__}")
            fmt, _ = FLOAT_FORMATS[name]
            try:
                out.extend(struct.pack(fmt, value))
            except (OverflowError, struct.error) as e:
                raise EncodeError(f"{name} cannot hold {value}: {e}") from e
        elif name == "string":
            if not isinstance(value, str):
                raise EncodeError(f"string expects a str, got {type(value).__name__}")
            encoded = value.encode("utf-8")
            out.extend(struct.pack("<I", len(encoded)))
            out.extend(encoded)
        elif name == "bytes":
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise EncodeError(f"bytes expects a bytes-like value, got {type(value).__name__}")
            out.extend(struct.pack("<I", len(value)))
            out.extend(value)
        elif name == "pubkey":
            try:
                out.extend(bytes(to_pubkey(value)))
            except ArgumentError as e:
                raise EncodeError(e.message) from e
        else:
            raise EncodeError(f"unknown primitive type: {name}")

    def _zero_sized(self, idl_type: IdlType) -> bool:
        return self.type_table.layout(idl_type).min_size == 0

    @staticmethod
    def _sequence(value: Any, idl_type: IdlType) -> list:
        if isinstance(value, (list, tuple, bytes, bytearray)):
            return list(value)
        raise EncodeError(
            f"{idl_type_name(idl_type)} expects a list, got {type(value).__name__}"
        )

    def _encode_fields(self, out: bytearray, value: Any, fields: Tuple[IdlField, ...]) -> None:
        for f in fields:
            field_value = _get_field(value, f.name)
            try:
                self.encode_into(out, field_value, f.type)
            except EncodeError as e:
                raise EncodeError(f"field '{f.name}': {e.message}") from None

    def _encode_enum(self, out: bytearray, value: Any, enum: IdlTypeEnum) -> None:
        if isinstance(value, str):
            name, payload = value, None
        elif isinstance(value, Mapping) and len(value) == 1:
            name, payload = next(iter(value.items()))
        else:
            raise EncodeError(f"enum expects {{'Variant': payload}} or a variant name, got {value!r}")

        for index, variant in enumerate(enum.variants):
            if variant.name == name:
                break
        else:
            raise EncodeError(f"unknown enum variant: {name}")

        out.extend(index.to_bytes(ENUM_TAG_SIZE, "little"))
        if variant.is_unit:
            if payload not in (None, {}, (), []):
                raise EncodeError(f"unit variant {name} takes no payload, got {payload!r}")
        elif variant.is_named:
            if payload is None:
                raise EncodeError(f"variant {name} expects fields")
            self._encode_fields(out, payload, variant.fields)
        else:
            if not isinstance(payload, (list, tuple)) or len(payload) != len(variant.fields):
                raise EncodeError(
                    f"variant {name} expects {len(variant.fields)} tuple fields, got {payload!r}"
                )
            for item, item_type in zip(payload, variant.fields):
                self.encode_into(out, item, item_type)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(self, data: bytes, idl_type: IdlType, offset: int = 0) -> Tuple[Any, int]:
        """Decode one value starting at ``offset``.

        Returns:
            (value, bytes_consumed)

        Raises:
            BorshDecodeError: If the bytes do not hold a valid value
        """
        if offset < 0:
            raise ArgumentError(f"Offset cannot be negative, got {offset}")
        data = bytes(data)
        try:
            value, end = self._decode(data, offset, idl_type)
        except RecursionError:
            # Self-referential types recurse once per nesting level of the input
            raise BorshDecodeError(
                f"{idl_type_name(idl_type)} is nested too deeply at offset {offset}"
            ) from None
        return value, end - offset

    def _decode(self, data: bytes, offset: int, idl_type: IdlType) -> Tuple[Any, int]:
        if isinstance(idl_type, IdlTypePrimitive):
            return self._decode_primitive(data, offset, idl_type.name)

        if isinstance(idl_type, IdlTypeVec):
            (length,) = struct.unpack("<I", _take(data, offset, LENGTH_PREFIX_SIZE))
            offset += LENGTH_PREFIX_SIZE
            # Reject absurd lengths before looping over them
            min_item = self.type_table.layout(idl_type.inner).min_size
            if min_item == 0 and length:
                raise BorshDecodeError(
                    f"vec of zero-sized elements with length {length} at offset "
                    f"{offset - LENGTH_PREFIX_SIZE}"
                )
            if length * min_item > len(data) - offset:
                raise BufferUnderflowError(offset, length * min_item, len(data) - offset)
            items = []
            for _ in range(length):
                item, offset = self._decode(data, offset, idl_type.inner)
                items.append(item)
            return items, offset

        if isinstance(idl_type, IdlTypeArray):
            items = []
            for _ in range(idl_type.length):
                item, offset = self._decode(data, offset, idl_type.inner)
                items.append(item)
            return items, offset

        if isinstance(idl_type, IdlTypeOption):
            tag = _take(data, offset, OPTION_TAG_SIZE)[0]
            offset += OPTION_TAG_SIZE
            if tag == 0:
                return None, offset
            if tag != 1:
                raise BorshDecodeError(f"invalid option tag {tag} at offset {offset - 1}")
            return self._decode(data, offset, idl_type.inner)

        if isinstance(idl_type, IdlTypeDefined):
            return self._decode(data, offset, self.type_table.get(idl_type.name))

        if isinstance(idl_type, IdlTypeStruct):
            return self._decode_fields(data, offset, idl_type.fields)

        if isinstance(idl_type, IdlTypeEnum):
            return self._decode_enum(data, offset, idl_type)

        raise BorshDecodeError(f"not an IDL type: {idl_type!r}")

    def _decode_primitive(self, data: bytes, offset: int, name: str) -> Tuple[Any, int]:
        if name in INTEGER_WIDTHS:
            width, signed = INTEGER_WIDTHS[name]
            raw = _take(data, offset, width)
            return int.from_bytes(raw, "little", signed=signed), offset + width

        if name == "bool":
            raw = _take(data, offset, 1)[0]
            if raw not in (0, 1):
                raise BorshDecodeError(f"invalid bool byte {raw} at offset {offset}")
            return raw == 1, offset + 1

        if name in FLOAT_FORMATS:
            fmt, size = FLOAT_FORMATS[name]
            return struct.unpack(fmt, _take(data, offset, size))[0], offset + size

        if name in ("string", "bytes"):
            (length,) = struct.unpack("<I", _take(data, offset, LENGTH_PREFIX_SIZE))
            offset += LENGTH_PREFIX_SIZE
            raw = _take(data, offset, length)
            if name == "bytes":
                return raw, offset + length
            try:
                return raw.decode("utf-8"), offset + length
            except UnicodeDecodeError as e:
                raise BorshDecodeError(f"invalid UTF-8 string at offset {offset}: {e}") from e

        if name == "pubkey":
            raw = _take(data, offset, PUBKEY_SIZE)
            return Pubkey.from_bytes(raw), offset + PUBKEY_SIZE

        raise BorshDecodeError(f"unknown primitive type: {name}")

    def _decode_fields(
        self, data: bytes, offset: int, fields: Tuple[IdlField, ...]
    ) -> Tuple[dict, int]:
        result = {}
        for f in fields:
            result[f.name], offset = self._decode(data, offset, f.type)
        return result, offset

    def _decode_enum(self, data: bytes, offset: int, enum: IdlTypeEnum) -> Tuple[dict, int]:
        index = _take(data, offset, ENUM_TAG_SIZE)[0]
        if index >= len(enum.variants):
            raise BorshDecodeError(
                f"invalid enum variant index {index} at offset {offset} "
                f"({len(enum.variants)} variants)"
            )
        offset += ENUM_TAG_SIZE
        variant: IdlEnumVariant = enum.variants[index]
        if variant.is_unit:
            return {variant.name: {}}, offset
        if variant.is_named:
            payload, offset = self._decode_fields(data, offset, variant.fields)
            return {variant.name: payload}, offset
        items = []
        for item_type in variant.fields:
            item, offset = self._decode(data, offset, item_type)
            items.append(item)
        return {variant.name: items}, offset
