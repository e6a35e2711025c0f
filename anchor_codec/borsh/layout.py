"""Type layout resolution.

Given an IDL type and the schema's type table, work out whether the type has a
fixed encoded size, its minimum and maximum byte length, and the structure the
codec walks (inner type, struct fields, enum variants).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..constants import ENUM_TAG_SIZE, LENGTH_PREFIX_SIZE, OPTION_TAG_SIZE, PUBKEY_SIZE
from ..errors import SchemaError
from ..idl.schema import Idl, IdlTypeDef
from ..idl.types import (
    INTEGER_WIDTHS,
    FLOAT_FORMATS,
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
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutInfo:
    """Size class and structure of an IDL type.

    ``max_size`` is None when the encoding is unbounded (strings, vectors, or
    anything that contains one).
    """

    is_fixed_size: bool
    min_size: int
    max_size: Optional[int]
    inner_type: Optional[IdlType] = None
    fields: Optional[Tuple[IdlField, ...]] = None
    variants: Optional[Tuple[IdlEnumVariant, ...]] = None

    @property
    def size(self) -> Optional[int]:
        """Exact encoded size for fixed layouts, None otherwise."""
        return self.min_size if self.is_fixed_size else None


def _fixed(size: int) -> LayoutInfo:
    return LayoutInfo(is_fixed_size=True, min_size=size, max_size=size)


_PRIMITIVE_LAYOUTS = {
    "bool": _fixed(1),
    "pubkey": _fixed(PUBKEY_SIZE),
    "string": LayoutInfo(is_fixed_size=False, min_size=LENGTH_PREFIX_SIZE, max_size=None),
    "bytes": LayoutInfo(is_fixed_size=False, min_size=LENGTH_PREFIX_SIZE, max_size=None),
}
_PRIMITIVE_LAYOUTS.update({name: _fixed(width) for name, (width, _) in INTEGER_WIDTHS.items()})
_PRIMITIVE_LAYOUTS.update({name: _fixed(size) for name, (_, size) in FLOAT_FORMATS.items()})

# Reported for a named type reached again while it is still being resolved
_UNBOUNDED = LayoutInfo(is_fixed_size=False, min_size=0, max_size=None)


class TypeTable:
    """Named type definitions of one IDL, validated and sized up front.

    Every ``defined`` reference reachable from the table is checked when the
    table is built, and the layout of each named type is computed once.
    Instances are read-only afterwards.
    """

    def __init__(self, type_defs: Iterable[IdlTypeDef] = ()):
        self._types: dict[str, IdlType] = {}
        for type_def in type_defs:
            if type_def.name in self._types:
                raise SchemaError(f"Duplicate type definition: {type_def.name}")
            self._types[type_def.name] = type_def.type

        for name, body in self._types.items():
            self.validate(body, f"type {name}")
        for name in self._types:
            self._check_direct_cycle(name, (name,))

        self._layouts: dict[str, LayoutInfo] = {}
        for name in self._types:
            self._layouts[name] = resolve_layout(IdlTypeDefined(name), self)

        logger.debug(f"Resolved layouts for {len(self._types)} named types")

    @classmethod
    def from_idl(cls, idl: Idl) -> "TypeTable":
        """Build the table for an IDL and validate every type it references."""
        table = cls(idl.types)
        for ix in idl.instructions:
            for arg in ix.args:
                table.validate(arg.type, f"instruction {ix.name}")
            if ix.returns is not None:
                table.validate(ix.returns, f"instruction {ix.name}")
        for account in idl.accounts:
            if account.type is not None:
                table.validate(account.type, f"account {account.name}")
        for event in idl.events:
            if event.inline_type is not None:
                table.validate(event.inline_type, f"event {event.name}")
        return table

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def names(self) -> list[str]:
        return list(self._types)

    def get(self, name: str) -> IdlType:
        """Return the body of a named type.

        Raises:
            SchemaError: If the name is not defined
        """
        try:
            return self._types[name]
        except KeyError:
            raise SchemaError(f"Unresolved type reference: {name}") from None

    def cached_layout(self, name: str) -> Optional[LayoutInfo]:
        return self._layouts.get(name)

    def layout(self, idl_type: IdlType) -> LayoutInfo:
        return resolve_layout(idl_type, self)

    def validate(self, idl_type: IdlType, where: str = "") -> None:
        """Check that every ``defined`` reference inside a type resolves.

        Raises:
            SchemaError: On the first unresolved reference
        """
        if isinstance(idl_type, IdlTypeDefined):
            if idl_type.name not in self._types:
                suffix = f" (in {where})" if where else ""
                raise SchemaError(f"Unresolved type reference: {idl_type.name}{suffix}")
        elif isinstance(idl_type, (IdlTypeVec, IdlTypeOption, IdlTypeArray)):
            self.validate(idl_type.inner, where)
        elif isinstance(idl_type, IdlTypeStruct):
            for f in idl_type.fields:
                self.validate(f.type, where)
        elif isinstance(idl_type, IdlTypeEnum):
            for variant in idl_type.variants:
                for f in variant.fields:
                    self.validate(f.type if isinstance(f, IdlField) else f, where)

    def _check_direct_cycle(self, name: str, path: Tuple[str, ...]) -> None:
        """Reject a named type that contains itself with no option, vec or enum in between.

        Such a type has no finite encoding, so encoding or decoding it would
        never terminate.
        """
        for ref in _direct_references(self._types[name]):
            if ref == path[0]:
                chain = " -> ".join(path + (ref,))
                raise SchemaError(f"Type {path[0]} contains itself directly: {chain}")
            if ref not in path:
                self._check_direct_cycle(ref, path + (ref,))


def _direct_references(idl_type: IdlType) -> list[str]:
    """Named types embedded in a type without length or tag indirection."""
    if isinstance(idl_type, IdlTypeDefined):
        return [idl_type.name]
    if isinstance(idl_type, IdlTypeArray):
        return _direct_references(idl_type.inner) if idl_type.length else []
    if isinstance(idl_type, IdlTypeStruct):
        refs = []
        for f in idl_type.fields:
            refs.extend(_direct_references(f.type))
        return refs
    return []


def _variant_field_types(variant: IdlEnumVariant) -> list[IdlType]:
    return [f.type if isinstance(f, IdlField) else f for f in variant.fields]


def _sum_layouts(layouts: list[LayoutInfo]) -> Tuple[bool, int, Optional[int]]:
    fixed = all(layout.is_fixed_size for layout in layouts)
    min_size = sum(layout.min_size for layout in layouts)
    if any(layout.max_size is None for layout in layouts):
        max_size = None
    else:
        max_size = sum(layout.max_size for layout in layouts)
    return fixed, min_size, max_size


def resolve_layout(
    idl_type: IdlType,
    type_table: TypeTable,
    _visiting: Tuple[str, ...] = (),
) -> LayoutInfo:
    """Resolve the layout of a type. Pure; raises SchemaError on unknown names."""
    if isinstance(idl_type, IdlTypePrimitive):
        try:
            return _PRIMITIVE_LAYOUTS[idl_type.name]
        except KeyError:
            raise SchemaError(f"Unknown primitive type: {idl_type.name}") from None

    if isinstance(idl_type, IdlTypeVec):
        return LayoutInfo(
            is_fixed_size=False,
            min_size=LENGTH_PREFIX_SIZE,
            max_size=None,
            inner_type=idl_type.inner,
        )

    if isinstance(idl_type, IdlTypeOption):
        inner = resolve_layout(idl_type.inner, type_table, _visiting)
        return LayoutInfo(
            is_fixed_size=False,
            min_size=OPTION_TAG_SIZE,
            max_size=OPTION_TAG_SIZE + inner.max_size if inner.max_size is not None else None,
            inner_type=idl_type.inner,
        )

    if isinstance(idl_type, IdlTypeArray):
        inner = resolve_layout(idl_type.inner, type_table, _visiting)
        n = idl_type.length
        return LayoutInfo(
            is_fixed_size=inner.is_fixed_size,
            min_size=n * inner.min_size,
            max_size=n * inner.max_size if inner.max_size is not None else None,
            inner_type=idl_type.inner,
        )

    if isinstance(idl_type, IdlTypeDefined):
        cached = type_table.cached_layout(idl_type.name)
        if cached is not None:
            return cached
        if idl_type.name in _visiting:
            return _UNBOUNDED
        body = type_table.get(idl_type.name)
        return resolve_layout(body, type_table, _visiting + (idl_type.name,))

    if isinstance(idl_type, IdlTypeStruct):
        layouts = [resolve_layout(f.type, type_table, _visiting) for f in idl_type.fields]
        fixed, min_size, max_size = _sum_layouts(layouts)
        return LayoutInfo(
            is_fixed_size=fixed,
            min_size=min_size,
            max_size=max_size,
            fields=idl_type.fields,
        )

    if isinstance(idl_type, IdlTypeEnum):
        payloads = []
        for variant in idl_type.variants:
            layouts = [
                resolve_layout(t, type_table, _visiting) for t in _variant_field_types(variant)
            ]
            payloads.append(_sum_layouts(layouts))
        if not payloads:
            return LayoutInfo(
                is_fixed_size=True,
                min_size=ENUM_TAG_SIZE,
                max_size=ENUM_TAG_SIZE,
                variants=idl_type.variants,
            )
        all_fixed = all(fixed for fixed, _, _ in payloads)
        sizes = {min_size for _, min_size, _ in payloads}
        maxes = [max_size for _, _, max_size in payloads]
        return LayoutInfo(
            is_fixed_size=all_fixed and len(sizes) == 1,
            min_size=ENUM_TAG_SIZE + min(sizes),
            max_size=ENUM_TAG_SIZE + max(maxes) if None not in maxes else None,
            variants=idl_type.variants,
        )

    raise SchemaError(f"Not an IDL type: {idl_type!r}")
