"""In-memory model of a parsed IDL document."""

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

from ..errors import SchemaError
from .types import (
    IdlField,
    IdlType,
    IdlTypeStruct,
    parse_fields,
    parse_idl_type,
    parse_type_def_body,
)


def _parse_discriminator(raw: Any, owner: str) -> Optional[bytes]:
    """Convert a JSON byte list to bytes. Length is checked by the coders."""
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise SchemaError(f"{owner} discriminator must be a list of bytes, got {raw!r}")
    for b in raw:
        if isinstance(b, bool) or not isinstance(b, int) or not 0 <= b <= 255:
            raise SchemaError(f"{owner} discriminator has an invalid byte: {b!r}")
    return bytes(raw)


def _docs(raw: dict) -> Tuple[str, ...]:
    return tuple(raw.get("docs") or ())


# ============================================================================
# PDA SEEDS
# ============================================================================


@dataclass(frozen=True)
class IdlSeedConst:
    """Constant seed. Numeric values keep their declared type and are sized when resolved."""

    value: Union[bytes, int]
    type: Optional[IdlType] = None


@dataclass(frozen=True)
class IdlSeedArg:
    path: str
    type: Optional[IdlType] = None


@dataclass(frozen=True)
class IdlSeedAccount:
    path: str
    account: Optional[str] = None
    type: Optional[IdlType] = None


IdlSeed = Union[IdlSeedConst, IdlSeedArg, IdlSeedAccount]


def _parse_seed(raw: dict) -> IdlSeed:
    kind = raw.get("kind")
    seed_type = parse_idl_type(raw["type"]) if "type" in raw else None
    if kind == "const":
        value = raw.get("value")
        if isinstance(value, str):
            return IdlSeedConst(value.encode("utf-8"))
        if isinstance(value, (list, tuple)):
            return IdlSeedConst(bytes(value))
        if isinstance(value, int) and not isinstance(value, bool):
            return IdlSeedConst(value, type=seed_type)
        raise SchemaError(f"Unsupported const seed value: {value!r}")
    if kind == "arg":
        return IdlSeedArg(path=raw["path"], type=seed_type)
    if kind == "account":
        return IdlSeedAccount(path=raw["path"], account=raw.get("account"), type=seed_type)
    raise SchemaError(f"Unknown seed kind: {kind}")


@dataclass(frozen=True)
class IdlPda:
    seeds: Tuple[IdlSeed, ...]
    program: Optional[IdlSeed] = None

    @classmethod
    def from_dict(cls, data: dict) -> "IdlPda":
        program = data.get("program") or data.get("programId")
        return cls(
            seeds=tuple(_parse_seed(s) for s in data.get("seeds") or []),
            program=_parse_seed(program) if program else None,
        )


# ============================================================================
# INSTRUCTIONS
# ============================================================================


@dataclass(frozen=True)
class IdlInstructionAccount:
    name: str
    writable: bool = False
    signer: bool = False
    optional: bool = False
    address: Optional[str] = None
    pda: Optional[IdlPda] = None
    docs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class IdlInstructionAccounts:
    """A named group of nested instruction accounts."""

    name: str
    accounts: Tuple["IdlInstructionAccountItem", ...] = ()


IdlInstructionAccountItem = Union[IdlInstructionAccount, IdlInstructionAccounts]


def _parse_account_item(raw: dict) -> IdlInstructionAccountItem:
    if "accounts" in raw:
        return IdlInstructionAccounts(
            name=raw["name"],
            accounts=tuple(_parse_account_item(a) for a in raw["accounts"]),
        )
    pda = raw.get("pda")
    return IdlInstructionAccount(
        name=raw["name"],
        # Legacy IDLs use isMut/isSigner/isOptional
        writable=bool(raw.get("writable", raw.get("isMut", False))),
        signer=bool(raw.get("signer", raw.get("isSigner", False))),
        optional=bool(raw.get("optional", raw.get("isOptional", False))),
        address=raw.get("address"),
        pda=IdlPda.from_dict(pda) if pda else None,
        docs=_docs(raw),
    )


@dataclass(frozen=True)
class IdlInstruction:
    name: str
    args: Tuple[IdlField, ...] = ()
    accounts: Tuple[IdlInstructionAccountItem, ...] = ()
    discriminator: Optional[bytes] = None
    returns: Optional[IdlType] = None
    docs: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "IdlInstruction":
        returns = data.get("returns")
        return cls(
            name=data["name"],
            args=parse_fields(data.get("args") or []),
            accounts=tuple(_parse_account_item(a) for a in data.get("accounts") or []),
            discriminator=_parse_discriminator(data.get("discriminator"), data["name"]),
            returns=parse_idl_type(returns) if returns is not None else None,
            docs=_docs(data),
        )

    def flat_accounts(self) -> list[IdlInstructionAccount]:
        """Instruction accounts in order, with nested groups expanded."""
        result: list[IdlInstructionAccount] = []

        def walk(items):
            for item in items:
                if isinstance(item, IdlInstructionAccounts):
                    walk(item.accounts)
                else:
                    result.append(item)

        walk(self.accounts)
        return result


# ============================================================================
# ACCOUNTS, EVENTS, TYPES
# ============================================================================


@dataclass(frozen=True)
class IdlAccount:
    """Account entry. ``type`` is set only for legacy IDLs that inline the layout."""

    name: str
    discriminator: Optional[bytes] = None
    type: Optional[IdlType] = None
    docs: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "IdlAccount":
        type_json = data.get("type")
        return cls(
            name=data["name"],
            discriminator=_parse_discriminator(data.get("discriminator"), data["name"]),
            type=parse_type_def_body(type_json) if type_json else None,
            docs=_docs(data),
        )


@dataclass(frozen=True)
class IdlEvent:
    """Event entry. ``fields`` is set only for legacy IDLs that inline them."""

    name: str
    discriminator: Optional[bytes] = None
    fields: Optional[Tuple[IdlField, ...]] = None
    docs: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "IdlEvent":
        fields = data.get("fields")
        return cls(
            name=data["name"],
            discriminator=_parse_discriminator(data.get("discriminator"), data["name"]),
            fields=parse_fields(fields) if fields is not None else None,
            docs=_docs(data),
        )

    @property
    def inline_type(self) -> Optional[IdlTypeStruct]:
        return IdlTypeStruct(self.fields) if self.fields is not None else None


@dataclass(frozen=True)
class IdlTypeDef:
    name: str
    type: IdlType
    docs: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "IdlTypeDef":
        return cls(
            name=data["name"],
            type=parse_type_def_body(data["type"]),
            docs=_docs(data),
        )


@dataclass(frozen=True)
class IdlErrorCode:
    code: int
    name: str
    msg: Optional[str] = None


@dataclass(frozen=True)
class IdlConst:
    name: str
    type: IdlType
    value: str


@dataclass(frozen=True)
class IdlMetadata:
    name: str = ""
    version: str = ""
    spec: Optional[str] = None
    description: Optional[str] = None


# ============================================================================
# DOCUMENT
# ============================================================================


@dataclass(frozen=True)
class Idl:
    """A parsed IDL document. Immutable once built."""

    address: Optional[str] = None
    metadata: IdlMetadata = field(default_factory=IdlMetadata)
    instructions: Tuple[IdlInstruction, ...] = ()
    accounts: Tuple[IdlAccount, ...] = ()
    events: Tuple[IdlEvent, ...] = ()
    errors: Tuple[IdlErrorCode, ...] = ()
    types: Tuple[IdlTypeDef, ...] = ()
    constants: Tuple[IdlConst, ...] = ()
    docs: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "Idl":
        """Build the model from a parsed IDL document.

        Both the current format (``address`` + ``metadata``) and the legacy
        format (top-level ``name``/``version``) are accepted.

        Raises:
            SchemaError: If the document is structurally invalid
        """
        try:
            meta = data.get("metadata") or {}
            metadata = IdlMetadata(
                name=meta.get("name", data.get("name", "")),
                version=meta.get("version", data.get("version", "")),
                spec=meta.get("spec"),
                description=meta.get("description"),
            )
            return cls(
                address=data.get("address") or meta.get("address"),
                metadata=metadata,
                instructions=tuple(
                    IdlInstruction.from_dict(ix) for ix in data.get("instructions") or []
                ),
                accounts=tuple(IdlAccount.from_dict(a) for a in data.get("accounts") or []),
                events=tuple(IdlEvent.from_dict(e) for e in data.get("events") or []),
                errors=tuple(
                    IdlErrorCode(code=e["code"], name=e["name"], msg=e.get("msg"))
                    for e in data.get("errors") or []
                ),
                types=tuple(IdlTypeDef.from_dict(t) for t in data.get("types") or []),
                constants=tuple(
                    IdlConst(name=c["name"], type=parse_idl_type(c["type"]), value=c["value"])
                    for c in data.get("constants") or []
                ),
                docs=_docs(data),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SchemaError(f"Malformed IDL document: {e!r}") from e

    @classmethod
    def from_json(cls, raw: str) -> "Idl":
        """Build the model from IDL JSON text."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SchemaError(f"IDL is not valid JSON: {e}") from e
        return cls.from_dict(data)

    @property
    def name(self) -> str:
        return self.metadata.name

    def find_type(self, name: str) -> Optional[IdlTypeDef]:
        return next((t for t in self.types if t.name == name), None)

    def find_account(self, name: str) -> Optional[IdlAccount]:
        return next((a for a in self.accounts if a.name == name), None)

    def find_instruction(self, name: str) -> Optional[IdlInstruction]:
        return next((ix for ix in self.instructions if ix.name == name), None)

    def find_event(self, name: str) -> Optional[IdlEvent]:
        return next((e for e in self.events if e.name == name), None)

    def find_error(self, code: int) -> Optional[IdlErrorCode]:
        return next((e for e in self.errors if e.code == code), None)
