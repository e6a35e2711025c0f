"""Instruction data coder."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import base58
from solders.instruction import AccountMeta

from ..borsh.codec import BorshCodec
from ..constants import INSTRUCTION_NAMESPACE
from ..discriminator.cache import DiscriminatorCache
from ..errors import ArgumentError, CoderError, EncodeError, UnknownNameError
from ..idl.schema import Idl
from ..idl.types import IdlTypeStruct, idl_type_name
from ..utils import from_hex
from .base import DiscriminatedCoder


@dataclass
class Instruction:
    """A decoded instruction: its IDL name and arguments by name."""

    name: str
    data: Dict[str, Any]


@dataclass
class InstructionArg:
    name: str
    type: str
    data: str


@dataclass
class InstructionAccount:
    name: Optional[str]
    pubkey: str
    is_signer: bool
    is_writable: bool


@dataclass
class InstructionDisplay:
    """Human-readable rendering of an instruction's arguments and accounts."""

    args: List[InstructionArg] = field(default_factory=list)
    accounts: List[InstructionAccount] = field(default_factory=list)


class InstructionCoder(DiscriminatedCoder):
    """Encode and decode instruction data: ``discriminator || borsh(args)``."""

    kind = "instruction"
    namespace = INSTRUCTION_NAMESPACE

    def __init__(
        self,
        idl: Idl,
        codec: BorshCodec,
        cache: Optional[DiscriminatorCache] = None,
    ):
        self.idl = idl
        super().__init__(
            ((ix.name, ix.discriminator, IdlTypeStruct(ix.args)) for ix in idl.instructions),
            codec,
            cache,
        )

    def encode(self, name: str, value: Any) -> bytes:
        """Encode instruction ``name`` with ``value`` mapping argument names to values.

        Raises:
            UnknownNameError: If the instruction is not in the IDL
            EncodeError: If an argument is missing or does not fit its type
        """
        entry = self.entry(name)
        for arg in entry.type.fields:
            if isinstance(value, Mapping) and arg.name not in value:
                raise EncodeError(f"Missing argument '{arg.name}' for instruction {name}")
        return super().encode(name, value)

    def decode_data(
        self,
        data: Union[bytes, str],
        encoding: str = "hex",
    ) -> Optional[Instruction]:
        """Decode instruction data of unknown type.

        ``data`` may be raw bytes or a string in ``encoding`` ("hex" or
        "base58"). Data that matches no instruction returns None.

        Raises:
            ArgumentError: If the encoding is unknown or the string is malformed
        """
        if isinstance(data, str):
            data = _decode_string(data, encoding)
        if not data:
            return None
        try:
            name, args = self.match(data)
        except CoderError:
            return None
        return Instruction(name=name, data=args)

    def format(
        self,
        ix: Instruction,
        account_metas: Sequence[AccountMeta],
    ) -> InstructionDisplay:
        """Render a decoded instruction for display.

        Accounts are named by their position in the IDL instruction; extra
        metas beyond the IDL list are shown unnamed.
        """
        idl_ix = self.idl.find_instruction(ix.name)
        if idl_ix is None:
            raise UnknownNameError(self.kind, ix.name)

        args = [
            InstructionArg(
                name=arg.name,
                type=idl_type_name(arg.type),
                data=format_value(ix.data.get(arg.name)),
            )
            for arg in idl_ix.args
        ]

        idl_accounts = idl_ix.flat_accounts()
        accounts = []
        for i, meta in enumerate(account_metas):
            accounts.append(
                InstructionAccount(
                    name=idl_accounts[i].name if i < len(idl_accounts) else None,
                    pubkey=str(meta.pubkey),
                    is_signer=meta.is_signer,
                    is_writable=meta.is_writable,
                )
            )
        return InstructionDisplay(args=args, accounts=accounts)


def _decode_string(data: str, encoding: str) -> bytes:
    if encoding == "hex":
        return from_hex(data)
    if encoding == "base58":
        try:
            return base58.b58decode(data)
        except ValueError as e:
            raise ArgumentError(f"Invalid base58 data: {e}") from e
    raise ArgumentError(f"Unsupported encoding: {encoding} (expected 'hex' or 'base58')")


def format_value(value: Any) -> str:
    """Render a decoded value as a short display string."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k}: {format_value(v)}" for k, v in value.items()) + "}"
    return str(value)
