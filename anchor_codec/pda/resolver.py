"""Resolve IDL-declared PDA accounts from instruction arguments.

Instruction accounts may carry a ``pda`` block whose seeds are constants,
instruction argument paths (``"config.index"``) or other accounts (``"mint"``,
or ``"vault.owner"`` for a field of an already decoded account). Seed values
are turned into bytes with the same primitive rules the codec uses.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from solders.pubkey import Pubkey

from ..errors import ArgumentError
from ..idl.schema import (
    IdlInstruction,
    IdlPda,
    IdlSeed,
    IdlSeedAccount,
    IdlSeedArg,
    IdlSeedConst,
)
from ..idl.types import (
    INTEGER_WIDTHS,
    IdlType,
    IdlTypeArray,
    IdlTypeDefined,
    IdlTypePrimitive,
    IdlTypeStruct,
    IdlTypeVec,
    idl_type_name,
)
from ..utils import PubkeyLike, to_pubkey
from .derivation import PdaResult, find_program_address
from .seeds import (
    NUMBER_SEED_WIDTHS,
    BigIntSeed,
    BoolSeed,
    BytesSeed,
    NumberSeed,
    PdaSeed,
    PublicKeySeed,
    StringSeed,
    to_seed,
)

logger = logging.getLogger(__name__)


def seed_from_idl_value(value: Any, idl_type: Optional[IdlType] = None) -> PdaSeed:
    """Build a seed from a value of a known IDL type.

    Integers are encoded at their IDL width, strings without a length prefix,
    pubkeys as 32 bytes and ``bytes``/``[u8; N]``/``vec<u8>`` as raw bytes.
    Without a type the value's Python type decides.

    Raises:
        ArgumentError: If the type cannot be used as a seed or the value does not fit
    """
    if idl_type is None:
        return to_seed(value)

    if isinstance(idl_type, IdlTypePrimitive):
        name = idl_type.name
        if name in INTEGER_WIDTHS:
            width, signed = INTEGER_WIDTHS[name]
            if width in NUMBER_SEED_WIDTHS:
                return NumberSeed(value, width=width, signed=signed)
            return BigIntSeed(value, width=width, signed=signed)
        if name == "string":
            return StringSeed(value)
        if name == "pubkey":
            return PublicKeySeed(value)
        if name == "bool":
            return BoolSeed(value)
        if name == "bytes":
            return BytesSeed(value)

    if isinstance(idl_type, (IdlTypeArray, IdlTypeVec)) and idl_type.inner == IdlTypePrimitive("u8"):
        if isinstance(value, (list, tuple)):
            try:
                value = bytes(value)
            except (TypeError, ValueError) as e:
                raise ArgumentError(f"Invalid byte list for seed: {e}") from e
        return BytesSeed(value)

    raise ArgumentError(f"Type {idl_type_name(idl_type)} cannot be used as a PDA seed")


def _walk_path(value: Any, parts: list[str], path: str) -> Any:
    for part in parts:
        if isinstance(value, Mapping) and part in value:
            value = value[part]
        elif hasattr(value, part):
            value = getattr(value, part)
        else:
            raise ArgumentError(f"Seed path '{path}' not found at '{part}'")
    return value


def _field_type(idl_type: Optional[IdlType], parts: list[str], type_table) -> Optional[IdlType]:
    """Follow struct fields through ``defined`` types to the type at a path."""
    for part in parts:
        if isinstance(idl_type, IdlTypeDefined):
            if type_table is None or idl_type.name not in type_table:
                return None
            idl_type = type_table.get(idl_type.name)
        if not isinstance(idl_type, IdlTypeStruct):
            return None
        idl_type = next((f.type for f in idl_type.fields if f.name == part), None)
    return idl_type


def _arg_seed(seed: IdlSeedArg, instruction: IdlInstruction, args: Mapping, type_table) -> PdaSeed:
    name, *rest = seed.path.split(".")
    if name not in args or args[name] is None:
        raise ArgumentError(
            f"Missing argument '{name}' for PDA seed of instruction {instruction.name}"
        )
    value = _walk_path(args[name], rest, seed.path)
    idl_type = seed.type
    if idl_type is None:
        arg = next((a for a in instruction.args if a.name == name), None)
        idl_type = _field_type(arg.type, rest, type_table) if arg is not None else None
    return seed_from_idl_value(value, idl_type)


def _account_seed(
    seed: IdlSeedAccount,
    accounts: Mapping,
    account_data: Mapping,
) -> PdaSeed:
    name, *rest = seed.path.split(".")
    if not rest:
        if name not in accounts:
            raise ArgumentError(f"Missing account '{name}' for PDA seed")
        return PublicKeySeed(to_pubkey(accounts[name]))
    if name not in account_data:
        raise ArgumentError(f"Missing data for account '{name}' (seed path '{seed.path}')")
    value = _walk_path(account_data[name], rest, seed.path)
    return seed_from_idl_value(value, seed.type)


def _seed_bytes(
    seed: IdlSeed,
    instruction: IdlInstruction,
    args: Mapping,
    accounts: Mapping,
    account_data: Mapping,
    type_table,
) -> bytes:
    if isinstance(seed, IdlSeedConst):
        if isinstance(seed.value, bytes):
            return seed.value
        return seed_from_idl_value(seed.value, seed.type).to_bytes()
    if isinstance(seed, IdlSeedArg):
        return _arg_seed(seed, instruction, args, type_table).to_bytes()
    if isinstance(seed, IdlSeedAccount):
        return _account_seed(seed, accounts, account_data).to_bytes()
    raise ArgumentError(f"Unsupported seed: {seed!r}")


def resolve_pda(
    pda: IdlPda,
    instruction: IdlInstruction,
    args: Mapping,
    accounts: Mapping[str, PubkeyLike],
    program_id: PubkeyLike,
    account_data: Optional[Mapping] = None,
    type_table=None,
) -> PdaResult:
    """Derive the address described by an IDL ``pda`` block.

    Args:
        pda: Seed description from the IDL
        instruction: Instruction the account belongs to
        args: Instruction arguments by name
        accounts: Already known account addresses by name
        program_id: Program to derive against unless the block names another
        account_data: Decoded account data by name, for field-path seeds
        type_table: Used to find argument field types through defined types

    Raises:
        ArgumentError: If an argument or account the seeds need is missing
    """
    account_data = account_data or {}
    seeds = [
        _seed_bytes(seed, instruction, args, accounts, account_data, type_table)
        for seed in pda.seeds
    ]
    program = to_pubkey(program_id)
    if pda.program is not None:
        program = to_pubkey(
            _seed_bytes(pda.program, instruction, args, accounts, account_data, type_table)
        )
    return find_program_address(seeds, program)


def resolve_instruction_pdas(
    instruction: IdlInstruction,
    args: Mapping,
    accounts: Mapping[str, PubkeyLike],
    program_id: PubkeyLike,
    account_data: Optional[Mapping] = None,
    type_table=None,
) -> Dict[str, Pubkey]:
    """Fill in every fixed-address and PDA account the caller did not supply.

    PDAs may depend on each other, so resolution repeats until nothing new
    resolves. Returns all known accounts, supplied ones included.

    Raises:
        ArgumentError: If a required PDA account cannot be resolved
    """
    resolved: Dict[str, Pubkey] = {name: to_pubkey(key) for name, key in accounts.items()}
    pending = []
    for account in instruction.flat_accounts():
        if account.name in resolved:
            continue
        if account.address is not None:
            resolved[account.name] = to_pubkey(account.address)
        elif account.pda is not None:
            pending.append(account)

    errors: Dict[str, ArgumentError] = {}
    progress = True
    while pending and progress:
        progress = False
        for account in list(pending):
            try:
                result = resolve_pda(
                    account.pda, instruction, args, resolved, program_id,
                    account_data=account_data, type_table=type_table,
                )
            except ArgumentError as e:
                errors[account.name] = e
                continue
            resolved[account.name] = result.address
            pending.remove(account)
            errors.pop(account.name, None)
            progress = True
            logger.debug(f"Resolved PDA account {account.name} -> {result.address}")

    for account in pending:
        if not account.optional:
            raise ArgumentError(
                f"Cannot resolve PDA account '{account.name}' of instruction "
                f"{instruction.name}: {errors[account.name].message}"
            )
    return resolved
