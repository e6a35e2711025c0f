"""anchor-codec - IDL-driven Borsh coding and PDA derivation for Solana programs.

This package provides:
- `idl`: the IDL document and type model
- `borsh`: the schema-driven Borsh codec and layout resolver
- `discriminator`: 8-byte discriminators and their cache
- `coder`: account, instruction, event and type coders
- `pda`: program derived addresses, seeds and the PDA cache

Example:
    from anchor_codec import Coder, Idl, find_program_address

    coder = Coder(Idl.from_json(idl_text))
    data = coder.accounts.encode("Counter", {"count": 1})
    pda, bump = find_program_address([b"counter", authority], program_id)
"""

__version__ = "0.1.0"

# ============================================================================
# MODULE IMPORTS
# ============================================================================

from . import borsh
from . import coder
from . import discriminator
from . import idl
from . import pda

# ============================================================================
# CONVENIENCE RE-EXPORTS
# ============================================================================

from .borsh import BorshCodec, LayoutInfo, TypeTable, resolve_layout
from .cache import LruCache
from .coder import (
    AccountsCoder,
    Coder,
    Event,
    EventCoder,
    Instruction,
    InstructionAccount,
    InstructionArg,
    InstructionCoder,
    InstructionDisplay,
    TypesCoder,
)
from .config import CacheConfig, CoderConfig
from .constants import (
    DISCRIMINATOR_SIZE,
    MAX_SEED_LENGTH,
    MAX_SEEDS,
    PDA_MARKER,
)
from .discriminator import (
    DiscriminatorCache,
    account_discriminator,
    cached_discriminator,
    compute_discriminator,
    discriminator_from_hex,
    discriminator_to_hex,
    event_discriminator,
    instruction_discriminator,
    validate_discriminator_size,
)
from .errors import (
    AnchorCodecError,
    ArgumentError,
    BorshDecodeError,
    BorshError,
    BufferUnderflowError,
    CoderError,
    DidNotDeserializeError,
    DiscriminatorMismatchError,
    EncodeError,
    PdaDerivationError,
    SchemaError,
    StructuralDecodeError,
    UnknownNameError,
)
from .idl import Idl, parse_idl_type
from .pda import (
    BigIntSeed,
    BoolSeed,
    BytesSeed,
    NumberSeed,
    PdaCache,
    PdaCacheKey,
    PdaResult,
    PdaSeed,
    PublicKeySeed,
    StringSeed,
    create_program_address,
    debug_seeds,
    find_program_address,
    find_program_address_batch,
    resolve_instruction_pdas,
    resolve_pda,
    seed_to_bytes,
    validate_program_address,
)

__all__ = [
    "__version__",
    # Modules
    "borsh",
    "coder",
    "discriminator",
    "idl",
    "pda",
    # IDL
    "Idl",
    "parse_idl_type",
    # Borsh
    "BorshCodec",
    "LayoutInfo",
    "TypeTable",
    "resolve_layout",
    # Coders
    "AccountsCoder",
    "Coder",
    "Event",
    "EventCoder",
    "Instruction",
    "InstructionAccount",
    "InstructionArg",
    "InstructionCoder",
    "InstructionDisplay",
    "TypesCoder",
    # Config
    "CacheConfig",
    "CoderConfig",
    "LruCache",
    # Constants
    "DISCRIMINATOR_SIZE",
    "MAX_SEED_LENGTH",
    "MAX_SEEDS",
    "PDA_MARKER",
    # Discriminators
    "DiscriminatorCache",
    "account_discriminator",
    "cached_discriminator",
    "compute_discriminator",
    "discriminator_from_hex",
    "discriminator_to_hex",
    "event_discriminator",
    "instruction_discriminator",
    "validate_discriminator_size",
    # Errors
    "AnchorCodecError",
    "ArgumentError",
    "BorshDecodeError",
    "BorshError",
    "BufferUnderflowError",
    "CoderError",
    "DidNotDeserializeError",
    "DiscriminatorMismatchError",
    "EncodeError",
    "PdaDerivationError",
    "SchemaError",
    "StructuralDecodeError",
    "UnknownNameError",
    # PDA
    "BigIntSeed",
    "BoolSeed",
    "BytesSeed",
    "NumberSeed",
    "PdaCache",
    "PdaCacheKey",
    "PdaResult",
    "PdaSeed",
    "PublicKeySeed",
    "StringSeed",
    "create_program_address",
    "debug_seeds",
    "find_program_address",
    "find_program_address_batch",
    "resolve_instruction_pdas",
    "resolve_pda",
    "seed_to_bytes",
    "validate_program_address",
]
