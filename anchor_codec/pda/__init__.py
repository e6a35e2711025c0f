"""Program derived address derivation, seeds and caching."""

from .cache import PdaCache, PdaCacheKey
from .derivation import (
    PdaResult,
    create_program_address,
    debug_seeds,
    find_program_address,
    find_program_address_batch,
    is_on_curve,
    seeds_to_bytes,
    validate_program_address,
)
from .resolver import resolve_instruction_pdas, resolve_pda, seed_from_idl_value
from .seeds import (
    BigIntSeed,
    BoolSeed,
    BytesSeed,
    NumberSeed,
    PdaSeed,
    PublicKeySeed,
    SeedLike,
    StringSeed,
    seed_to_bytes,
    to_seed,
)

__all__ = [
    # Derivation
    "PdaResult",
    "create_program_address",
    "debug_seeds",
    "find_program_address",
    "find_program_address_batch",
    "is_on_curve",
    "seeds_to_bytes",
    "validate_program_address",
    # Cache
    "PdaCache",
    "PdaCacheKey",
    # IDL seeds
    "resolve_instruction_pdas",
    "resolve_pda",
    "seed_from_idl_value",
    # Seeds
    "BigIntSeed",
    "BoolSeed",
    "BytesSeed",
    "NumberSeed",
    "PdaSeed",
    "PublicKeySeed",
    "SeedLike",
    "StringSeed",
    "seed_to_bytes",
    "to_seed",
]
