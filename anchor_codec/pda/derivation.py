"""Program Derived Address (PDA) derivation.

address = SHA256(seed_0 || ... || seed_n || program_id || "ProgramDerivedAddress")

A PDA must not be a valid ed25519 point, so ``find_program_address`` appends a
bump byte to the seeds, counting down from 255 until the hash falls off the
curve.
"""

import logging
from typing import Iterable, NamedTuple, Sequence

from solders.pubkey import Pubkey

from ..constants import MAX_BUMP, MAX_SEED_LENGTH, MAX_SEEDS, PDA_MARKER
from ..discriminator.compute import sha256
from ..errors import ArgumentError, PdaDerivationError
from ..utils import PubkeyLike, to_pubkey
from .seeds import SeedLike, to_seed

logger = logging.getLogger(__name__)


class PdaResult(NamedTuple):
    """A derived address and the bump that pushed it off the curve."""

    address: Pubkey
    bump: int


def seeds_to_bytes(seeds: Iterable[SeedLike], max_seeds: int = MAX_SEEDS) -> list[bytes]:
    """Encode and validate a seed set.

    Raises:
        ArgumentError: If there are more than ``max_seeds`` seeds or any seed
            is longer than 32 bytes
    """
    encoded = [to_seed(seed).to_bytes() for seed in seeds]
    if len(encoded) > max_seeds:
        raise ArgumentError(f"Too many seeds: {len(encoded)} (max {max_seeds})")
    for i, seed in enumerate(encoded):
        if len(seed) > MAX_SEED_LENGTH:
            raise ArgumentError(
                f"Seed {i} too long: {len(seed)} bytes (max {MAX_SEED_LENGTH})"
            )
    return encoded


def _hash_address(seed_bytes: Sequence[bytes], program_id: Pubkey) -> bytes:
    return sha256(b"".join(seed_bytes) + bytes(program_id) + PDA_MARKER)


def is_on_curve(address: PubkeyLike) -> bool:
    """Check whether an address is a valid ed25519 point."""
    return to_pubkey(address).is_on_curve()


def create_program_address(seeds: Sequence[SeedLike], program_id: PubkeyLike) -> Pubkey:
    """Hash seeds into an address without searching for a bump.

    The caller supplies the complete seed set (usually ending in the bump) and
    is responsible for the result being off-curve.
    """
    seed_bytes = seeds_to_bytes(seeds)
    return Pubkey.from_bytes(_hash_address(seed_bytes, to_pubkey(program_id)))


def find_program_address(seeds: Sequence[SeedLike], program_id: PubkeyLike) -> PdaResult:
    """Find the first off-curve address, trying bumps 255 down to 0.

    At most 15 seeds may be given, since the bump is the 16th.

    Raises:
        ArgumentError: If the seeds are invalid
        PdaDerivationError: If no bump produces an off-curve address
    """
    seed_bytes = seeds_to_bytes(seeds, max_seeds=MAX_SEEDS - 1)
    program = to_pubkey(program_id)

    for bump in range(MAX_BUMP, -1, -1):
        address = Pubkey.from_bytes(_hash_address(seed_bytes + [bytes([bump])], program))
        if not address.is_on_curve():
            logger.debug(f"Derived PDA {address} with bump {bump}")
            return PdaResult(address, bump)

    raise PdaDerivationError(
        f"Unable to find a valid program address for seeds: {debug_seeds(seeds)}",
        code="PDA_NOT_FOUND",
    )


def validate_program_address(
    address: PubkeyLike,
    seeds: Sequence[SeedLike],
    program_id: PubkeyLike,
) -> bool:
    """Check that ``address`` is the off-curve address for the full seed set."""
    try:
        derived = create_program_address(seeds, program_id)
    except ArgumentError:
        return False
    return derived == to_pubkey(address) and not derived.is_on_curve()


def find_program_address_batch(
    seed_sets: Iterable[Sequence[SeedLike]],
    program_id: PubkeyLike,
) -> list[PdaResult]:
    """Derive one PDA per seed set."""
    return [find_program_address(seeds, program_id) for seeds in seed_sets]


def debug_seeds(seeds: Iterable[SeedLike]) -> str:
    """Describe a seed set for logs and error messages."""
    parts = []
    for seed in seeds:
        try:
            parts.append(to_seed(seed).debug_string())
        except ArgumentError:
            parts.append(repr(seed))
    return f"[{', '.join(parts)}]"
