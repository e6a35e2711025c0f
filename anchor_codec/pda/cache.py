"""LRU cache for derived program addresses."""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..cache import LruCache
from ..utils import PubkeyLike, to_pubkey
from .derivation import PdaResult, find_program_address, seeds_to_bytes
from .seeds import SeedLike


@dataclass(frozen=True)
class PdaCacheKey:
    """Program id plus encoded seeds, identifying one derivation."""

    program_id: str
    seed_bytes: tuple[bytes, ...]

    @classmethod
    def create(cls, seeds: Sequence[SeedLike], program_id: PubkeyLike) -> "PdaCacheKey":
        return cls(
            program_id=str(to_pubkey(program_id)),
            seed_bytes=tuple(seeds_to_bytes(seeds)),
        )

    def canonical(self) -> str:
        """``<program id base58>:<seed hex>:<seed hex>...``"""
        return ":".join([self.program_id] + [seed.hex() for seed in self.seed_bytes])

    def __str__(self) -> str:
        return self.canonical()


class PdaCache(LruCache[str, PdaResult]):
    """Cache of ``find_program_address`` results."""

    def get_result(self, seeds: Sequence[SeedLike], program_id: PubkeyLike) -> Optional[PdaResult]:
        return self.get(PdaCacheKey.create(seeds, program_id).canonical())

    def put_result(
        self,
        seeds: Sequence[SeedLike],
        program_id: PubkeyLike,
        result: PdaResult,
    ) -> None:
        self.put(PdaCacheKey.create(seeds, program_id).canonical(), result)

    def get_or_derive(self, seeds: Sequence[SeedLike], program_id: PubkeyLike) -> PdaResult:
        """Return the cached PDA for these seeds, deriving and storing it on a miss."""
        key = PdaCacheKey.create(seeds, program_id).canonical()
        cached = self.get(key)
        if cached is not None:
            return cached
        result = find_program_address(seeds, program_id)
        self.put(key, result)
        return result
