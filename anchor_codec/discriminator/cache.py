"""LRU cache for discriminators."""

from ..cache import LruCache
from ..constants import (
    ACCOUNT_NAMESPACE,
    DISCRIMINATOR_SIZE,
    EVENT_NAMESPACE,
    INSTRUCTION_NAMESPACE,
)
from ..errors import ArgumentError


class DiscriminatorCache(LruCache[str, bytes]):
    """Cache of 8-byte discriminators keyed by ``"<namespace>:<name>"``.

    Values are copied to immutable ``bytes`` on the way in, so a caller that
    later mutates the buffer it passed to ``put`` cannot change the cache.
    """

    def _copy_in(self, value: bytes) -> bytes:
        discriminator = bytes(value)
        if len(discriminator) != DISCRIMINATOR_SIZE:
            raise ArgumentError(
                f"Discriminator must be exactly {DISCRIMINATOR_SIZE} bytes, "
                f"got {len(discriminator)}"
            )
        return discriminator

    def _copy_out(self, value: bytes) -> bytes:
        return bytes(value)

    @staticmethod
    def account_key(name: str) -> str:
        return f"{ACCOUNT_NAMESPACE}:{name}"

    @staticmethod
    def instruction_key(name: str) -> str:
        return f"{INSTRUCTION_NAMESPACE}:{name}"

    @staticmethod
    def event_key(name: str) -> str:
        return f"{EVENT_NAMESPACE}:{name}"
