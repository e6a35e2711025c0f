"""Discriminator computation.

A discriminator is the first 8 bytes of SHA-256 over ``"<namespace>:<name>"``:

- accounts:     ``account:<Name>``
- instructions: ``global:<name>``
- events:       ``event:<Name>``

Names are hashed exactly as given, so case and whitespace matter.
"""

from typing import Optional, TYPE_CHECKING

from Crypto.Hash import SHA256

from ..constants import (
    ACCOUNT_NAMESPACE,
    DISCRIMINATOR_SIZE,
    EVENT_NAMESPACE,
    INSTRUCTION_NAMESPACE,
)
from ..errors import ArgumentError
from ..utils import from_hex

if TYPE_CHECKING:
    from .cache import DiscriminatorCache


def sha256(data: bytes) -> bytes:
    """Compute SHA-256 hash of data."""
    h = SHA256.new()
    h.update(data)
    return h.digest()


def compute_discriminator(namespace: str, name: str) -> bytes:
    """Compute the 8-byte discriminator for ``namespace:name``.

    Raises:
        ArgumentError: If name is empty
    """
    if not name:
        raise ArgumentError(f"Cannot compute a {namespace} discriminator for an empty name")
    preimage = f"{namespace}:{name}".encode("utf-8")
    return sha256(preimage)[:DISCRIMINATOR_SIZE]


def account_discriminator(name: str) -> bytes:
    """Discriminator for an account type (``account:<name>``)."""
    return compute_discriminator(ACCOUNT_NAMESPACE, name)


def instruction_discriminator(name: str) -> bytes:
    """Discriminator for an instruction (``global:<name>``)."""
    return compute_discriminator(INSTRUCTION_NAMESPACE, name)


def event_discriminator(name: str) -> bytes:
    """Discriminator for an event (``event:<name>``)."""
    return compute_discriminator(EVENT_NAMESPACE, name)


def cached_discriminator(
    namespace: str,
    name: str,
    cache: Optional["DiscriminatorCache"] = None,
) -> bytes:
    """Compute a discriminator, consulting and filling ``cache`` if given."""
    if cache is None:
        return compute_discriminator(namespace, name)
    key = f"{namespace}:{name}"
    cached = cache.get(key)
    if cached is not None:
        return cached
    discriminator = compute_discriminator(namespace, name)
    cache.put(key, discriminator)
    return discriminator


def validate_discriminator_size(discriminator: bytes) -> None:
    """Raise ArgumentError unless the discriminator is exactly 8 bytes."""
    if len(discriminator) != DISCRIMINATOR_SIZE:
        raise ArgumentError(
            f"Discriminator must be exactly {DISCRIMINATOR_SIZE} bytes, "
            f"got {len(discriminator)}"
        )


def discriminator_to_hex(discriminator: bytes) -> str:
    return bytes(discriminator).hex()


def discriminator_from_hex(hex_str: str) -> bytes:
    """Parse a discriminator from hex (``0x`` prefix optional).

    Raises:
        ArgumentError: If the string is not 16 hex characters
    """
    digits = hex_str[2:] if hex_str.startswith(("0x", "0X")) else hex_str
    if len(digits) != DISCRIMINATOR_SIZE * 2:
        raise ArgumentError(
            f"Hex string must represent exactly {DISCRIMINATOR_SIZE} bytes "
            f"({DISCRIMINATOR_SIZE * 2} hex characters), got {len(digits)}"
        )
    return from_hex(digits)
