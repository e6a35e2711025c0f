"""Discriminator computation and caching."""

from .cache import DiscriminatorCache
from .compute import (
    account_discriminator,
    cached_discriminator,
    compute_discriminator,
    discriminator_from_hex,
    discriminator_to_hex,
    event_discriminator,
    instruction_discriminator,
    sha256,
    validate_discriminator_size,
)

__all__ = [
    "DiscriminatorCache",
    "account_discriminator",
    "cached_discriminator",
    "compute_discriminator",
    "discriminator_from_hex",
    "discriminator_to_hex",
    "event_discriminator",
    "instruction_discriminator",
    "sha256",
    "validate_discriminator_size",
]
