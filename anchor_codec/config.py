"""Configuration for coders and caches."""

from dataclasses import dataclass, field
from typing import Optional

from .constants import DEFAULT_CACHE_SIZE, DEFAULT_VARIABLE_ACCOUNT_SIZE
from .errors import ArgumentError


@dataclass
class CacheConfig:
    """Configuration for an LRU cache."""

    max_size: int = DEFAULT_CACHE_SIZE
    enabled: bool = True
    max_age_seconds: Optional[float] = None  # None = entries never expire

    def __post_init__(self):
        self.validate()

    @classmethod
    def default(cls) -> "CacheConfig":
        """Create default config (1000 entries, no expiry)."""
        return cls()

    @classmethod
    def disabled(cls) -> "CacheConfig":
        """Create a config for a cache that stores nothing."""
        return cls(enabled=False)

    def with_max_size(self, max_size: int) -> "CacheConfig":
        """Set the maximum number of entries."""
        self.max_size = max_size
        self.validate()
        return self

    def with_max_age(self, seconds: Optional[float]) -> "CacheConfig":
        """Set how long entries stay valid."""
        self.max_age_seconds = seconds
        self.validate()
        return self

    def validate(self) -> None:
        if self.max_size <= 0:
            raise ArgumentError(
                f"Cache max size must be positive, got {self.max_size}"
            )
        if self.max_age_seconds is not None and self.max_age_seconds <= 0:
            raise ArgumentError(
                f"Cache max age must be positive, got {self.max_age_seconds}"
            )


@dataclass
class CoderConfig:
    """Configuration for the account, instruction and event coders."""

    discriminator_cache: CacheConfig = field(default_factory=CacheConfig)
    variable_account_size: int = DEFAULT_VARIABLE_ACCOUNT_SIZE

    def __post_init__(self):
        if self.variable_account_size < 0:
            raise ArgumentError(
                "Variable account size cannot be negative, "
                f"got {self.variable_account_size}"
            )

    @classmethod
    def default(cls) -> "CoderConfig":
        """Create default config."""
        return cls()

    def with_discriminator_cache(self, cache: CacheConfig) -> "CoderConfig":
        """Set the discriminator cache configuration."""
        self.discriminator_cache = cache
        return self

    def with_variable_account_size(self, size: int) -> "CoderConfig":
        """Set the allocation reported by ``size()`` for variable-length accounts."""
        if size < 0:
            raise ArgumentError(f"Variable account size cannot be negative, got {size}")
        self.variable_account_size = size
        return self
