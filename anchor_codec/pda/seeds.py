"""PDA seed types and seed-to-bytes conversion.

Seeds are concatenated without length prefixes, so a string seed is just its
UTF-8 bytes. Every seed is validated when it is built: more than 32 encoded
bytes is an ArgumentError, never a silent truncation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Union

from solders.pubkey import Pubkey

from ..constants import DEFAULT_NUMBER_SEED_WIDTH, MAX_SEED_LENGTH
from ..errors import ArgumentError
from ..utils import encode_int, to_pubkey

NUMBER_SEED_WIDTHS = (1, 2, 4, 8)


class PdaSeed(ABC):
    """A single PDA seed."""

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Encode this seed."""

    @abstractmethod
    def debug_string(self) -> str:
        """Short description for error messages and logs."""

    def _check_length(self) -> None:
        length = len(self.to_bytes())
        if length > MAX_SEED_LENGTH:
            raise ArgumentError(
                f"Seed too long: {length} bytes (max {MAX_SEED_LENGTH}) for {self.debug_string()}"
            )


@dataclass(frozen=True)
class StringSeed(PdaSeed):
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ArgumentError(f"StringSeed expects a str, got {type(self.value).__name__}")
        self._check_length()

    def to_bytes(self) -> bytes:
        return self.value.encode("utf-8")

    def debug_string(self) -> str:
        return f'String("{self.value}")'


@dataclass(frozen=True)
class BytesSeed(PdaSeed):
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise ArgumentError(f"BytesSeed expects bytes, got {type(self.value).__name__}")
        # Keep an immutable copy of the caller's buffer
        object.__setattr__(self, "value", bytes(self.value))
        self._check_length()

    def to_bytes(self) -> bytes:
        return self.value

    def debug_string(self) -> str:
        return f"Bytes({self.value.hex()})"


@dataclass(frozen=True)
class PublicKeySeed(PdaSeed):
    value: Pubkey

    def __post_init__(self):
        object.__setattr__(self, "value", to_pubkey(self.value))

    def to_bytes(self) -> bytes:
        return bytes(self.value)

    def debug_string(self) -> str:
        return f"PublicKey({self.value})"


@dataclass(frozen=True)
class NumberSeed(PdaSeed):
    """Unsigned (or signed) integer seed of width 1, 2, 4 or 8 bytes."""

    value: int
    width: int = DEFAULT_NUMBER_SEED_WIDTH
    signed: bool = False
    byteorder: str = "little"

    def __post_init__(self):
        if self.width not in NUMBER_SEED_WIDTHS:
            raise ArgumentError(
                f"Unsupported number seed width: {self.width} (expected one of {NUMBER_SEED_WIDTHS})"
            )
        if self.byteorder not in ("little", "big"):
            raise ArgumentError(f"Invalid byte order: {self.byteorder}")
        self.to_bytes()

    def to_bytes(self) -> bytes:
        encoded = encode_int(self.value, self.width, self.signed)
        return encoded if self.byteorder == "little" else encoded[::-1]

    def debug_string(self) -> str:
        return f"Number({self.value}, {self.width}bytes, {self.byteorder})"


@dataclass(frozen=True)
class BigIntSeed(PdaSeed):
    """Arbitrary-width little-endian integer seed (1 to 32 bytes)."""

    value: int
    width: int = 16
    signed: bool = False

    def __post_init__(self):
        if not 1 <= self.width <= MAX_SEED_LENGTH:
            raise ArgumentError(
                f"BigInt seed width must be between 1 and {MAX_SEED_LENGTH}, got {self.width}"
            )
        self.to_bytes()

    def to_bytes(self) -> bytes:
        return encode_int(self.value, self.width, self.signed)

    def debug_string(self) -> str:
        return f"BigInt({self.value}, {self.width}bytes)"


@dataclass(frozen=True)
class BoolSeed(PdaSeed):
    value: bool

    def __post_init__(self):
        if not isinstance(self.value, bool):
            raise ArgumentError(f"BoolSeed expects a bool, got {type(self.value).__name__}")

    def to_bytes(self) -> bytes:
        return b"\x01" if self.value else b"\x00"

    def debug_string(self) -> str:
        return f"Bool({self.value})"


SeedLike = Union[PdaSeed, str, bytes, bytearray, Pubkey, int, bool]


def to_seed(value: Any, width: int = DEFAULT_NUMBER_SEED_WIDTH) -> PdaSeed:
    """Wrap a raw Python value in the matching seed type.

    Integers use ``width`` bytes: NumberSeed for 1/2/4/8, BigIntSeed otherwise.

    Raises:
        ArgumentError: If the value type is unsupported or does not fit
    """
    if isinstance(value, PdaSeed):
        return value
    if isinstance(value, str):
        return StringSeed(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BytesSeed(bytes(value))
    if isinstance(value, Pubkey):
        return PublicKeySeed(value)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return BoolSeed(value)
    if isinstance(value, int):
        if width in NUMBER_SEED_WIDTHS:
            return NumberSeed(value, width=width)
        return BigIntSeed(value, width=width)
    raise ArgumentError(f"Unsupported seed type: {type(value).__name__}")


def seed_to_bytes(value: Any, width: int = DEFAULT_NUMBER_SEED_WIDTH) -> bytes:
    """Encode a seed value to the bytes that go into the PDA hash."""
    return to_seed(value, width).to_bytes()
