"""Utility functions for the anchor codec."""

import base64
import binascii
from typing import Union

import base58
from solders.pubkey import Pubkey

from .constants import PUBKEY_SIZE
from .errors import ArgumentError

PubkeyLike = Union[Pubkey, bytes, bytearray, str]


def int_range(width: int, signed: bool) -> tuple[int, int]:
    """Return the inclusive (min, max) range of a fixed-width integer."""
    bits = width * 8
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def encode_int(value: int, width: int, signed: bool = False) -> bytes:
    """Encode an integer as fixed-width little-endian two's complement.

    Raises:
        ArgumentError: If value does not fit in ``width`` bytes
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentError(f"Expected an integer, got {type(value).__name__}")
    low, high = int_range(width, signed)
    if not low <= value <= high:
        kind = "i" if signed else "u"
        raise ArgumentError(
            f"{kind}{width * 8} value out of range: {value} (must be {low}-{high})"
        )
    return value.to_bytes(width, "little", signed=signed)


def to_pubkey(value: PubkeyLike) -> Pubkey:
    """Convert a Pubkey, 32 raw bytes or a base58 string to a Pubkey.

    Raises:
        ArgumentError: If the value is not a valid public key
    """
    if isinstance(value, Pubkey):
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) != PUBKEY_SIZE:
            raise ArgumentError(
                f"Invalid pubkey length: {len(value)} (expected {PUBKEY_SIZE})"
            )
        return Pubkey.from_bytes(bytes(value))
    if isinstance(value, str):
        try:
            raw = base58.b58decode(value)
        except ValueError as e:
            raise ArgumentError(f"Invalid base58 pubkey {value!r}: {e}") from e
        return to_pubkey(raw)
    raise ArgumentError(f"Cannot convert {type(value).__name__} to a pubkey")


def to_base64(data: bytes) -> str:
    """Encode bytes as a standard base64 string."""
    return base64.b64encode(data).decode("ascii")


def from_base64(data: str) -> bytes:
    """Decode a standard base64 string.

    Raises:
        ArgumentError: If the input is not valid base64
    """
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ArgumentError(f"Invalid base64 data: {e}") from e


def from_hex(data: str) -> bytes:
    """Decode a hex string, with or without a ``0x`` prefix.

    Raises:
        ArgumentError: If the input is not valid hex
    """
    if data.startswith(("0x", "0X")):
        data = data[2:]
    try:
        return bytes.fromhex(data)
    except ValueError as e:
        raise ArgumentError(f"Invalid hex data {data!r}: {e}") from e
