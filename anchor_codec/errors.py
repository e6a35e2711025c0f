"""Custom exceptions for the anchor codec."""

from typing import Any, Optional


class AnchorCodecError(Exception):
    """Base exception for all anchor codec errors."""

    pass


class SchemaError(AnchorCodecError):
    """Raised when an IDL cannot be turned into a coder.

    Unresolved ``defined`` references and malformed discriminators are reported
    here, when the coder is built, never while decoding.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Invalid IDL: {message}")


class ArgumentError(AnchorCodecError, ValueError):
    """Raised when a caller-supplied argument fails validation."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ============================================================================
# CODEC ERRORS
# ============================================================================


class BorshError(AnchorCodecError):
    """Base exception for Borsh encoding and decoding failures."""

    pass


class EncodeError(BorshError):
    """Raised when a value does not fit the IDL type it is encoded as."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Encode error: {message}")


class BorshDecodeError(BorshError):
    """Raised when bytes do not form a valid value of the requested type."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Decode error: {message}")


class BufferUnderflowError(BorshDecodeError):
    """Raised when the buffer ends before a value is complete."""

    def __init__(self, offset: int, needed: int, available: int):
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"need {needed} bytes at offset {offset}, have {available}"
        )


# ============================================================================
# CODER ERRORS
# ============================================================================


class CoderError(AnchorCodecError):
    """Base exception for account, instruction and event coder failures."""

    pass


class UnknownNameError(CoderError):
    """Raised when a name is not declared in the IDL."""

    def __init__(self, kind: str, name: str, message: Optional[str] = None):
        self.kind = kind
        self.name = name
        super().__init__(message or f"Unknown {kind}: {name}")


class DiscriminatorMismatchError(CoderError):
    """Raised when data does not start with the expected discriminator.

    Data too short to hold a discriminator is reported with this error as well.
    """

    def __init__(
        self,
        expected: bytes,
        actual: bytes,
        address: Optional[Any] = None,
        context: Optional[str] = None,
    ):
        self.expected = bytes(expected)
        self.actual = bytes(actual)
        self.address = address
        self.context = context
        message = (
            f"Discriminator mismatch: expected {self.expected.hex()}, "
            f"got {self.actual.hex() or '<empty>'}"
        )
        if len(self.actual) < len(self.expected):
            message += f" (data is only {len(self.actual)} bytes)"
        if address is not None:
            message += f" for account {address}"
        if context:
            message += f" [{context}]"
        super().__init__(message)


class StructuralDecodeError(CoderError):
    """Raised when data with a matching discriminator fails to deserialize."""

    def __init__(self, type_name: str, data_size: int, reason: str = ""):
        self.type_name = type_name
        self.data_size = data_size
        self.reason = reason
        message = f"{type_name} did not deserialize ({data_size} bytes)"
        if reason:
            message += f": {reason}"
        super().__init__(message)


DidNotDeserializeError = StructuralDecodeError


# ============================================================================
# PDA ERRORS
# ============================================================================


class PdaDerivationError(AnchorCodecError):
    """Raised when no bump seed yields an off-curve address."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code
        super().__init__(message)
