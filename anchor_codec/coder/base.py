"""Shared machinery for discriminator-prefixed coders."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from ..borsh.codec import BorshCodec
from ..constants import DISCRIMINATOR_SIZE
from ..discriminator.cache import DiscriminatorCache
from ..discriminator.compute import cached_discriminator
from ..errors import (
    BorshDecodeError,
    DiscriminatorMismatchError,
    DidNotDeserializeError,
    SchemaError,
    UnknownNameError,
)
from ..idl.types import IdlType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoderEntry:
    """Discriminator and body type of one named account, instruction or event."""

    name: str
    discriminator: bytes
    type: IdlType


class DiscriminatedCoder:
    """Encode and decode ``discriminator || borsh(body)`` for a set of named entries.

    Subclasses set ``kind`` (used in error messages) and ``namespace`` (the
    discriminator preimage prefix) and pass ``(name, explicit_discriminator,
    body_type)`` triples in schema order.
    """

    kind = "entry"
    namespace = ""

    def __init__(
        self,
        entries: Iterable[Tuple[str, Optional[bytes], IdlType]],
        codec: BorshCodec,
        cache: Optional[DiscriminatorCache] = None,
    ):
        self.codec = codec
        self._entries: dict[str, CoderEntry] = {}
        for name, explicit, body in entries:
            if explicit is not None:
                if len(explicit) != DISCRIMINATOR_SIZE:
                    raise SchemaError(
                        f"{self.kind} {name} discriminator must be {DISCRIMINATOR_SIZE} bytes, "
                        f"got {len(explicit)}"
                    )
                discriminator = bytes(explicit)
            else:
                discriminator = cached_discriminator(self.namespace, name, cache)
            self._entries[name] = CoderEntry(name, discriminator, body)
        logger.debug(f"{type(self).__name__} built with {len(self._entries)} {self.kind}s")

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        return list(self._entries)

    def entry(self, name: str) -> CoderEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownNameError(self.kind, name) from None

    def discriminator(self, name: str) -> bytes:
        """Return the 8-byte discriminator for a name."""
        return self.entry(name).discriminator

    def encode(self, name: str, value: Any) -> bytes:
        """Encode ``value`` prefixed with the discriminator of ``name``.

        Raises:
            UnknownNameError: If the name is not in the IDL
            EncodeError: If the value does not fit the layout
        """
        entry = self.entry(name)
        return entry.discriminator + self.codec.encode(value, entry.type)

    def decode(
        self,
        name: str,
        data: bytes,
        address: Optional[Any] = None,
        context: Optional[str] = None,
    ) -> Any:
        """Check the discriminator of ``name`` and decode the body.

        Raises:
            UnknownNameError: If the name is not in the IDL
            DiscriminatorMismatchError: If the data does not start with the
                expected discriminator, including data shorter than 8 bytes
            DidNotDeserializeError: If the body does not fit the layout
        """
        entry = self.entry(name)
        data = bytes(data)
        actual = data[:DISCRIMINATOR_SIZE]
        if actual != entry.discriminator:
            raise DiscriminatorMismatchError(entry.discriminator, actual, address, context)
        return self._decode_body(entry, data)

    def decode_unchecked(self, name: str, data: bytes) -> Any:
        """Decode the body of ``name`` without looking at the first 8 bytes."""
        entry = self.entry(name)
        data = bytes(data)
        if len(data) < DISCRIMINATOR_SIZE:
            raise DidNotDeserializeError(
                name, len(data), f"shorter than the {DISCRIMINATOR_SIZE}-byte discriminator"
            )
        return self._decode_body(entry, data)

    def decode_any(self, data: bytes) -> Any:
        """Decode data as whichever entry it matches. See ``match``."""
        return self.match(data)[1]

    def match(self, data: bytes) -> Tuple[str, Any]:
        """Try every entry in schema order and return ``(name, value)`` for the first fit.

        Raises:
            UnknownNameError: If no entry matches, chained to the last
                structural failure if any entry matched the discriminator
        """
        data = bytes(data)
        prefix = data[:DISCRIMINATOR_SIZE]
        last_error: Optional[DidNotDeserializeError] = None
        for entry in self._entries.values():
            if entry.discriminator != prefix:
                continue
            try:
                return entry.name, self._decode_body(entry, data)
            except DidNotDeserializeError as e:
                last_error = e
        raise UnknownNameError(
            self.kind,
            prefix.hex(),
            f"No {self.kind} matches discriminator {prefix.hex() or '<empty>'}",
        ) from last_error

    def _decode_body(self, entry: CoderEntry, data: bytes) -> Any:
        try:
            value, _ = self.codec.decode(data, entry.type, DISCRIMINATOR_SIZE)
        except BorshDecodeError as e:
            raise DidNotDeserializeError(entry.name, len(data), e.message) from e
        return value
