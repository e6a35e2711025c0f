"""Coder for named IDL types, without discriminators."""

from typing import Any, Optional

from ..borsh.codec import BorshCodec
from ..errors import BorshDecodeError, DidNotDeserializeError, UnknownNameError
from ..idl.types import IdlType


class TypesCoder:
    """Encode and decode values of the types declared in ``idl.types``."""

    def __init__(self, codec: BorshCodec):
        self.codec = codec

    def _type(self, type_name: str) -> IdlType:
        if type_name not in self.codec.type_table:
            raise UnknownNameError("type", type_name)
        return self.codec.type_table.get(type_name)

    def encode(self, type_name: str, value: Any) -> bytes:
        return self.codec.encode(value, self._type(type_name))

    def decode(self, type_name: str, data: bytes) -> Any:
        """Decode a value of ``type_name`` from the start of ``data``."""
        idl_type = self._type(type_name)
        try:
            value, _ = self.codec.decode(data, idl_type)
        except BorshDecodeError as e:
            raise DidNotDeserializeError(type_name, len(data), e.message) from e
        return value

    def size(self, type_name: str) -> Optional[int]:
        """Encoded size of a fixed-size type, None for variable-length ones."""
        self._type(type_name)
        return self.codec.type_table.cached_layout(type_name).size
