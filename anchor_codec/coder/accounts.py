"""Account data coder."""

from typing import Any, Dict, Optional, Tuple

from ..borsh.codec import BorshCodec
from ..borsh.layout import TypeTable
from ..constants import ACCOUNT_NAMESPACE, DEFAULT_VARIABLE_ACCOUNT_SIZE, DISCRIMINATOR_SIZE
from ..discriminator.cache import DiscriminatorCache
from ..errors import SchemaError
from ..idl.schema import Idl
from ..utils import to_base64
from .base import DiscriminatedCoder


class AccountsCoder(DiscriminatedCoder):
    """Encode and decode account data: ``discriminator || borsh(struct)``.

    The layout of an account is its inline ``type`` (legacy IDLs) or the
    same-named entry in ``types``.
    """

    kind = "account"
    namespace = ACCOUNT_NAMESPACE

    def __init__(
        self,
        idl: Idl,
        codec: BorshCodec,
        cache: Optional[DiscriminatorCache] = None,
        variable_account_size: int = DEFAULT_VARIABLE_ACCOUNT_SIZE,
    ):
        self.variable_account_size = variable_account_size
        super().__init__(
            ((a.name, a.discriminator, _account_type(a, codec.type_table)) for a in idl.accounts),
            codec,
            cache,
        )

    def decode_any_with_name(self, data: bytes) -> Tuple[str, Any]:
        """Decode account data of unknown type, returning ``(account_name, value)``."""
        return self.match(data)

    def memcmp(self, name: str, append_data: Optional[bytes] = None) -> Dict[str, Any]:
        """Build a ``getProgramAccounts`` memcmp filter matching accounts of ``name``."""
        prefix = self.discriminator(name) + bytes(append_data or b"")
        return {"offset": 0, "bytes": to_base64(prefix)}

    def size(self, name: str) -> int:
        """Bytes to allocate for an account, discriminator included.

        Variable-length layouts report ``variable_account_size`` unless their
        minimum encoding is larger.
        """
        layout = self.codec.type_table.layout(self.entry(name).type)
        if layout.is_fixed_size:
            return DISCRIMINATOR_SIZE + layout.min_size
        return DISCRIMINATOR_SIZE + max(self.variable_account_size, layout.min_size)


def _account_type(account, type_table: TypeTable):
    if account.type is not None:
        return account.type
    if account.name in type_table:
        return type_table.get(account.name)
    raise SchemaError(f"Account {account.name} has no type definition")
