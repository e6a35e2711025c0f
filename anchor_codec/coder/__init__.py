"""Account, instruction, event and type coders for an IDL."""

import logging
from typing import Optional

from ..borsh.codec import BorshCodec
from ..borsh.layout import TypeTable
from ..config import CoderConfig
from ..discriminator.cache import DiscriminatorCache
from ..idl.schema import Idl
from .accounts import AccountsCoder
from .base import CoderEntry, DiscriminatedCoder
from .events import Event, EventCoder
from .instructions import (
    Instruction,
    InstructionAccount,
    InstructionArg,
    InstructionCoder,
    InstructionDisplay,
    format_value,
)
from .types import TypesCoder

logger = logging.getLogger(__name__)


class Coder:
    """All coders for one IDL, sharing a type table and discriminator cache.

    Example:
        coder = Coder(Idl.from_dict(idl_json))
        data = coder.accounts.encode("Counter", {"count": 1})
        coder.accounts.decode("Counter", data)
    """

    def __init__(self, idl: Idl, config: Optional[CoderConfig] = None):
        if isinstance(idl, dict):
            idl = Idl.from_dict(idl)
        self.idl = idl
        self.config = config or CoderConfig.default()
        self.discriminator_cache = DiscriminatorCache.from_config(self.config.discriminator_cache)
        self.type_table = TypeTable.from_idl(idl)
        self.codec = BorshCodec(self.type_table)

        self.accounts = AccountsCoder(
            idl,
            self.codec,
            self.discriminator_cache,
            variable_account_size=self.config.variable_account_size,
        )
        self.instructions = InstructionCoder(idl, self.codec, self.discriminator_cache)
        self.events = EventCoder(idl, self.codec, self.discriminator_cache)
        self.types = TypesCoder(self.codec)
        logger.debug(
            f"Coder ready for {idl.name or '<unnamed>'}: {len(self.accounts)} accounts, "
            f"{len(self.instructions)} instructions, {len(self.events)} events, "
            f"{len(self.type_table)} types"
        )


__all__ = [
    "AccountsCoder",
    "Coder",
    "CoderEntry",
    "DiscriminatedCoder",
    "Event",
    "EventCoder",
    "Instruction",
    "InstructionAccount",
    "InstructionArg",
    "InstructionCoder",
    "InstructionDisplay",
    "TypesCoder",
    "format_value",
]
