"""Event coder."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..borsh.codec import BorshCodec
from ..constants import EVENT_NAMESPACE
from ..discriminator.cache import DiscriminatorCache
from ..errors import ArgumentError, CoderError, SchemaError
from ..idl.schema import Idl
from ..utils import from_base64
from .base import DiscriminatedCoder


@dataclass
class Event:
    """A decoded program event."""

    name: str
    data: Dict[str, Any]


class EventCoder(DiscriminatedCoder):
    """Encode and decode event payloads emitted in ``Program data:`` logs."""

    kind = "event"
    namespace = EVENT_NAMESPACE

    def __init__(
        self,
        idl: Idl,
        codec: BorshCodec,
        cache: Optional[DiscriminatorCache] = None,
    ):
        super().__init__(
            ((e.name, e.discriminator, _event_type(e, codec.type_table)) for e in idl.events),
            codec,
            cache,
        )

    def decode_log(self, log: str) -> Optional[Event]:
        """Decode a base64 event payload. Returns None if it is not a known event."""
        try:
            data = from_base64(log)
        except ArgumentError:
            return None
        try:
            name, value = self.match(data)
        except CoderError:
            return None
        return Event(name=name, data=value)


def _event_type(event, type_table):
    if event.inline_type is not None:
        return event.inline_type
    if event.name in type_table:
        return type_table.get(event.name)
    raise SchemaError(f"Event {event.name} has no type definition")
