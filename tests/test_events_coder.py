"""Tests for the event and types coders."""

import pytest
from solders.pubkey import Pubkey

from anchor_codec import (
    Coder,
    DidNotDeserializeError,
    Event,
    Idl,
    UnknownNameError,
)
from anchor_codec.utils import to_base64

TRANSFER_DISCRIMINATOR = bytes([25, 18, 23, 7, 172, 116, 130, 28])


@pytest.fixture
def transfer():
    return {"from": Pubkey.new_unique(), "to": Pubkey.new_unique(), "amount": 500}


class TestEventCoder:
    def test_discriminator(self, coder):
        assert coder.events.discriminator("Transfer") == TRANSFER_DISCRIMINATOR

    def test_encode(self, coder, transfer):
        data = coder.events.encode("Transfer", transfer)
        assert data[:8] == TRANSFER_DISCRIMINATOR
        assert data[8:40] == bytes(transfer["from"])
        assert len(data) == 8 + 32 + 32 + 8

    def test_round_trip(self, coder, transfer):
        data = coder.events.encode("Transfer", transfer)
        assert coder.events.decode("Transfer", data) == transfer
        assert coder.events.decode_any(data) == transfer

    def test_decode_log(self, coder, transfer):
        log = to_base64(coder.events.encode("Transfer", transfer))
        assert coder.events.decode_log(log) == Event(name="Transfer", data=transfer)

    def test_decode_log_invalid_base64(self, coder):
        assert coder.events.decode_log("not base64!!") is None

    def test_decode_log_unknown_event(self, coder):
        assert coder.events.decode_log(to_base64(bytes(80))) is None

    def test_decode_log_truncated(self, coder):
        assert coder.events.decode_log(to_base64(TRANSFER_DISCRIMINATOR + bytes(4))) is None

    def test_legacy_inline_fields(self):
        coder = Coder(
            Idl.from_dict(
                {
                    "name": "legacy",
                    "version": "0.1.0",
                    "instructions": [],
                    "events": [
                        {"name": "Ticked", "fields": [{"name": "count", "type": "u32", "index": False}]}
                    ],
                }
            )
        )
        data = coder.events.encode("Ticked", {"count": 3})
        assert coder.events.decode_log(to_base64(data)) == Event(name="Ticked", data={"count": 3})


class TestTypesCoder:
    def test_encode_decode(self, coder):
        data = coder.types.encode("Point", {"x": -1, "y": 2})
        assert data == b"\xff\xff\xff\xff\x02\x00\x00\x00"
        assert coder.types.decode("Point", data) == {"x": -1, "y": 2}

    def test_enum(self, coder):
        data = coder.types.encode("Shape", {"Circle": {"radius": 1}})
        assert coder.types.decode("Shape", data) == {"Circle": {"radius": 1}}

    def test_size(self, coder):
        assert coder.types.size("Point") == 8
        assert coder.types.size("Data") is None

    def test_unknown_type(self, coder):
        with pytest.raises(UnknownNameError):
            coder.types.encode("Nope", {})
        with pytest.raises(UnknownNameError):
            coder.types.size("Nope")

    def test_structural_failure(self, coder):
        with pytest.raises(DidNotDeserializeError) as exc_info:
            coder.types.decode("Point", b"\x01\x02")
        assert exc_info.value.type_name == "Point"
        assert exc_info.value.data_size == 2


class TestCoder:
    def test_accepts_dict(self, idl_dict):
        coder = Coder(idl_dict)
        assert coder.idl.name == "sample_program"

    def test_shared_discriminator_cache(self, coder):
        cache = coder.discriminator_cache
        assert cache.contains("global:initialize")
        assert cache.contains("global:set_active")
        assert cache.contains("event:Transfer")
        # Explicit discriminators are never computed
        assert not cache.contains("account:Data")
