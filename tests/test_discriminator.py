"""Tests for discriminator computation."""

import pytest

from anchor_codec import (
    ArgumentError,
    DiscriminatorCache,
    account_discriminator,
    cached_discriminator,
    compute_discriminator,
    discriminator_from_hex,
    discriminator_to_hex,
    event_discriminator,
    instruction_discriminator,
    validate_discriminator_size,
)
from anchor_codec.discriminator import sha256


class TestKnownVectors:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Data", [206, 156, 59, 188, 18, 79, 240, 232]),
            ("MyAccount", [246, 28, 6, 87, 251, 45, 50, 42]),
            ("user_account", [29, 97, 193, 1, 201, 100, 155, 56]),
            ("Account123", [11, 24, 61, 39, 152, 17, 56, 39]),
        ],
    )
    def test_account(self, name, expected):
        assert account_discriminator(name) == bytes(expected)

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("initialize", [175, 175, 109, 31, 13, 152, 155, 237]),
            ("transfer", [163, 52, 200, 231, 140, 3, 69, 186]),
        ],
    )
    def test_instruction(self, name, expected):
        assert instruction_discriminator(name) == bytes(expected)

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Transfer", [25, 18, 23, 7, 172, 116, 130, 28]),
            ("MyEvent", [96, 184, 197, 243, 139, 2, 90, 148]),
        ],
    )
    def test_event(self, name, expected):
        assert event_discriminator(name) == bytes(expected)


class TestComputeDiscriminator:
    def test_is_sha256_prefix(self):
        assert compute_discriminator("account", "Data") == sha256(b"account:Data")[:8]

    def test_namespaces_differ(self):
        assert compute_discriminator("account", "Transfer") != event_discriminator("Transfer")
        assert compute_discriminator("global", "initialize") == instruction_discriminator("initialize")

    def test_deterministic(self):
        assert account_discriminator("Vault") == account_discriminator("Vault")

    def test_case_sensitive(self):
        assert account_discriminator("data") != account_discriminator("Data")

    def test_whitespace_sensitive(self):
        assert account_discriminator("Data ") != account_discriminator("Data")

    def test_always_eight_bytes(self):
        assert len(instruction_discriminator("a" * 500)) == 8

    def test_empty_name(self):
        with pytest.raises(ArgumentError):
            account_discriminator("")


class TestCachedDiscriminator:
    def test_without_cache(self):
        assert cached_discriminator("account", "Data") == account_discriminator("Data")

    def test_fills_cache(self):
        cache = DiscriminatorCache()
        first = cached_discriminator("account", "Data", cache)
        assert cache.get(DiscriminatorCache.account_key("Data")) == first
        assert cached_discriminator("account", "Data", cache) == first
        assert cache.hits == 2
        assert cache.misses == 1


class TestHexHelpers:
    def test_round_trip(self):
        disc = instruction_discriminator("initialize")
        assert discriminator_to_hex(disc) == "afaf6d1f0d989bed"
        assert discriminator_from_hex("afaf6d1f0d989bed") == disc
        assert discriminator_from_hex("0xafaf6d1f0d989bed") == disc

    def test_wrong_length(self):
        with pytest.raises(ArgumentError):
            discriminator_from_hex("afaf")

    def test_not_hex(self):
        with pytest.raises(ArgumentError):
            discriminator_from_hex("zzzzzzzzzzzzzzzz")

    def test_validate_size(self):
        validate_discriminator_size(bytes(8))
        with pytest.raises(ArgumentError):
            validate_discriminator_size(bytes(7))
