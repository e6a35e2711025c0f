"""Tests for configuration."""

import pytest

from anchor_codec import ArgumentError, CacheConfig, Coder, CoderConfig


class TestCacheConfig:
    def test_default(self):
        config = CacheConfig.default()
        assert config.max_size == 1000
        assert config.enabled
        assert config.max_age_seconds is None

    def test_disabled(self):
        assert not CacheConfig.disabled().enabled

    def test_fluent_setters(self):
        config = CacheConfig.default().with_max_size(10).with_max_age(2.5)
        assert config.max_size == 10
        assert config.max_age_seconds == 2.5

    def test_invalid_size(self):
        with pytest.raises(ArgumentError):
            CacheConfig(max_size=0)
        with pytest.raises(ArgumentError):
            CacheConfig.default().with_max_size(-3)

    def test_invalid_age(self):
        with pytest.raises(ArgumentError):
            CacheConfig(max_age_seconds=0)


class TestCoderConfig:
    def test_default(self):
        config = CoderConfig.default()
        assert config.variable_account_size == 1000
        assert config.discriminator_cache == CacheConfig()

    def test_negative_variable_size(self):
        with pytest.raises(ArgumentError):
            CoderConfig(variable_account_size=-1)
        with pytest.raises(ArgumentError):
            CoderConfig.default().with_variable_account_size(-1)

    def test_cache_config_reaches_coder(self, idl):
        config = CoderConfig.default().with_discriminator_cache(CacheConfig(max_size=1))
        coder = Coder(idl, config)
        assert coder.discriminator_cache.max_size == 1
        assert len(coder.discriminator_cache) == 1

    def test_disabled_cache_still_computes(self, idl):
        coder = Coder(idl, CoderConfig(discriminator_cache=CacheConfig.disabled()))
        assert len(coder.discriminator_cache) == 0
        assert coder.instructions.discriminator("initialize") == bytes(
            [175, 175, 109, 31, 13, 152, 155, 237]
        )
