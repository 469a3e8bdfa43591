"""Tests for MLS core settings."""

import pytest

from our_mls.config import MLSSettings, clear_config_cache, get_config, set_config
from our_mls.keys import Identity


class TestMLSSettings:
    """Environment loading and injection."""

    def test_defaults(self, clean_env):
        settings = get_config()
        assert settings.identity_id_size == 4
        assert settings.strict_decoding is True

    def test_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("OUR_MLS_IDENTITY_ID_SIZE", "12")
        monkeypatch.setenv("OUR_MLS_STRICT_DECODING", "no")
        settings = MLSSettings.from_env()
        assert settings.identity_id_size == 12
        assert settings.strict_decoding is False

    def test_cached_until_cleared(self, clean_env, monkeypatch):
        first = get_config()
        monkeypatch.setenv("OUR_MLS_IDENTITY_ID_SIZE", "6")
        assert get_config() is first
        clear_config_cache()
        assert get_config().identity_id_size == 6

    def test_injected_settings_win(self, clean_env, monkeypatch):
        monkeypatch.setenv("OUR_MLS_IDENTITY_ID_SIZE", "6")
        set_config(MLSSettings(identity_id_size=2))
        assert len(Identity.random().id) == 2

    def test_id_size_must_fit_u8(self):
        with pytest.raises(ValueError):
            MLSSettings(identity_id_size=256)
