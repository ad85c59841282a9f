"""Tests for configuration settings."""

import pickle

import pytest
from pydantic import ValidationError

from clonekit import CloningSettings, get_settings, reset_settings


class TestCloningSettings:
    def test_defaults(self) -> None:
        settings = CloningSettings()
        assert settings.default_backend == "compiled"
        assert settings.pickle_protocol == pickle.HIGHEST_PROTOCOL
        assert settings.log_generated_source is False
        assert settings.check_assignment_types is True

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("CLONEKIT_DEFAULT_BACKEND", "reflection")
        monkeypatch.setenv("CLONEKIT_PICKLE_PROTOCOL", "3")
        settings = CloningSettings()
        assert settings.default_backend == "reflection"
        assert settings.pickle_protocol == 3

    def test_explicit_values(self) -> None:
        settings = CloningSettings(default_backend="serialization")
        assert settings.default_backend == "serialization"

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CloningSettings(default_backend="magic")

    @pytest.mark.parametrize("protocol", [0, 1, pickle.HIGHEST_PROTOCOL + 1])
    def test_protocol_range(self, protocol: int) -> None:
        with pytest.raises(ValidationError):
            CloningSettings(pickle_protocol=protocol)


class TestCachedSettings:
    def test_cached_until_reset(self, monkeypatch) -> None:
        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("CLONEKIT_DEFAULT_BACKEND", "reflection")
        assert get_settings().default_backend == first.default_backend

        reset_settings()
        assert get_settings() is not first
        assert get_settings().default_backend == "reflection"
