"""Unit tests for AbilitiesSettings and its effect on AbilitiesContext."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from abilities import AbilitiesContext, AbilitiesSettings
from abilities.schema import Draft4SchemaEngine


class TestSettings:
    def test_defaults(self, settings) -> None:
        assert settings.schema_cache_size == 128
        assert settings.log_level is None
        assert settings.schema_use_defaults is True
        assert "date-time" in settings.schema_formats
        assert "hostname" in settings.schema_formats

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("ABILITIES_SCHEMA_CACHE_SIZE", "0")
        monkeypatch.setenv("ABILITIES_SCHEMA_FORMATS", '["email"]')
        monkeypatch.setenv("ABILITIES_SCHEMA_USE_DEFAULTS", "false")
        monkeypatch.setenv("ABILITIES_LOG_LEVEL", "debug")
        settings = AbilitiesSettings(_env_file=None)
        assert settings.schema_cache_size == 0
        assert settings.schema_formats == ["email"]
        assert settings.log_level == "DEBUG"
        assert settings.schema_use_defaults is False

    def test_negative_cache_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AbilitiesSettings(_env_file=None, schema_cache_size=-1)

    def test_unrelated_env_ignored(self, monkeypatch) -> None:
        monkeypatch.setenv("ABILITIES_SOMETHING_ELSE", "1")
        assert AbilitiesSettings(_env_file=None).schema_cache_size == 128


class TestContextConfiguration:
    def test_engine_built_from_settings(self) -> None:
        ctx = AbilitiesContext(AbilitiesSettings(_env_file=None, schema_formats=["uuid"]))
        assert isinstance(ctx.engine, Draft4SchemaEngine)
        assert ctx.engine.formats == frozenset({"uuid"})
        assert ctx.engine.use_defaults is True

    def test_defaults_disabled_from_settings(self) -> None:
        ctx = AbilitiesContext(AbilitiesSettings(_env_file=None, schema_use_defaults=False))
        assert ctx.engine.use_defaults is False

    def test_log_level_applied(self) -> None:
        logger = logging.getLogger("abilities")
        previous = logger.level
        try:
            AbilitiesContext(AbilitiesSettings(_env_file=None, log_level="warning"))
            assert logger.level == logging.WARNING
        finally:
            logger.setLevel(previous)

    def test_explicit_engine_wins(self, settings) -> None:
        engine = Draft4SchemaEngine(formats=())
        ctx = AbilitiesContext(settings, engine=engine)
        assert ctx.engine is engine
