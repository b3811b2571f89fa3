"""Shared test fixtures for the abilities registry."""

from __future__ import annotations

import pytest

from abilities import AbilitiesContext, AbilitiesSettings, reset_default_context


@pytest.fixture(autouse=True)
def clean_default_context(monkeypatch):
    """Isolate every test from the process-wide context and ABILITIES_* env."""
    for var in (
        "ABILITIES_SCHEMA_FORMATS",
        "ABILITIES_SCHEMA_CACHE_SIZE",
        "ABILITIES_SCHEMA_USE_DEFAULTS",
        "ABILITIES_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_default_context()
    yield
    reset_default_context()


@pytest.fixture
def settings() -> AbilitiesSettings:
    """Settings that ignore any .env file in the working directory."""
    return AbilitiesSettings(_env_file=None)


@pytest.fixture
def ctx(settings) -> AbilitiesContext:
    """A fresh context with its own store and schema engine."""
    return AbilitiesContext(settings)


@pytest.fixture
def nav_ctx(ctx) -> AbilitiesContext:
    """Context with the ``nav`` category already registered."""
    ctx.register_ability_category(
        "nav", {"label": "Navigation", "description": "Navigation abilities"}
    )
    return ctx


def _ability_payload(name: str = "my-plugin/go", **overrides):
    payload = {
        "name": name,
        "label": "Go",
        "description": "Navigate to a URL",
        "category": "nav",
        "callback": lambda input_data: input_data,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_ability():
    """Factory for valid ability payloads in the ``nav`` category."""
    return _ability_payload
