"""Environment-driven settings for the abilities registry."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings

from abilities.schema.adapter import DEFAULT_CACHE_SIZE, DEFAULT_FORMATS


class AbilitiesSettings(BaseSettings):
    """Abilities settings, read from ``ABILITIES_*`` variables.

    ``schema_formats`` are the ``format`` values the validator asserts.
    ``schema_cache_size`` bounds the compiled-schema cache (0 disables it).
    ``schema_use_defaults`` fills missing object properties from their
    schema ``default`` while validating.
    ``log_level``, when set, is applied to the ``abilities`` logger.
    """

    schema_formats: list[str] = list(DEFAULT_FORMATS)
    schema_cache_size: int = DEFAULT_CACHE_SIZE
    schema_use_defaults: bool = True
    log_level: str | None = None

    model_config = {"env_prefix": "ABILITIES_", "env_file": ".env", "extra": "ignore"}

    @field_validator("schema_cache_size")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("schema_cache_size must be >= 0")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str | None) -> str | None:
        return value.upper() if value else None
