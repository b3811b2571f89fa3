"""JSON-Schema validation for ability input and output."""

from __future__ import annotations

from abilities.schema.adapter import (
    CompiledSchema,
    Draft4SchemaEngine,
    SchemaEngine,
    SchemaViolation,
    ValidationResult,
)
from abilities.schema.formatter import bracket_path, format_error
from abilities.schema.validator import (
    INVALID_SCHEMA_MESSAGE,
    UNSET,
    default_engine,
    validate_value_from_schema,
)

__all__ = [
    "INVALID_SCHEMA_MESSAGE",
    "UNSET",
    "CompiledSchema",
    "Draft4SchemaEngine",
    "SchemaEngine",
    "SchemaViolation",
    "ValidationResult",
    "bracket_path",
    "default_engine",
    "format_error",
    "validate_value_from_schema",
]
