"""Validate a value against an ability's input or output schema.

``validate_value_from_schema`` returns ``True`` or a single sentence
describing the most relevant violation.  It is deliberately permissive
about the schema itself:

- a schema that is not a mapping is treated as valid (warning logged);
- a schema without ``type``, ``anyOf`` or ``oneOf`` is treated as valid
  (warning logged);
- a schema the engine cannot compile yields a generic message instead of
  raising.

When the value is ``UNSET`` the schema's own ``default`` is validated in
its place.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Mapping
from typing import Any, Final, Literal

from abilities.schema.adapter import Draft4SchemaEngine, SchemaEngine
from abilities.schema.formatter import format_error

log = logging.getLogger(__name__)

INVALID_SCHEMA_MESSAGE: Final = "Invalid schema provided for validation."

_UNION_KEYWORDS: frozenset[str] = frozenset({"anyOf", "oneOf"})


class _Unset:
    """Marker for a value that was not supplied at all."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


def _json_type_name(value: Any) -> str:
    if value is UNSET:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


_default_engine: Draft4SchemaEngine | None = None
_engine_lock = threading.Lock()


def default_engine() -> Draft4SchemaEngine:
    """Return the lazily created process-wide draft-04 engine."""
    global _default_engine
    with _engine_lock:
        if _default_engine is None:
            _default_engine = Draft4SchemaEngine()
        return _default_engine


def validate_value_from_schema(
    value: Any,
    schema: Any,
    param: str = "",
    *,
    engine: SchemaEngine | None = None,
) -> Literal[True] | str:
    """Validate *value* against *schema*.

    Parameters
    ----------
    value:
        The value to check, or ``UNSET`` to check the schema ``default``.
    schema:
        A JSON-Schema draft-04 compatible mapping.
    param:
        Name used as the subject of the error sentence
        (``"input"``/``"output"``).
    engine:
        Schema engine to compile with; defaults to ``default_engine()``.

    Returns
    -------
    True | str
        ``True`` when valid, otherwise one formatted sentence.
    """
    if not isinstance(schema, Mapping):
        log.warning("Schema must be an object. Received %s.", _json_type_name(schema))
        return True

    if not schema.get("type") and not schema.get("anyOf") and not schema.get("oneOf"):
        log.warning('The "type" schema keyword for %s is required.', param or "value")
        return True

    engine = engine or default_engine()
    schema_without_default = {k: v for k, v in schema.items() if k != "default"}
    # the default is validated on a copy so filling never touches the schema
    subject = copy.deepcopy(schema.get("default")) if value is UNSET else value

    try:
        result = engine.compile(schema_without_default).validate(subject)
    except Exception:
        log.error("Schema compilation error", exc_info=True)
        return INVALID_SCHEMA_MESSAGE

    if result.valid:
        return True

    if result.errors:
        union_error = next((e for e in result.errors if e.keyword in _UNION_KEYWORDS), None)
        return format_error(union_error or result.errors[0], param)

    return f"{param} is invalid."
