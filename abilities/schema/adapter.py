"""Schema engine interface and its draft-04 adapter over ``jsonschema``.

Anything that validates against an ability schema goes through two small
protocols::

    compiled = engine.compile(schema)          # may raise on a bad schema
    result = compiled.validate(value)          # ValidationResult(valid, errors)

Each error is a ``SchemaViolation`` carrying the failing ``keyword``, a
JSON Pointer ``instance_path`` and keyword ``params``.  The formatter
depends on that shape only, so any draft-04 capable library can stand in
for ``Draft4SchemaEngine``.

Errors are reported in the order a flat, all-errors engine would report
them: the branch errors of an ``anyOf``/``oneOf`` come first, followed by
the union failure itself.
"""

from __future__ import annotations

import copy
import json
import logging
import re
import threading
from collections import OrderedDict
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from jsonschema import Draft4Validator, FormatChecker, validators
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

log = logging.getLogger(__name__)

DEFAULT_FORMATS: tuple[str, ...] = ("date-time", "email", "hostname", "ipv4", "ipv6", "uuid")
DEFAULT_CACHE_SIZE: int = 128

_LIMIT_KEYWORDS: frozenset[str] = frozenset(
    {
        "minLength",
        "maxLength",
        "minItems",
        "maxItems",
        "minProperties",
        "maxProperties",
    }
)


# ── Interface ────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class SchemaViolation:
    """One structured validation error."""

    keyword: str
    instance_path: str = ""
    params: Mapping[str, Any] = field(default_factory=dict)
    message: str = ""


@dataclass(slots=True, frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[SchemaViolation, ...] = ()


class CompiledSchema(Protocol):
    def validate(self, value: Any) -> ValidationResult: ...


class SchemaEngine(Protocol):
    def compile(self, schema: Mapping[str, Any]) -> CompiledSchema: ...


# ── Draft-04 adapter ─────────────────────────────────────


def _pointer(path: Iterable[Any]) -> str:
    return "".join(
        "/" + str(part).replace("~", "~0").replace("/", "~1") for part in path
    )


def _additional_properties(instance: Mapping[str, Any], schema: Mapping[str, Any]) -> list[str]:
    properties = schema.get("properties") or {}
    patterns = list((schema.get("patternProperties") or {}).keys())
    return [
        key
        for key in instance
        if key not in properties and not any(re.search(p, key) for p in patterns)
    ]


class _Draft4Compiled:
    """A compiled draft-04 schema."""

    __slots__ = ("_validator",)

    def __init__(self, validator: Draft4Validator) -> None:
        self._validator = validator

    def validate(self, value: Any) -> ValidationResult:
        violations: list[SchemaViolation] = []
        required_seen: dict[tuple[Any, ...], int] = {}
        for error in self._validator.iter_errors(value):
            for flat in _flatten(error):
                violations.extend(_convert(flat, required_seen))
        return ValidationResult(valid=not violations, errors=tuple(violations))


def _flatten(error: JsonSchemaValidationError) -> Iterator[JsonSchemaValidationError]:
    if error.validator in ("anyOf", "oneOf"):
        for sub in error.context or ():
            yield from _flatten(sub)
    yield error


def _convert(
    error: JsonSchemaValidationError,
    required_seen: dict[tuple[Any, ...], int],
) -> list[SchemaViolation]:
    keyword = str(error.validator)
    value = error.validator_value
    path = _pointer(error.absolute_path)
    schema = error.schema if isinstance(error.schema, Mapping) else {}
    params: dict[str, Any]

    if keyword == "required":
        # one error per missing property, in the order of the required list
        missing = [p for p in value if p not in error.instance]
        key = (path, tuple(error.absolute_schema_path))
        index = required_seen.get(key, 0)
        required_seen[key] = index + 1
        prop = missing[index] if index < len(missing) else (missing[0] if missing else "")
        params = {"missingProperty": prop}
    elif keyword == "additionalProperties":
        extras = _additional_properties(error.instance, schema)
        return [
            SchemaViolation(keyword, path, {"additionalProperty": extra}, error.message)
            for extra in extras
        ] or [SchemaViolation(keyword, path, {}, error.message)]
    elif keyword == "type":
        params = {"type": ",".join(value) if isinstance(value, list) else value}
    elif keyword == "enum":
        params = {"allowedValues": list(value)}
    elif keyword in ("pattern", "format", "multipleOf"):
        params = {keyword: value}
    elif keyword in ("minimum", "maximum"):
        exclusive = "exclusiveMinimum" if keyword == "minimum" else "exclusiveMaximum"
        if schema.get(exclusive) is True:
            keyword = exclusive
        params = {"limit": value}
    elif keyword in _LIMIT_KEYWORDS:
        params = {"limit": value}
    else:
        params = {}

    return [SchemaViolation(keyword, path, params, error.message)]


# ── Default filling ──────────────────────────────────────


def _fill_defaults(instance: Any, schema: Mapping[str, Any]) -> None:
    if not isinstance(instance, MutableMapping):
        return
    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return
    for name, subschema in properties.items():
        if isinstance(subschema, Mapping) and "default" in subschema:
            instance.setdefault(name, copy.deepcopy(subschema["default"]))


def _extend_with_defaults(validator_class: Any) -> Any:
    """Return *validator_class* filling in ``properties`` defaults as it validates.

    Missing properties are set on the instance itself, before either
    ``properties`` or ``required`` is checked against it.
    """
    validate_properties = validator_class.VALIDATORS["properties"]
    validate_required = validator_class.VALIDATORS["required"]

    def properties(validator, value, instance, schema):
        _fill_defaults(instance, schema)
        yield from validate_properties(validator, value, instance, schema)

    def required(validator, value, instance, schema):
        _fill_defaults(instance, schema)
        yield from validate_required(validator, value, instance, schema)

    return validators.extend(validator_class, {"properties": properties, "required": required})


Draft4DefaultsValidator = _extend_with_defaults(Draft4Validator)


class Draft4SchemaEngine:
    """Compiles schemas with ``jsonschema.Draft4Validator``.

    No type coercion, no stripping of additional properties.  Only the
    configured *formats* are asserted; other ``format`` values pass.
    Compiled schemas are memoized (LRU, keyed by canonical JSON) up to
    *cache_size* entries; ``0`` disables the cache.

    With *use_defaults* a mapping instance missing a property whose
    subschema declares a ``default`` gets a copy of that default set in
    place while it is validated.
    """

    def __init__(
        self,
        formats: Iterable[str] = DEFAULT_FORMATS,
        cache_size: int = DEFAULT_CACHE_SIZE,
        use_defaults: bool = True,
    ) -> None:
        self._validator_class = Draft4DefaultsValidator if use_defaults else Draft4Validator
        self._format_checker = FormatChecker(formats=list(formats))
        self._cache_size = cache_size
        self._cache: OrderedDict[str, _Draft4Compiled] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def formats(self) -> frozenset[str]:
        return frozenset(self._format_checker.checkers)

    @property
    def use_defaults(self) -> bool:
        return self._validator_class is Draft4DefaultsValidator

    def compile(self, schema: Mapping[str, Any]) -> _Draft4Compiled:
        """Check *schema* against the draft-04 meta-schema and compile it.

        Raises
        ------
        jsonschema.exceptions.SchemaError
            If *schema* is not a valid draft-04 schema.
        """
        key = json.dumps(schema, sort_keys=True, default=repr) if self._cache_size else ""
        if key:
            with self._lock:
                cached = self._cache.get(key)
                if cached is not None:
                    self._cache.move_to_end(key)
                    return cached

        Draft4Validator.check_schema(schema)
        compiled = _Draft4Compiled(
            self._validator_class(schema, format_checker=self._format_checker)
        )

        if key:
            with self._lock:
                self._cache[key] = compiled
                while len(self._cache) > self._cache_size:
                    self._cache.popitem(last=False)
        return compiled

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
