"""Ability and category records.

An ability is stored as one of two variants of a tagged union:

- ``ClientAbility``: holds an invocable ``callback`` and executes in
  process.
- ``ServerAbility``: carries no callback; it is executed by the server
  transport and this package only reports it as missing a callback.

Records are built from loose payloads (client register calls or server
hydration) by ``sanitize_ability`` / ``sanitize_category``, which keep
allow-listed keys with defined values only.  Every stored record has the
same shape regardless of where its payload came from.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar

# ── Constants ────────────────────────────────────────────

ABILITY_NAME_PATTERN: re.Pattern[str] = re.compile(r"^[a-z0-9-]+/[a-z0-9-]+$")
CATEGORY_SLUG_PATTERN: re.Pattern[str] = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

ABILITY_KEYS: tuple[str, ...] = (
    "name",
    "label",
    "description",
    "category",
    "input_schema",
    "output_schema",
    "meta",
    "callback",
    "permission_callback",
)
CATEGORY_KEYS: tuple[str, ...] = ("slug", "label", "description", "meta")

ABILITY_ANNOTATION_KEYS: tuple[str, ...] = (
    "readonly",
    "destructive",
    "idempotent",
    "serverRegistered",
    "clientRegistered",
)
CATEGORY_ANNOTATION_KEYS: tuple[str, ...] = ("serverRegistered", "clientRegistered")


class AbilityKind(str, Enum):  # noqa: UP042
    """Execution variant of a stored ability."""

    CLIENT = "client"
    SERVER = "server"


# ── Records ──────────────────────────────────────────────


def _defined_fields(record: Any) -> dict[str, Any]:
    return {
        f.name: getattr(record, f.name)
        for f in fields(record)
        if getattr(record, f.name) is not None
    }


@dataclass(slots=True, frozen=True)
class Ability:
    """Common fields of both ability variants.

    Attributes
    ----------
    name : str
        ``namespace/identifier``, unique across the registry.
    label : str
        Human-readable title.
    description : str
        What the ability does.
    category : str
        Slug of an already registered ``AbilityCategory``.
    input_schema, output_schema : dict | None
        JSON-Schema (draft-04 compatible) contracts.
    meta : dict | None
        ``{"annotations": {...}}`` with allow-listed boolean flags.
    permission_callback : Callable | None
        Optional predicate, sync or async, gating execution.
    """

    name: str
    label: str
    description: str
    category: str
    input_schema: Any = None
    output_schema: Any = None
    meta: Mapping[str, Any] | None = None
    permission_callback: Callable[[Any], Any] | None = None

    kind: ClassVar[AbilityKind]

    @property
    def annotations(self) -> dict[str, bool]:
        if not self.meta:
            return {}
        return dict(self.meta.get("annotations") or {})

    def to_dict(self) -> dict[str, Any]:
        """Return the record as a dict holding defined fields only."""
        return _defined_fields(self)


@dataclass(slots=True, frozen=True)
class ClientAbility(Ability):
    """Ability executed in process through its ``callback``."""

    callback: Callable[[Any], Any] = field(kw_only=True)

    kind: ClassVar[AbilityKind] = AbilityKind.CLIENT


@dataclass(slots=True, frozen=True)
class ServerAbility(Ability):
    """Ability known to the registry but executed by the server."""

    kind: ClassVar[AbilityKind] = AbilityKind.SERVER


@dataclass(slots=True, frozen=True)
class AbilityCategory:
    """Grouping slug every ability must reference."""

    slug: str
    label: str
    description: str
    meta: Mapping[str, Any] | None = None

    @property
    def annotations(self) -> dict[str, bool]:
        if not self.meta:
            return {}
        return dict(self.meta.get("annotations") or {})

    def to_dict(self) -> dict[str, Any]:
        """Return the record as a dict holding defined fields only."""
        return _defined_fields(self)


# ── Sanitizers ───────────────────────────────────────────


def _allowed(payload: Mapping[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    return {k: payload[k] for k in keys if payload.get(k) is not None}


def sanitize_ability(payload: Mapping[str, Any] | Ability) -> Ability:
    """Build an ability record from *payload*, dropping unknown keys.

    A payload with a callback becomes a ``ClientAbility``; one without
    becomes a ``ServerAbility``.
    """
    if isinstance(payload, Ability):
        payload = payload.to_dict()
    data = _allowed(payload, ABILITY_KEYS)
    callback = data.pop("callback", None)
    if callback is not None:
        return ClientAbility(**data, callback=callback)
    return ServerAbility(**data)


def sanitize_category(payload: Mapping[str, Any] | AbilityCategory) -> AbilityCategory:
    """Build a category record from *payload*, dropping unknown keys."""
    if isinstance(payload, AbilityCategory):
        payload = payload.to_dict()
    return AbilityCategory(**_allowed(payload, CATEGORY_KEYS))


def filter_annotations(
    source: Any,
    allowed_keys: tuple[str, ...],
) -> dict[str, Any]:
    """Keep allow-listed annotation keys whose value is defined.

    Anything other than a mapping carries no usable annotations.
    """
    if not isinstance(source, Mapping):
        return {}
    return {k: source[k] for k in allowed_keys if source.get(k) is not None}


def stamp_provenance(annotations: dict[str, Any]) -> dict[str, Any]:
    """Mark *annotations* as client registered unless already server registered."""
    if not annotations.get("serverRegistered"):
        annotations["clientRegistered"] = True
    return annotations
