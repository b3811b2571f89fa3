"""Registration checks for abilities and categories.

The checks are pure: they read the current store through ``select`` and
return the first violated invariant as a ``RegistrationError`` (or
``None``), never mutating anything.  The store's register actions raise
the returned error, so a rejected registration leaves the store exactly
as it was.

Ability checks run in a fixed order and stop at the first failure:

    name present -> name pattern -> label -> description -> category
    present -> category pattern -> category exists -> callback callable
    -> name not already registered
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from abilities.exceptions import AbilityRegistrationError, CategoryRegistrationError
from abilities.models import (
    ABILITY_ANNOTATION_KEYS,
    ABILITY_NAME_PATTERN,
    CATEGORY_ANNOTATION_KEYS,
    CATEGORY_SLUG_PATTERN,
    Ability,
    AbilityCategory,
    filter_annotations,
    stamp_provenance,
)


class RegistrySelect(Protocol):
    """The subset of store selectors the checks depend on."""

    def get_ability(self, name: str) -> Ability | None: ...

    def get_ability_category(self, slug: str) -> AbilityCategory | None: ...


def _as_mapping(ability: Mapping[str, Any] | Ability) -> Mapping[str, Any]:
    if isinstance(ability, Ability):
        return ability.to_dict()
    return ability


# ── Abilities ────────────────────────────────────────────


def check_ability(
    ability: Mapping[str, Any] | Ability,
    select: RegistrySelect,
) -> AbilityRegistrationError | None:
    """Return the first invariant *ability* violates, or ``None``."""
    data = _as_mapping(ability)
    name = data.get("name")

    if not name:
        return AbilityRegistrationError("Ability name is required", field="name")

    if not isinstance(name, str) or not ABILITY_NAME_PATTERN.fullmatch(name):
        return AbilityRegistrationError(
            "Ability name must be a string containing a namespace prefix, "
            'i.e. "my-plugin/my-ability". It can only contain lowercase '
            "alphanumeric characters, dashes and the forward slash.",
            field="name",
            subject=str(name),
        )

    for required in ("label", "description", "category"):
        if not data.get(required):
            return AbilityRegistrationError(
                f'Ability "{name}" must have a {required}',
                field=required,
                subject=name,
            )

    category = data["category"]
    if not isinstance(category, str) or not CATEGORY_SLUG_PATTERN.fullmatch(category):
        return AbilityRegistrationError(
            f'Ability "{name}" has an invalid category. Category must be '
            f'lowercase alphanumeric with dashes only. Got: "{category}"',
            field="category",
            subject=name,
        )

    if select.get_ability_category(category) is None:
        return AbilityRegistrationError(
            f'Ability "{name}" references non-existent category "{category}". '
            "Please register the category first.",
            field="category",
            subject=name,
        )

    callback = data.get("callback")
    if callback is not None and not callable(callback):
        return AbilityRegistrationError(
            f'Ability "{name}" has an invalid callback. Callback must be a function',
            field="callback",
            subject=name,
        )

    if select.get_ability(name) is not None:
        return AbilityRegistrationError(
            f'Ability "{name}" is already registered',
            field="name",
            subject=name,
        )

    return None


def prepare_ability(ability: Mapping[str, Any] | Ability) -> dict[str, Any]:
    """Return the payload to store: annotations filtered, provenance stamped."""
    data = dict(_as_mapping(ability))
    meta = data.get("meta")
    source = meta.get("annotations") if isinstance(meta, Mapping) else None
    annotations = filter_annotations(source, ABILITY_ANNOTATION_KEYS)
    data["meta"] = {"annotations": stamp_provenance(annotations)}
    return data


# ── Categories ───────────────────────────────────────────


def check_category(
    slug: str,
    args: Mapping[str, Any],
    select: RegistrySelect,
) -> CategoryRegistrationError | None:
    """Return the first invariant the category violates, or ``None``."""
    if not slug:
        return CategoryRegistrationError("Category slug is required", field="slug")

    if not isinstance(slug, str) or not CATEGORY_SLUG_PATTERN.fullmatch(slug):
        return CategoryRegistrationError(
            "Category slug must contain only lowercase alphanumeric characters and dashes.",
            field="slug",
            subject=str(slug),
        )

    if select.get_ability_category(slug) is not None:
        return CategoryRegistrationError(
            f'Category "{slug}" is already registered.',
            field="slug",
            subject=slug,
        )

    for required in ("label", "description"):
        value = args.get(required)
        if not value or not isinstance(value, str):
            return CategoryRegistrationError(
                f"The category properties must contain a `{required}` string.",
                field=required,
                subject=slug,
            )

    meta = args.get("meta")
    if meta is not None and not isinstance(meta, Mapping):
        return CategoryRegistrationError(
            "The category properties should provide a valid `meta` object.",
            field="meta",
            subject=slug,
        )

    return None


def prepare_category(slug: str, args: Mapping[str, Any]) -> dict[str, Any]:
    """Return the category payload to store, provenance stamped."""
    meta = args.get("meta") or {}
    annotations = filter_annotations(meta.get("annotations"), CATEGORY_ANNOTATION_KEYS)
    return {
        "slug": slug,
        "label": args["label"],
        "description": args["description"],
        "meta": {"annotations": stamp_provenance(annotations)},
    }
