"""Action creators for the abilities store.

``register_ability`` and ``register_ability_category`` return thunks:
they run the registration checks against the live store and raise the
first violation before anything is dispatched.  The unregister creators
return plain actions; removing an unknown key is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from abilities.models import (
    ABILITY_ANNOTATION_KEYS,
    CATEGORY_ANNOTATION_KEYS,
    Ability,
    AbilityCategory,
    filter_annotations,
    sanitize_ability,
    sanitize_category,
)
from abilities.registration import (
    check_ability,
    check_category,
    prepare_ability,
    prepare_category,
)
from abilities.store.constants import (
    REGISTER_ABILITY,
    REGISTER_ABILITY_CATEGORY,
    UNREGISTER_ABILITY,
    UNREGISTER_ABILITY_CATEGORY,
)

log = logging.getLogger(__name__)

Thunk = Callable[..., Any]


def register_ability(ability: Mapping[str, Any] | Ability) -> Thunk:
    """Validate and register a client ability.

    Raises
    ------
    AbilityRegistrationError
        On the first violated invariant; the store is left untouched.
    """

    def thunk(*, select: Any, dispatch: Callable[[Any], Any]) -> None:
        error = check_ability(ability, select)
        if error is not None:
            raise error
        payload = prepare_ability(ability)
        dispatch({"type": REGISTER_ABILITY, "ability": payload})
        log.debug("registered ability %r", payload["name"])

    return thunk


def unregister_ability(name: str) -> dict[str, Any]:
    return {"type": UNREGISTER_ABILITY, "name": name}


def register_ability_category(slug: str, args: Mapping[str, Any]) -> Thunk:
    """Validate and register a client category.

    Raises
    ------
    CategoryRegistrationError
        On the first violated invariant; the store is left untouched.
    """

    def thunk(*, select: Any, dispatch: Callable[[Any], Any]) -> None:
        error = check_category(slug, args, select)
        if error is not None:
            raise error
        dispatch({"type": REGISTER_ABILITY_CATEGORY, "category": prepare_category(slug, args)})
        log.debug("registered ability category %r", slug)

    return thunk


def unregister_ability_category(slug: str) -> dict[str, Any]:
    return {"type": UNREGISTER_ABILITY_CATEGORY, "slug": slug}


def _server_payload(
    record: Mapping[str, Any] | Ability | AbilityCategory,
    allowed_keys: tuple[str, ...],
) -> dict[str, Any]:
    data = dict(record.to_dict()) if isinstance(record, (Ability, AbilityCategory)) else dict(record)
    meta = data.get("meta")
    source = meta.get("annotations") if isinstance(meta, Mapping) else None
    annotations = filter_annotations(source, allowed_keys)
    annotations["serverRegistered"] = True
    data["meta"] = {"annotations": annotations}
    return data


def _build_server_records(
    records: Iterable[Any],
    allowed_keys: tuple[str, ...],
    build: Callable[[Any], Any],
    kind: str,
) -> list[Any]:
    built = []
    for index, record in enumerate(records):
        try:
            built.append(build(_server_payload(record, allowed_keys)))
        except (TypeError, ValueError) as exc:
            log.warning("skipping malformed server %s at index %d: %s", kind, index, exc)
    return built


def hydrate(
    categories: Iterable[Mapping[str, Any] | AbilityCategory] = (),
    abilities: Iterable[Mapping[str, Any] | Ability] = (),
) -> Thunk:
    """Bulk-load records received from the server registry.

    Server records were validated server-side, so the registration checks
    are skipped; the reducer allow-list still sanitizes every record.
    A record that cannot be built (not a mapping, or missing a field) is
    logged and skipped, and nothing is dispatched for it.
    Categories are loaded before abilities.
    """

    def thunk(*, select: Any, dispatch: Callable[[Any], Any]) -> None:
        category_records = _build_server_records(
            categories, CATEGORY_ANNOTATION_KEYS, sanitize_category, "category"
        )
        ability_records = _build_server_records(
            abilities, ABILITY_ANNOTATION_KEYS, sanitize_ability, "ability"
        )
        for category in category_records:
            dispatch({"type": REGISTER_ABILITY_CATEGORY, "category": category})
        for ability in ability_records:
            dispatch({"type": REGISTER_ABILITY, "ability": ability})
        log.debug(
            "hydrated %d server categories and %d server abilities",
            len(category_records),
            len(ability_records),
        )

    return thunk
