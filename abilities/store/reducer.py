"""Pure reducers for the abilities store.

State is two independent maps, ``abilities_by_name`` and
``categories_by_slug``.  Maps are never mutated in place: a change
produces a new map, and an action that changes nothing returns the very
same state object so that memoized selectors keep their cached results.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from abilities.models import Ability, AbilityCategory, sanitize_ability, sanitize_category
from abilities.store.constants import (
    REGISTER_ABILITY,
    REGISTER_ABILITY_CATEGORY,
    UNREGISTER_ABILITY,
    UNREGISTER_ABILITY_CATEGORY,
)


@dataclass(slots=True, frozen=True)
class AbilitiesState:
    abilities_by_name: Mapping[str, Ability] = field(default_factory=dict)
    categories_by_slug: Mapping[str, AbilityCategory] = field(default_factory=dict)


def abilities_by_name(
    state: Mapping[str, Ability], action: Mapping[str, Any]
) -> Mapping[str, Ability]:
    """Reducer managing abilities keyed by name."""
    action_type = action.get("type")
    if action_type == REGISTER_ABILITY:
        ability = action.get("ability")
        if not ability:
            return state
        record = sanitize_ability(ability)
        return {**state, record.name: record}
    if action_type == UNREGISTER_ABILITY:
        name = action.get("name")
        if name not in state:
            return state
        return {k: v for k, v in state.items() if k != name}
    return state


def categories_by_slug(
    state: Mapping[str, AbilityCategory], action: Mapping[str, Any]
) -> Mapping[str, AbilityCategory]:
    """Reducer managing categories keyed by slug."""
    action_type = action.get("type")
    if action_type == REGISTER_ABILITY_CATEGORY:
        category = action.get("category")
        if not category:
            return state
        record = sanitize_category(category)
        return {**state, record.slug: record}
    if action_type == UNREGISTER_ABILITY_CATEGORY:
        slug = action.get("slug")
        if slug not in state:
            return state
        return {k: v for k, v in state.items() if k != slug}
    return state


def reducer(state: AbilitiesState | None, action: Mapping[str, Any]) -> AbilitiesState:
    """Combine both map reducers, preserving identity when nothing changes."""
    if state is None:
        state = AbilitiesState()
    abilities = abilities_by_name(state.abilities_by_name, action)
    categories = categories_by_slug(state.categories_by_slug, action)
    if abilities is state.abilities_by_name and categories is state.categories_by_slug:
        return state
    return AbilitiesState(abilities_by_name=abilities, categories_by_slug=categories)
