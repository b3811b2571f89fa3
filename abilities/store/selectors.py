"""Selectors for the abilities store.

List selectors are memoized on the identity of the map they read, so two
calls against an unchanged state return the same list object.
"""

from __future__ import annotations

from abilities.models import Ability, AbilityCategory
from abilities.store.engine import create_selector
from abilities.store.reducer import AbilitiesState


def _get_abilities(state: AbilitiesState, category: str | None = None) -> list[Ability]:
    abilities = list(state.abilities_by_name.values())
    if category:
        return [a for a in abilities if a.category == category]
    return abilities


get_abilities = create_selector(
    _get_abilities,
    lambda state, category=None: (state.abilities_by_name,),
)
"""Return registered abilities, optionally only those in *category*."""


def get_ability(state: AbilitiesState, name: str) -> Ability | None:
    """Return the ability registered as *name*, or ``None``."""
    return state.abilities_by_name.get(name)


def _get_ability_categories(state: AbilitiesState) -> list[AbilityCategory]:
    return list(state.categories_by_slug.values())


get_ability_categories = create_selector(
    _get_ability_categories,
    lambda state: (state.categories_by_slug,),
)
"""Return every registered category."""


def get_ability_category(state: AbilitiesState, slug: str) -> AbilityCategory | None:
    """Return the category registered as *slug*, or ``None``."""
    return state.categories_by_slug.get(slug)
