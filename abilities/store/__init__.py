"""The abilities store: two normalized maps behind actions and selectors."""

from __future__ import annotations

from abilities.store import actions, selectors
from abilities.store.constants import STORE_NAME
from abilities.store.engine import DataRegistry, StoreDescriptor, create_selector
from abilities.store.reducer import AbilitiesState, reducer

store = StoreDescriptor(
    name=STORE_NAME,
    reducer=reducer,
    actions={
        "register_ability": actions.register_ability,
        "unregister_ability": actions.unregister_ability,
        "register_ability_category": actions.register_ability_category,
        "unregister_ability_category": actions.unregister_ability_category,
        "hydrate": actions.hydrate,
    },
    selectors={
        "get_abilities": selectors.get_abilities,
        "get_ability": selectors.get_ability,
        "get_ability_categories": selectors.get_ability_categories,
        "get_ability_category": selectors.get_ability_category,
    },
)

__all__ = [
    "STORE_NAME",
    "AbilitiesState",
    "DataRegistry",
    "StoreDescriptor",
    "create_selector",
    "reducer",
    "store",
]
