"""Abilities: a registry of named, self-describing, invocable capabilities.

Public API:
    - AbilitiesContext            : process-scoped registry, store and engine
    - get_abilities / get_ability : read registered abilities
    - get_ability_categories / get_ability_category
    - register_ability / unregister_ability
    - register_ability_category / unregister_ability_category
    - execute_ability             : async, permission- and schema-gated
    - validate_value_from_schema  : schema check returning True or a sentence
    - AbilitiesError              : base exception for blanket catch
    - AbilityRegistrationError    : raised on ability invariant violation
    - CategoryRegistrationError   : raised on category invariant violation
    - AbilityExecutionError       : classified execution failure with ``code``
"""

from __future__ import annotations

from abilities.api import (
    AbilitiesContext,
    execute_ability,
    get_abilities,
    get_ability,
    get_ability_categories,
    get_ability_category,
    get_default_context,
    register_ability,
    register_ability_category,
    reset_default_context,
    unregister_ability,
    unregister_ability_category,
)
from abilities.config import AbilitiesSettings
from abilities.exceptions import (
    AbilitiesError,
    AbilityErrorCode,
    AbilityExecutionError,
    AbilityInvalidInputError,
    AbilityInvalidOutputError,
    AbilityMissingCallbackError,
    AbilityNotFoundError,
    AbilityPermissionDeniedError,
    AbilityRegistrationError,
    CategoryRegistrationError,
    RegistrationError,
)
from abilities.models import (
    Ability,
    AbilityCategory,
    AbilityKind,
    ClientAbility,
    ServerAbility,
)
from abilities.schema import UNSET, validate_value_from_schema

__all__ = [
    "UNSET",
    "AbilitiesContext",
    "AbilitiesError",
    "AbilitiesSettings",
    "Ability",
    "AbilityCategory",
    "AbilityErrorCode",
    "AbilityExecutionError",
    "AbilityInvalidInputError",
    "AbilityInvalidOutputError",
    "AbilityKind",
    "AbilityMissingCallbackError",
    "AbilityNotFoundError",
    "AbilityPermissionDeniedError",
    "AbilityRegistrationError",
    "CategoryRegistrationError",
    "ClientAbility",
    "RegistrationError",
    "ServerAbility",
    "execute_ability",
    "get_abilities",
    "get_ability",
    "get_ability_categories",
    "get_ability_category",
    "get_default_context",
    "register_ability",
    "register_ability_category",
    "reset_default_context",
    "unregister_ability",
    "unregister_ability_category",
    "validate_value_from_schema",
]
