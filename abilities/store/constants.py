"""Action types and store name for the abilities store."""

from __future__ import annotations

STORE_NAME = "core/abilities"

REGISTER_ABILITY = "REGISTER_ABILITY"
UNREGISTER_ABILITY = "UNREGISTER_ABILITY"
REGISTER_ABILITY_CATEGORY = "REGISTER_ABILITY_CATEGORY"
UNREGISTER_ABILITY_CATEGORY = "UNREGISTER_ABILITY_CATEGORY"
