"""Ability execution engine.

``execute_ability`` runs a single attempt, in this order:

    1. look up the ability            -> AbilityNotFoundError
    2. require an in-process callback -> AbilityMissingCallbackError
    3. await permission_callback      -> AbilityPermissionDeniedError
    4. validate input_schema          -> AbilityInvalidInputError
    5. await callback                 (its exceptions propagate unchanged)
    6. validate output_schema         -> AbilityInvalidOutputError
    7. return the result

There are no retries, timeouts or de-duplication.  A caller wanting a
timeout wraps the coroutine in ``asyncio.wait_for``.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Protocol

from abilities.exceptions import (
    AbilityInvalidInputError,
    AbilityInvalidOutputError,
    AbilityMissingCallbackError,
    AbilityNotFoundError,
    AbilityPermissionDeniedError,
)
from abilities.models import Ability, AbilityKind
from abilities.schema.adapter import SchemaEngine
from abilities.schema.validator import UNSET, validate_value_from_schema

log = logging.getLogger(__name__)


class AbilityLookup(Protocol):
    def get_ability(self, name: str) -> Ability | None: ...


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


async def execute_ability(
    select: AbilityLookup,
    name: str,
    input_data: Any = UNSET,
    *,
    engine: SchemaEngine | None = None,
) -> Any:
    """Execute the ability registered as *name* with *input_data*.

    Parameters
    ----------
    select:
        Store selectors used to look the ability up.
    name:
        Ability name (``namespace/identifier``).
    input_data:
        Input passed to the callbacks; omit to validate the schema default.
        Callbacks receive ``None`` when input is omitted.
    engine:
        Schema engine for input/output validation.

    Raises
    ------
    AbilityExecutionError
        One of the five classified failures.
    Exception
        Whatever the permission callback or callback raised, unchanged.
    """
    ability = select.get_ability(name)
    if ability is None:
        raise AbilityNotFoundError(name)

    if ability.kind is not AbilityKind.CLIENT:
        raise AbilityMissingCallbackError(ability.name)

    callback_input = None if input_data is UNSET else input_data

    if ability.permission_callback is not None:
        allowed = await _resolve(ability.permission_callback(callback_input))
        if not allowed:
            raise AbilityPermissionDeniedError(ability.name)

    if ability.input_schema is not None:
        verdict = validate_value_from_schema(
            input_data, ability.input_schema, "input", engine=engine
        )
        if verdict is not True:
            raise AbilityInvalidInputError(ability.name, verdict)

    try:
        result = await _resolve(ability.callback(callback_input))  # type: ignore[attr-defined]
    except Exception:
        log.error("Error executing ability %s", ability.name, exc_info=True)
        raise

    if ability.output_schema is not None:
        verdict = validate_value_from_schema(
            result, ability.output_schema, "output", engine=engine
        )
        if verdict is not True:
            raise AbilityInvalidOutputError(ability.name, verdict)

    return result
