"""Abilities exception hierarchy.

Two families share the ``AbilitiesError`` root:

- ``RegistrationError``: synchronous invariant violations raised by the
  register calls.  Nothing is mutated when one is raised.
- ``AbilityExecutionError``: classified execution failures.  Each
  carries a stable ``code`` from ``AbilityErrorCode``.

Errors raised by an ability's own callback or permission callback are
*not* part of this hierarchy; they propagate to the caller unchanged.
"""

from __future__ import annotations

from enum import Enum


class AbilitiesError(Exception):
    """Base exception for all abilities failures."""

    __slots__ = ()


class StoreAlreadyRegisteredError(AbilitiesError):
    """Raised when a store name is registered twice with a DataRegistry."""

    __slots__ = ("store_name",)

    def __init__(self, store_name: str) -> None:
        super().__init__(f"Store {store_name!r} is already registered")
        self.store_name = store_name


class StoreNotFoundError(AbilitiesError):
    """Raised when selecting from or dispatching to an unregistered store."""

    __slots__ = ("store_name",)

    def __init__(self, store_name: str) -> None:
        super().__init__(f"Store {store_name!r} is not registered")
        self.store_name = store_name


# ── Registration ─────────────────────────────────────────


class RegistrationError(AbilitiesError):
    """Raised when an ability or category fails registration checks.

    Attributes
    ----------
    field : str
        The failing field (``"name"``, ``"category"``, ``"slug"``, ...).
    subject : str
        Ability name or category slug being registered (may be empty
        when the identifier itself is the missing field).
    """

    __slots__ = ("field", "subject")

    def __init__(self, message: str, *, field: str, subject: str = "") -> None:
        super().__init__(message)
        self.field = field
        self.subject = subject


class AbilityRegistrationError(RegistrationError):
    """Raised when ``register_ability`` rejects an ability."""

    __slots__ = ()


class CategoryRegistrationError(RegistrationError):
    """Raised when ``register_ability_category`` rejects a category."""

    __slots__ = ()


# ── Execution ────────────────────────────────────────────


class AbilityErrorCode(str, Enum):  # noqa: UP042
    """Stable codes for classified execution failures."""

    NOT_FOUND = "ability_not_found"
    MISSING_CALLBACK = "ability_missing_callback"
    PERMISSION_DENIED = "ability_permission_denied"
    INVALID_INPUT = "ability_invalid_input"
    INVALID_OUTPUT = "ability_invalid_output"


class AbilityExecutionError(AbilitiesError):
    """Base for classified ``execute_ability`` failures.

    Attributes
    ----------
    code : AbilityErrorCode
        Machine-readable failure code.
    ability_name : str
        Name the caller asked to execute.
    reason : str
        Formatted schema violation for input/output failures, else ``""``.
    """

    __slots__ = ("ability_name", "code", "reason")

    code_value: AbilityErrorCode

    def __init__(self, ability_name: str, message: str, *, reason: str = "") -> None:
        super().__init__(message)
        self.code = self.code_value
        self.ability_name = ability_name
        self.reason = reason

    @property
    def message(self) -> str:
        return str(self)


class AbilityNotFoundError(AbilityExecutionError):
    """Raised when no ability is registered under the requested name."""

    __slots__ = ()
    code_value = AbilityErrorCode.NOT_FOUND

    def __init__(self, ability_name: str) -> None:
        super().__init__(ability_name, f"Ability not found: {ability_name}")


class AbilityMissingCallbackError(AbilityExecutionError):
    """Raised when a server-only ability is executed through this engine."""

    __slots__ = ()
    code_value = AbilityErrorCode.MISSING_CALLBACK

    def __init__(self, ability_name: str) -> None:
        super().__init__(
            ability_name,
            f'Ability "{ability_name}" is missing callback. '
            "Please ensure the ability is properly registered.",
        )


class AbilityPermissionDeniedError(AbilityExecutionError):
    """Raised when the permission callback returns a falsy value."""

    __slots__ = ()
    code_value = AbilityErrorCode.PERMISSION_DENIED

    def __init__(self, ability_name: str) -> None:
        super().__init__(ability_name, f"Permission denied for ability: {ability_name}")


class AbilityInvalidInputError(AbilityExecutionError):
    """Raised when input does not satisfy the ability's ``input_schema``."""

    __slots__ = ()
    code_value = AbilityErrorCode.INVALID_INPUT

    def __init__(self, ability_name: str, reason: str) -> None:
        super().__init__(
            ability_name,
            f'Ability "{ability_name}" has invalid input. Reason: {reason}',
            reason=reason,
        )


class AbilityInvalidOutputError(AbilityExecutionError):
    """Raised when a callback result does not satisfy ``output_schema``."""

    __slots__ = ()
    code_value = AbilityErrorCode.INVALID_OUTPUT

    def __init__(self, ability_name: str, reason: str) -> None:
        super().__init__(
            ability_name,
            f'Ability "{ability_name}" has invalid output. Reason: {reason}',
            reason=reason,
        )
