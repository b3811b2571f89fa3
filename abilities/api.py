"""Public surface of the abilities registry.

``AbilitiesContext`` owns one store registration and one schema engine.
Create one per process (or per test) and pass it where it is needed::

    ctx = AbilitiesContext()
    ctx.register_ability_category("nav", {"label": "Navigation",
                                          "description": "Navigation abilities"})
    ctx.register_ability({
        "name": "my-plugin/go",
        "label": "Go",
        "description": "Navigate to a URL",
        "category": "nav",
        "input_schema": {"type": "object", "required": ["url"],
                         "properties": {"url": {"type": "string"}}},
        "callback": go,
    })
    result = await ctx.execute_ability("my-plugin/go", {"url": "https://x"})

The module-level functions delegate to a lazily created default context;
``reset_default_context()`` discards it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from abilities.config import AbilitiesSettings
from abilities.execution import execute_ability as _execute
from abilities.models import Ability, AbilityCategory
from abilities.schema.adapter import Draft4SchemaEngine, SchemaEngine
from abilities.schema.validator import UNSET
from abilities.store import AbilitiesState, DataRegistry, store

log = logging.getLogger(__name__)


class AbilitiesContext:
    """Process-scoped owner of the abilities store and schema engine.

    Parameters
    ----------
    settings:
        Explicit settings; read from the environment when omitted.
    engine:
        Schema engine; a ``Draft4SchemaEngine`` built from *settings*
        when omitted.
    registry:
        Host ``DataRegistry`` to register the store with; a private one
        when omitted.  A registry accepts the store only once.
    """

    def __init__(
        self,
        settings: AbilitiesSettings | None = None,
        *,
        engine: SchemaEngine | None = None,
        registry: DataRegistry | None = None,
    ) -> None:
        self.settings = settings or AbilitiesSettings()
        if self.settings.log_level:
            logging.getLogger("abilities").setLevel(self.settings.log_level)
        self.engine: SchemaEngine = engine or Draft4SchemaEngine(
            formats=self.settings.schema_formats,
            cache_size=self.settings.schema_cache_size,
            use_defaults=self.settings.schema_use_defaults,
        )
        self.registry = registry or DataRegistry()
        self.registry.register(store)

    # -- reads -------------------------------------------------------------

    @property
    def state(self) -> AbilitiesState:
        return self.registry.get_state(store)

    def get_abilities(self, category: str | None = None) -> list[Ability]:
        """Return registered abilities, optionally filtered by *category*."""
        return self.registry.select(store).get_abilities(category)

    def get_ability(self, name: str) -> Ability | None:
        return self.registry.select(store).get_ability(name)

    def get_ability_categories(self) -> list[AbilityCategory]:
        return self.registry.select(store).get_ability_categories()

    def get_ability_category(self, slug: str) -> AbilityCategory | None:
        return self.registry.select(store).get_ability_category(slug)

    # -- writes ------------------------------------------------------------

    def register_ability(self, ability: Mapping[str, Any] | Ability) -> None:
        """Register a client ability; raises ``AbilityRegistrationError``.

        The category must already be registered.
        """
        self.registry.dispatch(store).register_ability(ability)

    def unregister_ability(self, name: str) -> None:
        self.registry.dispatch(store).unregister_ability(name)

    def register_ability_category(self, slug: str, args: Mapping[str, Any]) -> None:
        """Register a category; raises ``CategoryRegistrationError``."""
        self.registry.dispatch(store).register_ability_category(slug, args)

    def unregister_ability_category(self, slug: str) -> None:
        self.registry.dispatch(store).unregister_ability_category(slug)

    def hydrate(
        self,
        categories: Iterable[Mapping[str, Any] | AbilityCategory] = (),
        abilities: Iterable[Mapping[str, Any] | Ability] = (),
    ) -> None:
        """Load server-registered categories and abilities in bulk."""
        self.registry.dispatch(store).hydrate(categories, abilities)

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call *listener* after every state change."""
        return self.registry.subscribe(store, listener)

    # -- execution ---------------------------------------------------------

    async def execute_ability(self, name: str, input_data: Any = UNSET) -> Any:
        """Execute *name*; see ``abilities.execution.execute_ability``."""
        return await _execute(
            self.registry.select(store), name, input_data, engine=self.engine
        )

    def close(self) -> None:
        """Drop cached compiled schemas held by the engine."""
        clear_cache = getattr(self.engine, "clear_cache", None)
        if clear_cache is not None:
            clear_cache()


# ── Default context ──────────────────────────────────────

_default_context: AbilitiesContext | None = None
_context_lock = threading.Lock()


def get_default_context() -> AbilitiesContext:
    """Return the process-wide context, creating it on first use."""
    global _default_context
    with _context_lock:
        if _default_context is None:
            _default_context = AbilitiesContext()
            log.debug("created default abilities context")
        return _default_context


def reset_default_context() -> None:
    """Discard the process-wide context (test isolation)."""
    global _default_context
    with _context_lock:
        if _default_context is not None:
            _default_context.close()
        _default_context = None


def get_abilities(category: str | None = None) -> list[Ability]:
    return get_default_context().get_abilities(category)


def get_ability(name: str) -> Ability | None:
    return get_default_context().get_ability(name)


def get_ability_categories() -> list[AbilityCategory]:
    return get_default_context().get_ability_categories()


def get_ability_category(slug: str) -> AbilityCategory | None:
    return get_default_context().get_ability_category(slug)


def register_ability(ability: Mapping[str, Any] | Ability) -> None:
    get_default_context().register_ability(ability)


def unregister_ability(name: str) -> None:
    get_default_context().unregister_ability(name)


def register_ability_category(slug: str, args: Mapping[str, Any]) -> None:
    get_default_context().register_ability_category(slug, args)


def unregister_ability_category(slug: str) -> None:
    get_default_context().unregister_ability_category(slug)


async def execute_ability(name: str, input_data: Any = UNSET) -> Any:
    return await get_default_context().execute_ability(name, input_data)
