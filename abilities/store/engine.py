"""Minimal key-value store engine hosting the abilities store.

The engine owns state for any number of named stores and exposes three
primitives:

    registry = DataRegistry()
    registry.register(store)            # one-time, per store name
    registry.select(store).get_x(...)   # read through bound selectors
    registry.dispatch(store).do_y(...)  # write through action creators

Reducers are pure ``(state, action) -> state`` functions.  An action
creator may return a plain action mapping, which is reduced, or a thunk,
which is called with ``select`` and ``dispatch`` keyword arguments.
Dispatch is serialized with a re-entrant lock: a thunk and every action
it dispatches run as one critical section, and no two reducers ever
interleave.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any

from abilities.exceptions import StoreAlreadyRegisteredError, StoreNotFoundError

log = logging.getLogger(__name__)

INIT_ACTION: Mapping[str, Any] = {"type": "@@INIT"}
DEFAULT_SELECTOR_CACHE_SIZE: int = 256

Reducer = Callable[[Any, Mapping[str, Any]], Any]
Listener = Callable[[], None]


# ── Selector memoization ─────────────────────────────────


def create_selector(
    selector: Callable[..., Any],
    get_dependants: Callable[..., tuple[Any, ...]],
    *,
    max_size: int = DEFAULT_SELECTOR_CACHE_SIZE,
) -> Callable[..., Any]:
    """Memoize *selector* on the identity of its dependants.

    Results are cached per (dependants, arguments) pair: a call returns
    the cached result whenever every object produced by *get_dependants*
    is the same object as when that result was computed.  List selectors
    therefore return the same list while the underlying map is unchanged,
    even when several stores call the same selector in turn.  At most
    *max_size* entries are kept, least recently used first out.
    """
    cache: OrderedDict[Hashable, tuple[tuple[Any, ...], Any]] = OrderedDict()
    lock = threading.Lock()

    @functools.wraps(selector)
    def memoized(state: Any, *args: Any, **kwargs: Any) -> Any:
        dependants = tuple(get_dependants(state, *args, **kwargs))
        try:
            # entries hold their dependants, so an id is never reused while cached
            key: Hashable = (
                tuple(id(d) for d in dependants),
                args,
                frozenset(kwargs.items()),
            )
            hash(key)
        except TypeError:
            return selector(state, *args, **kwargs)

        with lock:
            entry = cache.get(key)
            if entry is not None and all(a is b for a, b in zip(entry[0], dependants)):
                cache.move_to_end(key)
                return entry[1]

        result = selector(state, *args, **kwargs)
        with lock:
            cache[key] = (dependants, result)
            cache.move_to_end(key)
            while len(cache) > max_size:
                cache.popitem(last=False)
        return result

    def clear() -> None:
        with lock:
            cache.clear()

    memoized.clear = clear  # type: ignore[attr-defined]
    return memoized


# ── Store descriptor ─────────────────────────────────────


@dataclass(slots=True, frozen=True)
class StoreDescriptor:
    """Static definition of a store: reducer, action creators, selectors."""

    name: str
    reducer: Reducer
    actions: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    selectors: Mapping[str, Callable[..., Any]] = field(default_factory=dict)


class _BoundSelectors:
    """Selectors with the store's current state bound as first argument."""

    __slots__ = ("_instance",)

    def __init__(self, instance: _StoreInstance) -> None:
        self._instance = instance

    def __getattr__(self, name: str) -> Callable[..., Any]:
        selectors = self._instance.descriptor.selectors
        if name not in selectors:
            raise AttributeError(
                f"store {self._instance.descriptor.name!r} has no selector {name!r}"
            )
        selector = selectors[name]

        def bound(*args: Any, **kwargs: Any) -> Any:
            return selector(self._instance.state, *args, **kwargs)

        return bound


class _BoundActions:
    """Action creators whose results are dispatched to the store."""

    __slots__ = ("_instance",)

    def __init__(self, instance: _StoreInstance) -> None:
        self._instance = instance

    def __getattr__(self, name: str) -> Callable[..., Any]:
        actions = self._instance.descriptor.actions
        if name not in actions:
            raise AttributeError(
                f"store {self._instance.descriptor.name!r} has no action {name!r}"
            )
        creator = actions[name]

        def bound(*args: Any, **kwargs: Any) -> Any:
            return self._instance.dispatch(creator(*args, **kwargs))

        return bound


class _StoreInstance:
    """Runtime state of one registered store."""

    def __init__(self, descriptor: StoreDescriptor, lock: threading.RLock) -> None:
        self.descriptor = descriptor
        self.state: Any = descriptor.reducer(None, INIT_ACTION)
        self.select = _BoundSelectors(self)
        self.actions = _BoundActions(self)
        self._lock = lock
        self._listeners: list[Listener] = []

    def dispatch(self, action: Any) -> Any:
        if callable(action):
            with self._lock:
                return action(select=self.select, dispatch=self.dispatch)

        with self._lock:
            previous = self.state
            self.state = self.descriptor.reducer(previous, action)
            changed = self.state is not previous
            listeners = list(self._listeners) if changed else []
        for listener in listeners:
            try:
                listener()
            except Exception:
                log.error(
                    "listener failed after %r update", self.descriptor.name, exc_info=True
                )
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe


# ── Registry ─────────────────────────────────────────────


class DataRegistry:
    """Holds registered stores and routes select/dispatch calls to them.

    One lock is shared by every store in the registry so that thunks
    touching several stores still serialize.
    """

    def __init__(self) -> None:
        self._stores: dict[str, _StoreInstance] = {}
        self._lock = threading.RLock()

    def register(self, store: StoreDescriptor) -> None:
        """Register *store*.  Raises ``StoreAlreadyRegisteredError`` on repeat."""
        with self._lock:
            if store.name in self._stores:
                raise StoreAlreadyRegisteredError(store.name)
            self._stores[store.name] = _StoreInstance(store, self._lock)
        log.debug("registered store %r", store.name)

    def _instance(self, store: StoreDescriptor | str) -> _StoreInstance:
        name = store if isinstance(store, str) else store.name
        try:
            return self._stores[name]
        except KeyError:
            raise StoreNotFoundError(name) from None

    def select(self, store: StoreDescriptor | str) -> Any:
        """Return the store's selectors bound to its current state."""
        return self._instance(store).select

    def dispatch(self, store: StoreDescriptor | str) -> Any:
        """Return the store's action creators, bound to dispatch."""
        return self._instance(store).actions

    def get_state(self, store: StoreDescriptor | str) -> Any:
        return self._instance(store).state

    def subscribe(self, store: StoreDescriptor | str, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every state change; returns an unsubscribe function."""
        return self._instance(store).subscribe(listener)
