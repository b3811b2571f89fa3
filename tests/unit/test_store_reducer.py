"""Unit tests for the abilities store reducers and selectors.

Tests cover:
- Register/unregister of abilities and categories
- Allow-list sanitization of stored records
- Identity preservation on no-op actions
- Memoized list selectors
- Property-based tests (hypothesis)
"""

from __future__ import annotations

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from abilities.models import ABILITY_KEYS, AbilityCategory, ClientAbility, ServerAbility
from abilities.store import selectors
from abilities.store.constants import (
    REGISTER_ABILITY,
    REGISTER_ABILITY_CATEGORY,
    UNREGISTER_ABILITY,
    UNREGISTER_ABILITY_CATEGORY,
)
from abilities.store.reducer import AbilitiesState, reducer


def _callback(input_data):
    return input_data


def _ability(name="test/ability", **extra):
    payload = {
        "name": name,
        "label": "Test Ability",
        "description": "A test ability",
        "category": "test-category",
        "callback": _callback,
    }
    payload.update(extra)
    return payload


def _register(state, ability):
    return reducer(state, {"type": REGISTER_ABILITY, "ability": ability})


def _register_category(state, slug="test-category", **extra):
    category = {"slug": slug, "label": "Test", "description": "A test category"}
    category.update(extra)
    return reducer(state, {"type": REGISTER_ABILITY_CATEGORY, "category": category})


# ─────────────────────────────────────────────────────────────────────────
# Initial state
# ─────────────────────────────────────────────────────────────────────────


class TestInitialState:
    def test_empty_maps(self) -> None:
        state = reducer(None, {"type": "@@INIT"})
        assert isinstance(state, AbilitiesState)
        assert dict(state.abilities_by_name) == {}
        assert dict(state.categories_by_slug) == {}

    def test_unknown_action_returns_same_state(self) -> None:
        state = _register(None, _ability())
        assert reducer(state, {"type": "SOMETHING_ELSE"}) is state


# ─────────────────────────────────────────────────────────────────────────
# abilities_by_name
# ─────────────────────────────────────────────────────────────────────────


class TestAbilitiesByName:
    def test_register_adds_client_ability(self) -> None:
        state = _register(None, _ability())
        stored = state.abilities_by_name["test/ability"]
        assert isinstance(stored, ClientAbility)
        assert stored.callback is _callback
        assert stored.label == "Test Ability"

    def test_register_without_callback_stores_server_ability(self) -> None:
        payload = _ability()
        del payload["callback"]
        state = _register(None, payload)
        assert isinstance(state.abilities_by_name["test/ability"], ServerAbility)

    def test_unknown_keys_are_dropped(self) -> None:
        state = _register(
            None,
            _ability(
                input_schema={"type": "string"},
                _links={"self": [{"href": "/wp-abilities/v1/abilities/test"}]},
                _embedded={"author": {"id": 1}},
                extra_field="nope",
            ),
        )
        stored = state.abilities_by_name["test/ability"].to_dict()
        assert set(stored) <= set(ABILITY_KEYS)
        assert "_links" not in stored
        assert "extra_field" not in stored
        assert stored["input_schema"] == {"type": "string"}

    def test_none_values_are_dropped(self) -> None:
        state = _register(None, _ability(output_schema=None))
        assert "output_schema" not in state.abilities_by_name["test/ability"].to_dict()

    def test_register_replaces_existing(self) -> None:
        state = _register(None, _ability(label="First"))
        state = _register(state, _ability(label="Second"))
        assert state.abilities_by_name["test/ability"].label == "Second"
        assert len(state.abilities_by_name) == 1

    def test_register_keeps_previous_map_untouched(self) -> None:
        first = _register(None, _ability("a/one"))
        second = _register(first, _ability("a/two"))
        assert set(first.abilities_by_name) == {"a/one"}
        assert set(second.abilities_by_name) == {"a/one", "a/two"}

    def test_register_without_payload_is_noop(self) -> None:
        state = _register(None, _ability())
        assert reducer(state, {"type": REGISTER_ABILITY}) is state

    def test_unregister_removes(self) -> None:
        state = _register(None, _ability())
        state = reducer(state, {"type": UNREGISTER_ABILITY, "name": "test/ability"})
        assert "test/ability" not in state.abilities_by_name

    def test_unregister_unknown_returns_same_state(self) -> None:
        state = _register(None, _ability())
        after = reducer(state, {"type": UNREGISTER_ABILITY, "name": "nope/nope"})
        assert after is state

    def test_category_map_untouched_by_ability_actions(self) -> None:
        state = _register_category(None)
        categories = state.categories_by_slug
        state = _register(state, _ability())
        assert state.categories_by_slug is categories


# ─────────────────────────────────────────────────────────────────────────
# categories_by_slug
# ─────────────────────────────────────────────────────────────────────────


class TestCategoriesBySlug:
    def test_register_adds_category(self) -> None:
        state = _register_category(None)
        stored = state.categories_by_slug["test-category"]
        assert isinstance(stored, AbilityCategory)
        assert stored.label == "Test"

    def test_unknown_keys_are_dropped(self) -> None:
        state = _register_category(None, _links={"self": "x"}, icon="star")
        stored = state.categories_by_slug["test-category"].to_dict()
        assert set(stored) == {"slug", "label", "description"}

    def test_meta_is_kept(self) -> None:
        meta = {"annotations": {"clientRegistered": True}}
        state = _register_category(None, meta=meta)
        assert state.categories_by_slug["test-category"].meta == meta

    def test_register_without_payload_is_noop(self) -> None:
        state = _register_category(None)
        assert reducer(state, {"type": REGISTER_ABILITY_CATEGORY}) is state

    def test_unregister_removes(self) -> None:
        state = _register_category(None)
        state = reducer(state, {"type": UNREGISTER_ABILITY_CATEGORY, "slug": "test-category"})
        assert dict(state.categories_by_slug) == {}

    def test_unregister_unknown_returns_same_state(self) -> None:
        state = _register_category(None)
        after = reducer(state, {"type": UNREGISTER_ABILITY_CATEGORY, "slug": "missing"})
        assert after is state

    def test_unregister_category_keeps_its_abilities(self) -> None:
        state = _register(_register_category(None), _ability())
        state = reducer(state, {"type": UNREGISTER_ABILITY_CATEGORY, "slug": "test-category"})
        assert "test/ability" in state.abilities_by_name


# ─────────────────────────────────────────────────────────────────────────
# Selectors
# ─────────────────────────────────────────────────────────────────────────


class TestSelectors:
    def test_get_abilities_returns_all(self) -> None:
        state = _register(_register(None, _ability("a/one")), _ability("a/two"))
        names = [a.name for a in selectors.get_abilities(state)]
        assert names == ["a/one", "a/two"]

    def test_get_abilities_filters_by_category(self) -> None:
        state = _register(None, _ability("a/one"))
        state = _register(state, _ability("a/two", category="other"))
        assert [a.name for a in selectors.get_abilities(state, "other")] == ["a/two"]
        assert selectors.get_abilities(state, "missing") == []

    def test_get_abilities_memoized_while_unchanged(self) -> None:
        state = _register(None, _ability())
        first = selectors.get_abilities(state)
        assert selectors.get_abilities(state) is first
        noop = reducer(state, {"type": UNREGISTER_ABILITY, "name": "x/y"})
        assert selectors.get_abilities(noop) is first

    def test_get_abilities_recomputed_after_change(self) -> None:
        state = _register(None, _ability("a/one"))
        first = selectors.get_abilities(state)
        state = _register(state, _ability("a/two"))
        second = selectors.get_abilities(state)
        assert second is not first
        assert len(second) == 2

    def test_get_ability(self) -> None:
        state = _register(None, _ability())
        assert selectors.get_ability(state, "test/ability").name == "test/ability"
        assert selectors.get_ability(state, "missing/ability") is None

    def test_get_ability_categories_memoized(self) -> None:
        state = _register_category(None)
        first = selectors.get_ability_categories(state)
        assert [c.slug for c in first] == ["test-category"]
        assert selectors.get_ability_categories(state) is first

    def test_get_ability_category(self) -> None:
        state = _register_category(None)
        assert selectors.get_ability_category(state, "test-category").slug == "test-category"
        assert selectors.get_ability_category(state, "missing") is None


# ─────────────────────────────────────────────────────────────────────────
# Property-based tests
# ─────────────────────────────────────────────────────────────────────────


_names = st.from_regex(r"\A[a-z0-9-]{1,8}/[a-z0-9-]{1,8}\Z")


class TestReducerProperties:
    @given(registered=st.sets(_names, max_size=5), missing=_names)
    @settings(max_examples=100, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_unregister_missing_preserves_identity(self, registered, missing) -> None:
        state = reducer(None, {"type": "@@INIT"})
        for name in registered:
            state = _register(state, _ability(name))
        if missing in registered:
            return
        assert reducer(state, {"type": UNREGISTER_ABILITY, "name": missing}) is state

    @given(names=st.lists(_names, max_size=8))
    @settings(max_examples=100, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_one_record_per_name(self, names) -> None:
        state = None
        for name in names:
            state = _register(state, _ability(name))
        if state is None:
            return
        assert set(state.abilities_by_name) == set(names)
