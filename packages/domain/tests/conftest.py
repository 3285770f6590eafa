"""Shared fixtures for subscription contract tests."""

import pytest

from subscription_domain import (
    Accept,
    Dispatcher,
    InstantiateMsg,
    MemoryStore,
    build_state,
    instantiate,
    validate_address,
)

ADMIN = validate_address("admin")
LP = validate_address("lp")
RAISE = validate_address("raise")
RECOVERY = validate_address("recovery")


def make_instantiate_msg(**overrides) -> InstantiateMsg:
    terms = dict(
        admin=ADMIN,
        lp=LP,
        recovery_admin=RECOVERY,
        capital_denom="stable_coin",
        commitment_denom="commitment_coin",
        investment_denom="fund_coin",
        capital_per_share=100,
        min_commitment=100,
        max_commitment=1000,
    )
    terms.update(overrides)
    return InstantiateMsg(**terms)


@pytest.fixture
def dispatcher():
    return Dispatcher()


@pytest.fixture
def make_state(dispatcher):
    """Factory for states with custom terms, accepted unless told otherwise."""

    def _make(accepted=True, **overrides):
        state = build_state(make_instantiate_msg(**overrides), RAISE)
        if accepted:
            state = dispatcher.dispatch(state, Accept(), LP).state
        return state

    return _make


@pytest.fixture
def draft_state():
    return build_state(make_instantiate_msg(), RAISE)


@pytest.fixture
def accepted_state(draft_state, dispatcher):
    return dispatcher.dispatch(draft_state, Accept(), LP).state


@pytest.fixture
def store():
    """Store holding a freshly instantiated Draft contract."""
    store = MemoryStore()
    instantiate(store, RAISE, make_instantiate_msg())
    return store


@pytest.fixture
def instantiate_msg():
    """Factory for InstantiateMsg with the default terms, overridable per field."""
    return make_instantiate_msg
