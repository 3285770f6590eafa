"""Integration tests for the host entry points.

Drives a subscription through instantiate / execute / migrate against a
MemoryStore, using raw JSON-shaped messages the way a host would.
"""

import pytest

from subscription_domain import (
    ContractState,
    InvalidAmount,
    InvalidMessage,
    InvalidState,
    MemoryStore,
    NotFound,
    SchemaVersion,
    StateSingleton,
    Status,
    TransferInstruction,
    Unauthorized,
    execute,
    instantiate,
    migrate,
    validate_address,
)
from subscription_domain.storage import STATE_KEY

ADMIN = validate_address("admin")
LP = validate_address("lp")
RAISE = validate_address("raise")
RECOVERY = validate_address("recovery")


def load(store) -> ContractState:
    return StateSingleton(store).load()


# =============================================================================
# Instantiate
# =============================================================================

class TestInstantiate:
    def test_creates_draft_with_sender_as_raise(self, store):
        state = load(store)
        assert state.status == Status.DRAFT
        assert state.sequence == 0
        assert state.raise_address == RAISE
        assert state.config.version == SchemaVersion.V3

    def test_recovery_admin_defaults_to_admin(self, instantiate_msg):
        store = MemoryStore()
        state = instantiate(store, RAISE, instantiate_msg(recovery_admin=None))
        assert state.recovery_admin == ADMIN

    def test_from_raw_json(self):
        store = MemoryStore()
        raw = (
            '{"admin": "admin", "lp": "lp", "capital_denom": "stable_coin",'
            ' "commitment_denom": "commitment_coin", "investment_denom": "fund_coin",'
            ' "capital_per_share": 100, "initial_commitment": 500}'
        )
        state = instantiate(store, RAISE, raw)
        assert state.commitment == 500
        assert state.commitment_cap() == 500

    def test_cannot_instantiate_twice(self, store, instantiate_msg):
        with pytest.raises(InvalidState):
            instantiate(store, RAISE, instantiate_msg())

    @pytest.mark.parametrize(
        "overrides, match",
        [
            ({"min_commitment": 10_001}, "evenly divisible"),
            ({"min_commitment": 2000}, "exceeds max"),
            ({"initial_commitment": 0}, "less than minimum"),
            ({"initial_commitment": 1100}, "more than maximum"),
        ],
    )
    def test_inconsistent_terms(self, instantiate_msg, overrides, match):
        store = MemoryStore()
        with pytest.raises(InvalidAmount, match=match):
            instantiate(store, RAISE, instantiate_msg(**overrides))
        assert store.get(STATE_KEY) is None

    def test_malformed_message(self):
        with pytest.raises(InvalidMessage):
            instantiate(MemoryStore(), RAISE, {"admin": "admin"})

    def test_address_validator_applies_to_raw_messages(self, instantiate_msg):
        def only_known(raw):
            if raw not in {"admin", "lp"}:
                raise ValueError(f"unknown account {raw}")
            return raw

        raw = instantiate_msg(recovery_admin=None).model_dump(mode="json")
        instantiate(MemoryStore(), RAISE, raw, address_validator=only_known)

        raw["lp"] = "stranger"
        with pytest.raises(InvalidMessage, match="unknown account stranger"):
            instantiate(MemoryStore(), RAISE, raw, address_validator=only_known)


# =============================================================================
# Execute
# =============================================================================

class TestExecute:
    def test_subscription_lifecycle(self, store):
        execute(store, LP, {"accept": {}})
        assert load(store).status == Status.ACCEPTED

        execute(store, ADMIN, {"issue_capital_call": {"capital_call": {"amount": 500}}})
        closed = execute(store, ADMIN, {"close_capital_call": {}})
        assert closed.transfers == [
            TransferInstruction(denom="stable_coin", amount=500, sender=LP, recipient=RAISE)
        ]

        paid = execute(store, ADMIN, {"issue_distribution": {"amount": 200}})
        assert paid.transfers == [
            TransferInstruction(denom="stable_coin", amount=200, sender=RAISE, recipient=LP)
        ]

        exchange = {"exchanges": [{"inv": 10, "cap": -1000}], "memo": "m"}
        execute(store, ADMIN, {"authorize_asset_exchange": exchange})
        completed = execute(store, ADMIN, {"complete_asset_exchange": exchange})
        assert completed.transfers == [
            TransferInstruction(denom="fund_coin", amount=10, sender=RAISE, recipient=LP, memo="m"),
            TransferInstruction(denom="stable_coin", amount=1000, sender=LP, recipient=RAISE, memo="m"),
        ]

        state = load(store)
        assert state.sequence == 2
        assert state.ledger_sequences() == [0, 1]
        assert state.pending_asset_exchanges == []

    def test_failed_execute_leaves_store_untouched(self, store):
        before = store.get(STATE_KEY)

        with pytest.raises(Unauthorized):
            execute(store, ADMIN, {"accept": {}})
        with pytest.raises(InvalidState):
            execute(store, ADMIN, {"issue_distribution": {"payment": 10}})
        with pytest.raises(InvalidMessage):
            execute(store, LP, {"accept": {}, "redeem": {}})

        assert store.get(STATE_KEY) == before

    def test_recover_then_new_lp_acts(self, store):
        execute(store, RECOVERY, '{"recover": {"lp": "newlp"}}')
        with pytest.raises(Unauthorized):
            execute(store, LP, {"accept": {}})
        execute(store, validate_address("newlp"), {"accept": {}})
        assert load(store).status == Status.ACCEPTED

    def test_withdrawal_sequence_and_recipient(self, store):
        execute(store, LP, {"accept": {}})
        response = execute(store, ADMIN, {"issue_withdrawal": {"amount": 25, "to": "treasury"}})
        assert response.attributes["to"] == "treasury"
        assert load(store).withdrawals[0].sequence == 0

    def test_host_address_format_survives_reload(self, instantiate_msg):
        def keep_as_given(raw):
            return raw

        store = MemoryStore()
        raw = instantiate_msg(recovery_admin=None).model_dump(mode="json")
        raw["lp"] = "Lp_Wallet"
        instantiate(store, RAISE, raw, address_validator=keep_as_given)

        lp = validate_address("Lp_Wallet", keep_as_given)
        execute(store, lp, {"accept": {}}, address_validator=keep_as_given)

        state = load(store)
        assert state.lp == "Lp_Wallet"
        assert state.status == Status.ACCEPTED

    def test_upper_case_host_addresses_are_not_lowercased(self, instantiate_msg):
        def upper(raw):
            return raw.upper()

        admin, lp, raise_address = (validate_address(name, upper) for name in ("admin", "lp", "raise"))
        store = MemoryStore()
        raw = instantiate_msg(recovery_admin=None).model_dump(mode="json")
        instantiate(store, raise_address, raw, address_validator=upper)

        execute(store, lp, {"accept": {}}, address_validator=upper)
        response = execute(
            store, admin, {"issue_distribution": {"payment": 100}}, address_validator=upper
        )
        assert response.transfers == [
            TransferInstruction(denom="stable_coin", amount=100, sender=raise_address, recipient=lp)
        ]
        assert load(store).lp == "LP"

    def test_execute_before_instantiate(self):
        with pytest.raises(NotFound):
            execute(MemoryStore(), LP, {"accept": {}})


# =============================================================================
# Migrate
# =============================================================================

class TestMigrate:
    def test_forward_unlocks_commands(self, instantiate_msg):
        store = MemoryStore()
        instantiate(store, RAISE, instantiate_msg(schema_version=SchemaVersion.V1))
        execute(store, LP, {"accept": {}})

        with pytest.raises(InvalidMessage):
            execute(store, ADMIN, {"issue_withdrawal": {"amount": 1, "to": "lp"}})

        state = migrate(store, {"schema_version": 2})
        assert state.config.version == SchemaVersion.V2
        assert state.status == Status.ACCEPTED

        execute(store, ADMIN, {"issue_withdrawal": {"amount": 1, "to": "lp"}})
        assert len(load(store).withdrawals) == 1

    def test_same_version_is_allowed(self, store):
        assert migrate(store, {"schema_version": 3}).config.version == SchemaVersion.V3

    def test_downgrade_rejected(self, store):
        before = store.get(STATE_KEY)
        with pytest.raises(InvalidState, match="cannot migrate"):
            migrate(store, {"schema_version": 1})
        assert store.get(STATE_KEY) == before
