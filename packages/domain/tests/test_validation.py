"""Tests for the shared invariant checks.

Tests cover:
- Sender and status requirements
- Checked uint64/int64 arithmetic
- Sequence allocation
- Payment / attached funds reconciliation
- Transition invariants
"""

import pytest

from subscription_domain.errors import (
    InvalidAmount,
    InvalidState,
    Overflow,
    Underflow,
    Unauthorized,
)
from subscription_domain.handlers.validation import (
    called_capital,
    check_transition,
    checked_add,
    checked_mul,
    checked_sub,
    checked_sum,
    disbursed_total,
    next_sequence,
    require_divisible,
    require_no_funds,
    require_positive,
    require_sender,
    require_status,
    resolve_payment,
)
from subscription_domain.schemas import (
    CapitalCall,
    Coin,
    Distribution,
    I64_MAX,
    I64_MIN,
    Redemption,
    Status,
    U16_MAX,
    U64_MAX,
    Withdrawal,
    validate_address,
)

ADMIN = validate_address("admin")
LP = validate_address("lp")


# =============================================================================
# Authorization & Status
# =============================================================================

def test_require_sender_accepts_member():
    require_sender({ADMIN, LP}, LP)


def test_require_sender_rejects_outsider():
    with pytest.raises(Unauthorized, match="intruder"):
        require_sender({ADMIN}, validate_address("intruder"))


def test_require_status(draft_state):
    require_status(draft_state, Status.DRAFT)
    with pytest.raises(InvalidState, match="expected Accepted"):
        require_status(draft_state, Status.ACCEPTED)


# =============================================================================
# Checked Arithmetic
# =============================================================================

class TestCheckedArithmetic:
    def test_add_within_bounds(self):
        assert checked_add(U64_MAX - 1, 1) == U64_MAX

    def test_add_overflow(self):
        with pytest.raises(Overflow):
            checked_add(U64_MAX, 1)

    def test_sub_underflow(self):
        with pytest.raises(Underflow):
            checked_sub(5, 6)

    def test_signed_bounds(self):
        assert checked_sub(0, I64_MAX, signed=True) == -I64_MAX
        with pytest.raises(Underflow):
            checked_sub(I64_MIN, 1, signed=True)
        with pytest.raises(Overflow):
            checked_add(I64_MAX, 1, signed=True)

    def test_mul_overflow(self):
        assert checked_mul(2**32, 2**31) == 2**63
        with pytest.raises(Overflow):
            checked_mul(2**32, 2**32)

    def test_sum_fails_on_first_overflow(self):
        assert checked_sum([1, 2, 3]) == 6
        assert checked_sum([]) == 0
        with pytest.raises(Overflow):
            checked_sum([U64_MAX, 1, 0])


# =============================================================================
# Sequence
# =============================================================================

def test_next_sequence_returns_current_and_following(draft_state):
    assert next_sequence(draft_state) == (0, 1)
    draft_state.sequence = 41
    assert next_sequence(draft_state) == (41, 42)


def test_next_sequence_exhausted(draft_state):
    draft_state.sequence = U16_MAX
    assert next_sequence(draft_state) == (U16_MAX, U16_MAX + 1)
    draft_state.sequence = U16_MAX + 1
    with pytest.raises(Overflow, match="exhausted"):
        next_sequence(draft_state)


# =============================================================================
# Amounts & Funds
# =============================================================================

class TestAmounts:
    def test_require_positive(self):
        require_positive(1, "amount")
        with pytest.raises(InvalidAmount, match="amount must be greater than zero"):
            require_positive(0, "amount")

    def test_require_divisible(self):
        require_divisible(500, 100, "call")
        require_divisible(501, 0, "call")
        with pytest.raises(InvalidAmount, match="evenly divisible"):
            require_divisible(501, 100, "call")

    def test_require_no_funds(self):
        require_no_funds(())
        with pytest.raises(InvalidAmount, match="does not accept funds"):
            require_no_funds([Coin(denom="stable_coin", amount=1)])


class TestResolvePayment:
    def test_declared_without_funds(self):
        assert resolve_payment(200, (), "stable_coin") == 200
        assert resolve_payment(None, (), "stable_coin") is None

    def test_funds_without_declaration(self):
        funds = [Coin(denom="stable_coin", amount=300)]
        assert resolve_payment(None, funds, "stable_coin") == 300

    def test_funds_matching_declaration(self):
        funds = [Coin(denom="stable_coin", amount=300)]
        assert resolve_payment(300, funds, "stable_coin") == 300

    def test_denom_mismatch(self):
        with pytest.raises(InvalidAmount, match="does not match stable_coin"):
            resolve_payment(None, [Coin(denom="other_coin", amount=1)], "stable_coin")

    def test_amount_mismatch(self):
        with pytest.raises(InvalidAmount, match="does not match declared payment"):
            resolve_payment(5, [Coin(denom="stable_coin", amount=4)], "stable_coin")

    def test_multiple_coins(self):
        funds = [Coin(denom="stable_coin", amount=1), Coin(denom="stable_coin", amount=1)]
        with pytest.raises(InvalidAmount, match="exactly one coin"):
            resolve_payment(None, funds, "stable_coin")


# =============================================================================
# Ledger Accounting
# =============================================================================

def test_called_capital_counts_closed_calls_only(accepted_state):
    accepted_state.closed_capital_calls.append(CapitalCall(amount=300, sequence=0))
    accepted_state.cancelled_capital_calls.append(CapitalCall(amount=200, sequence=1))
    assert called_capital(accepted_state) == 300


def test_disbursed_total(accepted_state):
    accepted_state.distributions.append(Distribution(amount=10, sequence=0))
    accepted_state.redemptions.append(Redemption(asset=1, capital=20, sequence=1))
    accepted_state.withdrawals.append(Withdrawal(amount=30, to=LP, sequence=2))
    assert disbursed_total(accepted_state) == 60


# =============================================================================
# Transition Invariants
# =============================================================================

class TestCheckTransition:
    def test_valid_transition(self, draft_state):
        after = draft_state.model_copy(deep=True)
        after.sequence = 1
        after.distributions.append(Distribution(amount=1, sequence=0))
        check_transition(draft_state, after)

    def test_sequence_decrease(self, draft_state):
        draft_state.sequence = 2
        after = draft_state.model_copy(deep=True)
        after.sequence = 1
        with pytest.raises(InvalidState, match="never decrease"):
            check_transition(draft_state, after)

    def test_status_revert(self, accepted_state):
        after = accepted_state.model_copy(deep=True)
        after.status = Status.DRAFT
        with pytest.raises(InvalidState, match="cannot return to draft"):
            check_transition(accepted_state, after)

    def test_duplicate_sequence(self, draft_state):
        after = draft_state.model_copy(deep=True)
        after.sequence = 1
        after.distributions.append(Distribution(amount=1, sequence=0))
        after.withdrawals.append(Withdrawal(amount=1, to=LP, sequence=0))
        with pytest.raises(InvalidState, match="duplicate"):
            check_transition(draft_state, after)

    def test_sequence_not_below_counter(self, draft_state):
        after = draft_state.model_copy(deep=True)
        after.distributions.append(Distribution(amount=1, sequence=0))
        with pytest.raises(InvalidState, match="below counter"):
            check_transition(draft_state, after)
