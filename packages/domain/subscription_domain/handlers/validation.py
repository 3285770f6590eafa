"""Invariant checks shared by every command handler.

All functions are pure: they inspect values and either return or raise a
ContractError. Ledger arithmetic goes through the checked_* helpers so that
no amount can silently wrap past its integer width.
"""

from typing import Iterable, Optional, Sequence, Tuple

from ..errors import (
    InvalidAmount,
    InvalidState,
    Overflow,
    Underflow,
    Unauthorized,
)
from ..schemas import (
    Coin,
    ContractState,
    I64_MAX,
    I64_MIN,
    Status,
    U16_MAX,
    U64_MAX,
    ValidatedAddress,
)


# =============================================================================
# Authorization & Status
# =============================================================================

def require_sender(expected: Iterable[ValidatedAddress], actual: ValidatedAddress) -> None:
    """Fail Unauthorized unless actual is one of the expected identities."""
    if actual not in set(expected):
        raise Unauthorized(f"sender {actual} is not authorized for this command")


def require_status(state: ContractState, expected: Status) -> None:
    if state.status != expected:
        raise InvalidState(
            f"contract status is {Status(state.status).value}, expected {Status(expected).value}"
        )


# =============================================================================
# Checked Arithmetic
# =============================================================================

def _bounds(signed: bool) -> Tuple[int, int]:
    return (I64_MIN, I64_MAX) if signed else (0, U64_MAX)


def _check(result: int, signed: bool) -> int:
    low, high = _bounds(signed)
    if result > high:
        raise Overflow(f"{result} exceeds {'int64' if signed else 'uint64'} maximum")
    if result < low:
        raise Underflow(f"{result} is below {'int64' if signed else 'uint64'} minimum")
    return result


def checked_add(a: int, b: int, signed: bool = False) -> int:
    """Add within uint64 (or int64 when signed), failing instead of wrapping.

    Raises:
        Overflow: If the sum exceeds the maximum
        Underflow: If the sum is below the minimum
    """
    return _check(a + b, signed)


def checked_sub(a: int, b: int, signed: bool = False) -> int:
    return _check(a - b, signed)


def checked_mul(a: int, b: int, signed: bool = False) -> int:
    return _check(a * b, signed)


def checked_sum(amounts: Iterable[int], signed: bool = False) -> int:
    """Fold amounts with checked_add, failing on the first overflow."""
    total = 0
    for amount in amounts:
        total = checked_add(total, amount, signed)
    return total


# =============================================================================
# Sequence
# =============================================================================

def next_sequence(state: ContractState) -> Tuple[int, int]:
    """Return (sequence to stamp, counter after stamping).

    Raises:
        Overflow: If the uint16 sequence space is exhausted
    """
    current = state.sequence
    if current > U16_MAX:
        raise Overflow("ledger sequence space exhausted")
    return current, current + 1


# =============================================================================
# Amounts & Funds
# =============================================================================

def require_positive(amount: int, what: str) -> None:
    if amount <= 0:
        raise InvalidAmount(f"{what} must be greater than zero")


def require_divisible(amount: int, capital_per_share: int, what: str) -> None:
    """Amounts of capital must buy a whole number of units."""
    if capital_per_share and amount % capital_per_share != 0:
        raise InvalidAmount(
            f"{what} must be evenly divisible by capital per share ({capital_per_share})"
        )


def require_no_funds(funds: Sequence[Coin]) -> None:
    if funds:
        raise InvalidAmount("this command does not accept funds")


def resolve_payment(declared: Optional[int], funds: Sequence[Coin], denom: str) -> Optional[int]:
    """Reconcile a declared payment with attached funds.

    Attached funds must be a single coin of `denom`; when a payment is also
    declared the two must agree.

    Returns:
        The funded amount, the declared amount, or None if neither is given

    Raises:
        InvalidAmount: On multiple coins, a denom mismatch, or disagreement
    """
    if not funds:
        return declared
    if len(funds) != 1:
        raise InvalidAmount("exactly one coin may be attached")
    coin = funds[0]
    if coin.denom != denom:
        raise InvalidAmount(f"attached denom {coin.denom} does not match {denom}")
    if declared is not None and declared != coin.amount:
        raise InvalidAmount(
            f"attached amount {coin.amount} does not match declared payment {declared}"
        )
    return coin.amount


# =============================================================================
# Ledger Accounting
# =============================================================================

def called_capital(state: ContractState) -> int:
    """Capital already called through closed capital calls."""
    return checked_sum(call.amount for call in state.closed_capital_calls)


def disbursed_total(state: ContractState) -> int:
    """Everything paid out of the raise: distributions, redemptions, withdrawals."""
    return checked_sum(
        [d.amount for d in state.distributions]
        + [r.capital for r in state.redemptions]
        + [w.amount for w in state.withdrawals]
    )


def require_disbursable(state: ContractState, amount: int) -> None:
    """Fail Overflow if paying `amount` would push disbursements past uint64."""
    checked_add(disbursed_total(state), amount)


# =============================================================================
# Transition Invariants
# =============================================================================

def check_transition(before: ContractState, after: ContractState) -> None:
    """Verify the ledger invariants that must hold across every transition.

    Raises:
        InvalidState: If the transition would break an invariant
    """
    if after.sequence < before.sequence:
        raise InvalidState("ledger sequence must never decrease")

    if before.status == Status.ACCEPTED and after.status != Status.ACCEPTED:
        raise InvalidState("accepted contract cannot return to draft")

    sequences = after.ledger_sequences()
    if len(sequences) != len(set(sequences)):
        raise InvalidState("duplicate ledger sequence")
    if sequences and sequences[-1] >= after.sequence:
        raise InvalidState("ledger sequence not below counter")
