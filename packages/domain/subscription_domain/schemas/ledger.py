"""Ledger records for the subscription contract.

Every money-moving action appends one immutable record stamped with the
contract-wide sequence counter. The counter is shared across record kinds,
so sorting the union of all collections by sequence reproduces the exact
order in which actions were committed.

Asset exchanges are the exception: they carry signed deltas and an
effective date rather than a sequence, and are staged for settlement
instead of being appended to the ledger.
"""

from typing import Optional, Tuple, Union

from pydantic import Field

from .base import (
    Amount,
    DaysOfNotice,
    RecordModel,
    SequenceNumber,
    SignedAmount,
    Timestamp,
    ValidatedAddress,
)


# =============================================================================
# Sequenced Records
# =============================================================================

class LedgerRecord(RecordModel):
    """Base class for sequence-stamped ledger records."""

    sequence: SequenceNumber


class CapitalCall(LedgerRecord):
    """A request for the LP to contribute capital.

    Lifecycle:
        issued  -> held in ContractState.active_capital_call
        closed  -> moved to closed_capital_calls, capital transferred
        retroactive close -> moved to cancelled_capital_calls, no transfer
    """

    amount: Amount
    days_of_notice: Optional[DaysOfNotice] = None


class Distribution(LedgerRecord):
    """A payout of fund proceeds to the LP."""

    amount: Amount


class Redemption(LedgerRecord):
    """Asset units converted back into capital."""

    asset: Amount = Field(description="Units of the investment redeemed")
    capital: Amount = Field(description="Capital paid out for the redeemed units")


class Withdrawal(LedgerRecord):
    """An admin-directed payout to an arbitrary recipient."""

    amount: Amount
    to: ValidatedAddress


# =============================================================================
# Asset Exchange
# =============================================================================

class DueDate(RecordModel):
    """Firm settlement date."""

    due: Timestamp


class AvailableDate(RecordModel):
    """Earliest date the exchange may settle."""

    avl: Timestamp


ExchangeDate = Union[DueDate, AvailableDate]


class AssetExchange(RecordModel):
    """Signed investment/capital/commitment deltas to settle between LP and raise.

    Sign convention:
        positive -> owed to the LP (raise pays)
        negative -> owed to the raise (LP pays)

    Example:
        AssetExchange(inv=10, cap=-1_000) means the LP receives 10 units of
        the investment denom and pays 1,000 of the capital denom.
    """

    inv: Optional[SignedAmount] = None
    cap: Optional[SignedAmount] = None
    com: Optional[SignedAmount] = None
    date: Optional[ExchangeDate] = None

    def is_empty(self) -> bool:
        return not any((self.inv, self.cap, self.com))


class AssetExchangeAuthorization(RecordModel):
    """A batch of exchanges staged by the admin, keyed by its full content."""

    exchanges: Tuple[AssetExchange, ...]
    to: Optional[ValidatedAddress] = None
    memo: Optional[str] = None
