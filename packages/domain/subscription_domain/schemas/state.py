"""The single persisted aggregate of a subscription contract.

ContractState is created once at instantiation (Draft, empty ledgers,
sequence 0) and afterwards only changed by command handlers. It is never
deleted; recovery swaps the LP identity but keeps the ledger.
"""

from enum import Enum
from typing import Iterator, List, Optional

from pydantic import Field

from .base import (
    TRUSTED_ADDRESSES,
    Amount,
    DaysOfNotice,
    DomainModel,
    U16_MAX,
    ValidatedAddress,
)
from .config import DeploymentCFG
from .ledger import (
    AssetExchangeAuthorization,
    CapitalCall,
    Distribution,
    LedgerRecord,
    Redemption,
    Withdrawal,
)


class Status(str, Enum):
    """Subscription status. Draft -> Accepted is the only transition."""

    DRAFT = "Draft"
    ACCEPTED = "Accepted"


class ContractState(DomainModel):
    """Identity, terms, status and ledger of one LP subscription.

    Key invariants:
        - sequence never decreases; every record's sequence is unique across
          all collections and strictly below the counter
        - at most one capital call is outstanding (active_capital_call)
        - status only moves Draft -> Accepted
    """

    # Parties
    admin: ValidatedAddress
    lp: ValidatedAddress
    raise_address: ValidatedAddress = Field(
        alias="raise",
        description="Pooled fund account; the instantiating sender",
    )
    recovery_admin: ValidatedAddress = Field(
        description="Break-glass identity allowed to replace the LP",
    )

    # Denoms
    capital_denom: str = Field(min_length=1)
    commitment_denom: str = Field(min_length=1)
    investment_denom: Optional[str] = None

    # Terms
    capital_per_share: Amount = Field(
        description="Capital per investment unit; 0 disables unit divisibility checks",
    )
    min_commitment: Optional[Amount] = None
    max_commitment: Optional[Amount] = None
    commitment: Optional[Amount] = Field(
        default=None,
        description="Agreed commitment (initial_commitment at instantiation)",
    )
    min_days_of_notice: Optional[DaysOfNotice] = None
    required_capital_attribute: Optional[str] = None

    status: Status = Status.DRAFT
    sequence: int = Field(
        default=0,
        ge=0,
        le=U16_MAX + 1,
        description="Next sequence number to hand out",
    )

    # Ledger
    active_capital_call: Optional[CapitalCall] = None
    closed_capital_calls: List[CapitalCall] = Field(default_factory=list)
    cancelled_capital_calls: List[CapitalCall] = Field(default_factory=list)
    distributions: List[Distribution] = Field(default_factory=list)
    redemptions: List[Redemption] = Field(default_factory=list)
    withdrawals: List[Withdrawal] = Field(default_factory=list)
    pending_asset_exchanges: List[AssetExchangeAuthorization] = Field(default_factory=list)

    config: DeploymentCFG = Field(default_factory=DeploymentCFG)

    def ledger_records(self) -> Iterator[LedgerRecord]:
        """Iterate every sequence-stamped record, including the active call."""
        if self.active_capital_call is not None:
            yield self.active_capital_call
        yield from self.closed_capital_calls
        yield from self.cancelled_capital_calls
        yield from self.distributions
        yield from self.redemptions
        yield from self.withdrawals

    def ledger_sequences(self) -> List[int]:
        return sorted(record.sequence for record in self.ledger_records())

    def commitment_cap(self) -> Optional[int]:
        """Upper bound on total called capital, or None when unbounded."""
        if self.commitment is not None:
            return self.commitment
        return self.max_commitment

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data) -> "ContractState":
        """Decode persisted state. Stored addresses were validated when written."""
        return cls.model_validate_json(data, context={TRUSTED_ADDRESSES: True})
