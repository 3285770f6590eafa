"""Assembly of outbound transfer instructions.

Handlers describe money movement in terms of parties and amounts; this
module stamps denoms, capital attributes and signs onto TransferInstructions.
"""

from typing import List, Optional

from ..errors import InvalidAmount
from ..schemas import (
    AssetExchange,
    ContractState,
    TransferInstruction,
    ValidatedAddress,
)


def capital_transfer(
    state: ContractState,
    amount: int,
    sender: ValidatedAddress,
    recipient: ValidatedAddress,
    memo: Optional[str] = None,
) -> TransferInstruction:
    """Transfer of the capital denom, carrying the required capital attribute."""
    return TransferInstruction(
        denom=state.capital_denom,
        amount=amount,
        sender=sender,
        recipient=recipient,
        memo=memo,
        required_attribute=state.required_capital_attribute,
    )


def signed_transfer(
    state: ContractState,
    denom: Optional[str],
    delta: Optional[int],
    counterparty: ValidatedAddress,
    memo: Optional[str] = None,
    required_attribute: Optional[str] = None,
) -> Optional[TransferInstruction]:
    """Settle one signed delta between the raise and a counterparty.

    Positive deltas are owed to the counterparty and paid by the raise;
    negative deltas are paid by the counterparty to the raise. Zero or
    missing deltas produce nothing.

    Raises:
        InvalidAmount: If a delta is given for a denom the contract lacks
    """
    if not delta:
        return None
    if denom is None:
        raise InvalidAmount("no denom configured for this asset exchange leg")

    if delta > 0:
        sender, recipient = state.raise_address, counterparty
    else:
        sender, recipient = counterparty, state.raise_address

    return TransferInstruction(
        denom=denom,
        amount=abs(delta),
        sender=sender,
        recipient=recipient,
        memo=memo,
        required_attribute=required_attribute,
    )


def exchange_transfers(
    state: ContractState,
    exchange: AssetExchange,
    counterparty: ValidatedAddress,
    memo: Optional[str] = None,
) -> List[TransferInstruction]:
    """Transfers for the investment, capital and commitment legs, in that order."""
    legs = [
        signed_transfer(state, state.investment_denom, exchange.inv, counterparty, memo),
        signed_transfer(
            state,
            state.capital_denom,
            exchange.cap,
            counterparty,
            memo,
            state.required_capital_attribute,
        ),
        signed_transfer(state, state.commitment_denom, exchange.com, counterparty, memo),
    ]
    return [leg for leg in legs if leg is not None]
