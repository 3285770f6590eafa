"""Outbound transfer instructions.

The contract never moves tokens itself. Handlers emit TransferInstructions
and the host ledger module executes them in the same transaction that
persists the new state.
"""

from typing import Optional

from pydantic import Field

from .base import Amount, RecordModel, ValidatedAddress


class TransferInstruction(RecordModel):
    """Move `amount` of `denom` from `sender` to `recipient`."""

    denom: str = Field(min_length=1)
    amount: Amount = Field(gt=0)
    sender: ValidatedAddress = Field(description="Account debited by the host")
    recipient: ValidatedAddress = Field(description="Account credited by the host")
    memo: Optional[str] = None
    required_attribute: Optional[str] = Field(
        default=None,
        description="Attribute the host must find on the capital denom before executing",
    )
