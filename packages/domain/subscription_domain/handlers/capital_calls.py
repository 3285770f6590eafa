"""Capital call issuance and settlement.

A capital call moves through a singleton slot:

    None --issue--> Active --close--> Closed     (capital transferred lp -> raise)
                           --close(retroactive)--> Cancelled (no transfer)

Only one call may be outstanding at a time. The sequence number is taken
when the call is issued; closing it does not consume another one.
"""

import logging
from typing import Set

from ..errors import InvalidAmount, InvalidMessage, InvalidState, NotFound
from ..schemas import (
    CapitalCall,
    CloseCapitalCall,
    ContractState,
    IssueCapitalCall,
    Status,
    U64_MAX,
    ValidatedAddress,
)
from .base import Handler, HandlerContext
from .transfers import capital_transfer
from .validation import (
    called_capital,
    checked_sub,
    require_divisible,
    require_positive,
    require_status,
)

logger = logging.getLogger(__name__)


class IssueCapitalCallHandler(Handler):
    command_type = IssueCapitalCall

    def authorized_senders(self, state: ContractState) -> Set[ValidatedAddress]:
        return {state.admin, state.raise_address}

    def execute(self, ctx: HandlerContext, command: IssueCapitalCall) -> None:
        state = ctx.state
        issuance = command.capital_call

        require_status(state, Status.ACCEPTED)
        if state.active_capital_call is not None:
            raise InvalidState("a capital call is already outstanding")

        require_positive(issuance.amount, "capital call amount")
        require_divisible(issuance.amount, state.capital_per_share, "capital call amount")

        cap = state.commitment_cap()
        remaining = checked_sub(U64_MAX if cap is None else cap, called_capital(state))
        if issuance.amount > remaining:
            raise InvalidAmount(
                f"capital call of {issuance.amount} exceeds remaining commitment of {remaining}"
            )

        if state.min_days_of_notice is not None:
            if issuance.days_of_notice is None or issuance.days_of_notice < state.min_days_of_notice:
                raise InvalidMessage(
                    f"capital call requires at least {state.min_days_of_notice} days of notice"
                )

        state.active_capital_call = CapitalCall(
            amount=issuance.amount,
            days_of_notice=issuance.days_of_notice,
            sequence=ctx.take_sequence(),
        )
        ctx.attr("sequence", state.active_capital_call.sequence)
        ctx.attr("amount", issuance.amount)


class CloseCapitalCallHandler(Handler):
    command_type = CloseCapitalCall

    def authorized_senders(self, state: ContractState) -> Set[ValidatedAddress]:
        return {state.admin}

    def execute(self, ctx: HandlerContext, command: CloseCapitalCall) -> None:
        state = ctx.state
        call = state.active_capital_call
        if call is None:
            raise NotFound("no active capital call to close")

        state.active_capital_call = None
        if command.is_retroactive:
            state.cancelled_capital_calls.append(call)
            logger.info("Capital call %s closed retroactively, no transfer", call.sequence)
        else:
            state.closed_capital_calls.append(call)
            ctx.emit(capital_transfer(state, call.amount, state.lp, state.raise_address))

        ctx.attr("sequence", call.sequence)
        ctx.attr("retroactive", str(command.is_retroactive).lower())
