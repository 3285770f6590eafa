"""Subscription lifecycle: LP recovery and acceptance of the draft."""

from typing import Set

from ..schemas import Accept, ContractState, Recover, Status, ValidatedAddress
from .base import Handler, HandlerContext
from .validation import require_status


class RecoverHandler(Handler):
    """Swap the LP identity. The ledger is left untouched."""

    command_type = Recover

    def authorized_senders(self, state: ContractState) -> Set[ValidatedAddress]:
        return {state.recovery_admin}

    def execute(self, ctx: HandlerContext, command: Recover) -> None:
        ctx.attr("previous_lp", ctx.state.lp)
        ctx.state.lp = command.lp
        ctx.attr("lp", command.lp)


class AcceptHandler(Handler):
    """Draft -> Accepted. Sent by the LP, or by the admin when the deployment allows."""

    command_type = Accept

    def authorized_senders(self, state: ContractState) -> Set[ValidatedAddress]:
        senders = {state.lp}
        if state.config.admin_may_accept:
            senders.add(state.admin)
        return senders

    def execute(self, ctx: HandlerContext, command: Accept) -> None:
        require_status(ctx.state, Status.DRAFT)
        ctx.state.status = Status.ACCEPTED
        ctx.attr("status", Status.ACCEPTED.value)
