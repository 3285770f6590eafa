"""Payouts from the raise: redemptions, distributions and withdrawals.

Each payout appends one sequenced ledger record and, unless it is marked
retroactive (settled outside the contract), emits a capital transfer from
the raise. The running total of all payouts must stay within uint64.
"""

from typing import Set

from ..errors import InvalidAmount
from ..schemas import (
    ContractState,
    Distribution,
    IssueDistribution,
    IssueRedemption,
    IssueWithdrawal,
    Redemption,
    Status,
    ValidatedAddress,
    Withdrawal,
)
from .base import Handler, HandlerContext
from .transfers import capital_transfer
from .validation import (
    checked_mul,
    require_disbursable,
    require_positive,
    require_status,
    resolve_payment,
)


class PayoutHandler(Handler):
    """Admin-only handler requiring an accepted subscription."""

    def authorized_senders(self, state: ContractState) -> Set[ValidatedAddress]:
        return {state.admin}

    def _pay(self, ctx: HandlerContext, amount: int, recipient: ValidatedAddress, retroactive: bool) -> None:
        if not retroactive and amount > 0:
            ctx.emit(capital_transfer(ctx.state, amount, ctx.state.raise_address, recipient))


class IssueRedemptionHandler(PayoutHandler):
    command_type = IssueRedemption
    accepts_funds = True

    def execute(self, ctx: HandlerContext, command: IssueRedemption) -> None:
        state = ctx.state
        require_status(state, Status.ACCEPTED)

        asset = command.redemption or 0
        capital = resolve_payment(command.payment, ctx.funds, state.capital_denom)
        if capital is None:
            capital = checked_mul(asset, state.capital_per_share)

        if asset == 0 and capital == 0:
            raise InvalidAmount("redemption must redeem units or pay capital")
        require_disbursable(state, capital)

        redemption = Redemption(asset=asset, capital=capital, sequence=ctx.take_sequence())
        state.redemptions.append(redemption)
        self._pay(ctx, capital, state.lp, command.is_retroactive)

        ctx.attr("sequence", redemption.sequence)
        ctx.attr("asset", asset)
        ctx.attr("capital", capital)


class IssueDistributionHandler(PayoutHandler):
    command_type = IssueDistribution
    accepts_funds = True

    def execute(self, ctx: HandlerContext, command: IssueDistribution) -> None:
        state = ctx.state
        require_status(state, Status.ACCEPTED)

        amount = resolve_payment(command.payment, ctx.funds, state.capital_denom)
        if amount is None:
            raise InvalidAmount("distribution requires a payment or attached funds")
        require_positive(amount, "distribution amount")
        require_disbursable(state, amount)

        distribution = Distribution(amount=amount, sequence=ctx.take_sequence())
        state.distributions.append(distribution)
        self._pay(ctx, amount, state.lp, command.is_retroactive)

        ctx.attr("sequence", distribution.sequence)
        ctx.attr("amount", amount)


class IssueWithdrawalHandler(PayoutHandler):
    command_type = IssueWithdrawal

    def execute(self, ctx: HandlerContext, command: IssueWithdrawal) -> None:
        state = ctx.state
        require_status(state, Status.ACCEPTED)
        require_positive(command.amount, "withdrawal amount")
        require_disbursable(state, command.amount)

        withdrawal = Withdrawal(amount=command.amount, to=command.to, sequence=ctx.take_sequence())
        state.withdrawals.append(withdrawal)
        self._pay(ctx, command.amount, command.to, retroactive=False)

        ctx.attr("sequence", withdrawal.sequence)
        ctx.attr("amount", command.amount)
        ctx.attr("to", command.to)
