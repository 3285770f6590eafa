"""Staged asset exchanges between the LP and the raise.

The admin first authorizes a batch of exchanges; the batch is held in
ContractState.pending_asset_exchanges. Cancel and complete name a pending
batch by its exchange list, narrowed by `to` and `memo` when they are given.
Cancelling removes it without moving anything. Completing removes it and
emits one signed transfer per non-zero leg of each exchange, using the
recipient override and memo stored with the authorization.
"""

import logging
from typing import Set

from ..errors import InvalidAmount, NotFound
from ..schemas import (
    AssetExchangeAuthorization,
    AssetExchangeCommand,
    AuthorizeAssetExchange,
    CancelAssetExchangeAuthorization,
    CompleteAssetExchange,
    ContractState,
    ValidatedAddress,
)
from .base import Handler, HandlerContext
from .transfers import exchange_transfers

logger = logging.getLogger(__name__)


def authorization_for(command: AssetExchangeCommand) -> AssetExchangeAuthorization:
    return AssetExchangeAuthorization(
        exchanges=tuple(command.exchanges),
        to=command.to,
        memo=command.memo,
    )


def matches(authorization: AssetExchangeAuthorization, command: AssetExchangeCommand) -> bool:
    """True if the command names this authorization.

    Exchanges must be identical; `to` and `memo` are compared only when the
    command sets them.
    """
    if authorization.exchanges != tuple(command.exchanges):
        return False
    for field_name in ("to", "memo"):
        if field_name in command.model_fields_set:
            if getattr(authorization, field_name) != getattr(command, field_name):
                return False
    return True


class AssetExchangeHandler(Handler):
    """Admin-only base for the asset exchange family."""

    def authorized_senders(self, state: ContractState) -> Set[ValidatedAddress]:
        return {state.admin}

    def _take_pending(self, ctx: HandlerContext, command: AssetExchangeCommand) -> AssetExchangeAuthorization:
        pending = ctx.state.pending_asset_exchanges
        for index, authorization in enumerate(pending):
            if matches(authorization, command):
                del pending[index]
                return authorization
        raise NotFound("no matching asset exchange authorization")


class AuthorizeAssetExchangeHandler(AssetExchangeHandler):
    command_type = AuthorizeAssetExchange

    def execute(self, ctx: HandlerContext, command: AuthorizeAssetExchange) -> None:
        if not command.exchanges:
            raise InvalidAmount("at least one asset exchange is required")
        for exchange in command.exchanges:
            if exchange.is_empty():
                raise InvalidAmount("asset exchange must move at least one of inv, cap or com")
            if exchange.inv and ctx.state.investment_denom is None:
                raise InvalidAmount("contract has no investment denom for inv")

        authorization = authorization_for(command)
        if authorization in ctx.state.pending_asset_exchanges:
            logger.info("Asset exchange authorization already pending, leaving as is")
        else:
            ctx.state.pending_asset_exchanges.append(authorization)
        ctx.attr("pending", len(ctx.state.pending_asset_exchanges))


class CancelAssetExchangeAuthorizationHandler(AssetExchangeHandler):
    command_type = CancelAssetExchangeAuthorization

    def execute(self, ctx: HandlerContext, command: CancelAssetExchangeAuthorization) -> None:
        self._take_pending(ctx, command)
        ctx.attr("pending", len(ctx.state.pending_asset_exchanges))


class CompleteAssetExchangeHandler(AssetExchangeHandler):
    command_type = CompleteAssetExchange

    def execute(self, ctx: HandlerContext, command: CompleteAssetExchange) -> None:
        authorization = self._take_pending(ctx, command)
        counterparty = authorization.to or ctx.state.lp
        for exchange in authorization.exchanges:
            for transfer in exchange_transfers(ctx.state, exchange, counterparty, authorization.memo):
                ctx.emit(transfer)
        ctx.attr("pending", len(ctx.state.pending_asset_exchanges))
        ctx.attr("to", counterparty)
