"""Command handlers for the subscription contract.

This package contains the transition layer that turns a ContractState and an
inbound command into the next state and outbound transfer instructions.

Architecture:
    Command (message) -> Dispatcher -> Handler (transition) -> Response

Key concepts:
- Each Handler declares its command type, its authorized senders and
  whether it accepts attached funds
- Handlers work on a private copy of the state; failures discard it
- Shared invariant checks and checked arithmetic live in validation
- Transfer instructions are assembled in transfers

Usage:
    from subscription_domain.handlers import Dispatcher

    dispatcher = Dispatcher()
    response = dispatcher.dispatch(state, command, sender)
"""

from .base import Handler, HandlerContext, Response
from .dispatch import Dispatcher, MissingHandlerError, default_handlers
from .lifecycle import AcceptHandler, RecoverHandler
from .capital_calls import CloseCapitalCallHandler, IssueCapitalCallHandler
from .payouts import IssueDistributionHandler, IssueRedemptionHandler, IssueWithdrawalHandler
from .asset_exchange import (
    AuthorizeAssetExchangeHandler,
    CancelAssetExchangeAuthorizationHandler,
    CompleteAssetExchangeHandler,
)
from .redeem import RedeemHandler, RedeemSettlement, acknowledge_redeem

__all__ = [
    "Handler",
    "HandlerContext",
    "Response",
    "Dispatcher",
    "MissingHandlerError",
    "default_handlers",
    "AcceptHandler",
    "RecoverHandler",
    "CloseCapitalCallHandler",
    "IssueCapitalCallHandler",
    "IssueDistributionHandler",
    "IssueRedemptionHandler",
    "IssueWithdrawalHandler",
    "AuthorizeAssetExchangeHandler",
    "CancelAssetExchangeAuthorizationHandler",
    "CompleteAssetExchangeHandler",
    "RedeemHandler",
    "RedeemSettlement",
    "acknowledge_redeem",
]
