"""LP-initiated redeem.

What `redeem` settles is not yet decided: it could pay out accumulated
redemption records, trigger a host-side burn, or simply acknowledge. The
handler enforces the LP-only authorization and hands the context to a
pluggable settlement callable. The default settlement changes nothing and
emits nothing.
"""

import logging
from typing import Callable, Optional, Set

from ..schemas import ContractState, Redeem, ValidatedAddress
from .base import Handler, HandlerContext

logger = logging.getLogger(__name__)

RedeemSettlement = Callable[[HandlerContext], None]


def acknowledge_redeem(ctx: HandlerContext) -> None:
    """Default settlement: record the request, move nothing."""
    logger.info("Redeem requested by %s; no settlement configured", ctx.sender)
    ctx.attr("settled", "false")


class RedeemHandler(Handler):
    command_type = Redeem

    def __init__(self, settlement: Optional[RedeemSettlement] = None):
        self.settlement = settlement or acknowledge_redeem

    def authorized_senders(self, state: ContractState) -> Set[ValidatedAddress]:
        return {state.lp}

    def execute(self, ctx: HandlerContext, command: Redeem) -> None:
        self.settlement(ctx)
