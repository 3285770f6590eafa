"""Routes execute commands to their handlers.

The Dispatcher:
1. Narrows the command to the configured schema generation
2. Checks the sender against the handler's authorized set
3. Rejects attached funds the handler does not accept
4. Runs the handler on a private copy of the state
5. Re-checks ledger invariants on the result
6. Returns a Response; on any failure the input state is left untouched
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Type

from ..errors import ContractError, InvalidMessage
from ..schemas import COMMANDS, Coin, Command, ContractState, ValidatedAddress, check_schema
from .asset_exchange import (
    AuthorizeAssetExchangeHandler,
    CancelAssetExchangeAuthorizationHandler,
    CompleteAssetExchangeHandler,
)
from .base import Handler, HandlerContext, Response
from .capital_calls import CloseCapitalCallHandler, IssueCapitalCallHandler
from .lifecycle import AcceptHandler, RecoverHandler
from .payouts import IssueDistributionHandler, IssueRedemptionHandler, IssueWithdrawalHandler
from .redeem import RedeemHandler, RedeemSettlement
from .validation import check_transition, require_no_funds, require_sender

logger = logging.getLogger(__name__)


class MissingHandlerError(Exception):
    """Raised when a command type has no handler registered."""
    pass


def default_handlers(redeem_settlement: Optional[RedeemSettlement] = None) -> List[Handler]:
    return [
        RecoverHandler(),
        AcceptHandler(),
        IssueCapitalCallHandler(),
        CloseCapitalCallHandler(),
        IssueRedemptionHandler(),
        IssueDistributionHandler(),
        IssueWithdrawalHandler(),
        AuthorizeAssetExchangeHandler(),
        CancelAssetExchangeAuthorizationHandler(),
        CompleteAssetExchangeHandler(),
        RedeemHandler(redeem_settlement),
    ]


class Dispatcher:
    """Processes exactly one command per call against a ContractState.

    Example:
        dispatcher = Dispatcher()
        response = dispatcher.dispatch(state, IssueDistribution(payment=200), admin)

        response.state      # next state, for the host to persist
        response.transfers  # instructions for the host to execute
    """

    def __init__(
        self,
        handlers: Optional[Iterable[Handler]] = None,
        redeem_settlement: Optional[RedeemSettlement] = None,
    ):
        """Initialize dispatcher with handlers.

        Args:
            handlers: One handler per command type (defaults to the full set)
            redeem_settlement: Settlement plugged into the default redeem handler

        Raises:
            MissingHandlerError: If any command type is left without a handler
        """
        if handlers is None:
            handlers = default_handlers(redeem_settlement)
        self._handlers: Dict[Type[Command], Handler] = {
            handler.command_type: handler for handler in handlers
        }

        missing = [tag for tag, command in COMMANDS.items() if command not in self._handlers]
        if missing:
            raise MissingHandlerError(f"No handler registered for: {', '.join(sorted(missing))}")

    def handler_for(self, command: Command) -> Handler:
        """Look up the handler registered for the command's type.

        Raises:
            InvalidMessage: If no handler is registered for the command type
        """
        try:
            return self._handlers[type(command)]
        except KeyError:
            raise InvalidMessage(f"no handler for command {type(command).__name__}") from None

    def dispatch(
        self,
        state: ContractState,
        command: Command,
        sender: ValidatedAddress,
        funds: Sequence[Coin] = (),
    ) -> Response:
        """Validate and apply one command.

        Args:
            state: Current persisted state (not modified)
            command: Parsed execute command
            sender: Host-validated caller address
            funds: Coins the host attached to the call

        Returns:
            Response with the next state, transfers and event attributes

        Raises:
            ContractError: If the command is unauthorized or inconsistent
        """
        handler = self.handler_for(command)
        logger.debug("Dispatching %s from %s", command.tag, sender)

        try:
            check_schema(command, state.config.version)
            require_sender(handler.authorized_senders(state), sender)
            if not handler.accepts_funds:
                require_no_funds(funds)

            ctx = HandlerContext(state=state.model_copy(deep=True), sender=sender, funds=tuple(funds))
            handler.execute(ctx, command)
            check_transition(state, ctx.state)
        except ContractError as exc:
            logger.warning("Rejected %s from %s: %s: %s", command.tag, sender, exc.kind, exc.message)
            raise

        attributes = {"action": command.tag}
        attributes.update(ctx.attributes)
        logger.info(
            "Applied %s: sequence=%s transfers=%d",
            command.tag,
            ctx.state.sequence,
            len(ctx.transfers),
        )
        return Response(state=ctx.state, transfers=list(ctx.transfers), attributes=attributes)
