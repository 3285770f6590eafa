"""Base classes for command handlers.

This module provides the foundation for the handler architecture:
- HandlerContext carrying the working state, sender and outputs of one command
- Handler abstract base class
- Response returned to the host on success
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Type

from ..schemas import (
    Coin,
    Command,
    ContractState,
    TransferInstruction,
    ValidatedAddress,
)
from .validation import next_sequence


# =============================================================================
# Handler Context
# =============================================================================

@dataclass
class HandlerContext:
    """Working data for a single command.

    `state` is a private copy owned by the dispatcher; handlers mutate it
    freely. If the handler raises, the copy and everything emitted into the
    context are discarded.

    Example:
        ctx = HandlerContext(state=state.model_copy(deep=True), sender=admin)
        handler.execute(ctx, command)

        ctx.state      # next ContractState
        ctx.transfers  # instructions for the host
    """

    state: ContractState
    sender: ValidatedAddress
    funds: Sequence[Coin] = ()
    transfers: List[TransferInstruction] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)

    def take_sequence(self) -> int:
        """Stamp one ledger record: return the current counter and advance it."""
        sequence, following = next_sequence(self.state)
        self.state.sequence = following
        return sequence

    def emit(self, transfer: TransferInstruction) -> None:
        self.transfers.append(transfer)

    def attr(self, key: str, value: object) -> None:
        self.attributes[key] = str(value)


# =============================================================================
# Handler Base Class
# =============================================================================

class Handler(ABC):
    """Abstract base class for command handlers.

    A Handler:
    1. Declares the command type it processes
    2. Declares which identities may send it (authorized_senders)
    3. Declares whether the host may attach funds (accepts_funds)
    4. Implements the state transition in execute()

    Subclass example:
        class AcceptHandler(Handler):
            command_type = Accept

            def authorized_senders(self, state):
                return {state.lp}

            def execute(self, ctx, command):
                require_status(ctx.state, Status.DRAFT)
                ctx.state.status = Status.ACCEPTED
    """

    command_type: Type[Command]
    accepts_funds: bool = False

    @abstractmethod
    def authorized_senders(self, state: ContractState) -> Set[ValidatedAddress]:
        """Identities permitted to send this command."""

    @abstractmethod
    def execute(self, ctx: HandlerContext, command: Command) -> None:
        """Apply the command to ctx.state and emit outputs into ctx.

        Raises:
            ContractError: If the command is inconsistent with the state
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(command={self.command_type.tag})"


# =============================================================================
# Response
# =============================================================================

@dataclass(frozen=True)
class Response:
    """Successful outcome of one command, for the host to commit atomically."""

    state: ContractState
    transfers: List[TransferInstruction] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)
