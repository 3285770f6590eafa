"""Typed failures raised by the subscription contract.

Every handler either returns a new state or raises one of these. The host
treats any ContractError as an aborted transaction: nothing is persisted and
no transfer instruction is executed.
"""


class ContractError(Exception):
    """Base class for all contract failures."""

    kind = "ContractError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class Unauthorized(ContractError):
    """Raised when the sender is not permitted to send the command."""

    kind = "Unauthorized"


class InvalidState(ContractError):
    """Raised when a status or ledger precondition is not met."""

    kind = "InvalidState"


class InvalidAmount(ContractError):
    """Raised for zero, out-of-bounds or wrongly denominated amounts."""

    kind = "InvalidAmount"


class Overflow(ContractError):
    """Raised when checked arithmetic exceeds the type's upper bound."""

    kind = "Overflow"


class Underflow(ContractError):
    """Raised when checked arithmetic drops below the type's lower bound."""

    kind = "Underflow"


class NotFound(ContractError):
    """Raised when a command references a ledger entry that does not exist."""

    kind = "NotFound"


class InvalidMessage(ContractError):
    """Raised when a message does not match the schema in force."""

    kind = "InvalidMessage"
