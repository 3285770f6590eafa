"""Subscription Contract Domain - LP capital commitment state machine.

This package encodes a single limited-partner subscription between an LP,
a fund administrator and a capital pool (the "raise"):
- Draft negotiation and acceptance
- Capital calls, distributions, redemptions and withdrawals
- Staged, signed asset exchanges
- An append-only ledger ordered by a contract-wide sequence number

The domain layer is designed to be:
- Host-agnostic (storage, address validation and token custody are supplied
  by the host; handlers only emit transfer instructions)
- Pure at its core (each command maps a state to a new state or an error)
- Testable (plain Python with Pydantic validation)
"""

from .schemas import *  # noqa: F403, F401
from .errors import (  # noqa: F401
    ContractError,
    Unauthorized,
    InvalidState,
    InvalidAmount,
    Overflow,
    Underflow,
    NotFound,
    InvalidMessage,
)
from .handlers import Dispatcher, Response  # noqa: F401
from .contract import build_state, instantiate, execute, migrate  # noqa: F401
from .storage import KeyValueStore, MemoryStore, StateSingleton  # noqa: F401

__version__ = "0.1.0"
