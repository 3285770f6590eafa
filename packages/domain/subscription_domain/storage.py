"""Persistence of the contract state in a host key/value store.

The host provides the store; the contract keeps exactly one record, the JSON
encoded ContractState, under a fixed key in its own namespace.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from .errors import NotFound
from .schemas import ContractState

STATE_KEY = b"config"


class KeyValueStore(ABC):
    """Minimal byte-oriented storage provided by the host."""

    @abstractmethod
    def get(self, key: bytes) -> Optional[bytes]:
        """Return the stored bytes, or None if the key is absent."""

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Store value under key, replacing any previous value."""


class MemoryStore(KeyValueStore):
    """Dict-backed store for tests and local simulation."""

    def __init__(self) -> None:
        self._data: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._data[key] = value


class StateSingleton:
    """Load/save access to the single ContractState record.

    Example:
        singleton = StateSingleton(store)
        singleton.save(state)
        assert singleton.load() == state
    """

    def __init__(self, store: KeyValueStore, key: bytes = STATE_KEY):
        self.store = store
        self.key = key

    def exists(self) -> bool:
        return self.store.get(self.key) is not None

    def load(self) -> ContractState:
        """Read and decode the state.

        Raises:
            NotFound: If the contract has not been instantiated
        """
        raw = self.store.get(self.key)
        if raw is None:
            raise NotFound("contract state not found")
        return ContractState.from_json(raw)

    def save(self, state: ContractState) -> None:
        self.store.set(self.key, state.to_json().encode("utf-8"))
