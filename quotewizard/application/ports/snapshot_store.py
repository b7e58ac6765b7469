from abc import ABC, abstractmethod
from typing import Any


class SnapshotStorePort(ABC):
    @abstractmethod
    def load(self, session_id: str) -> dict[str, Any] | None:
        """Return the raw persisted snapshot, or None if there is none."""
        raise NotImplementedError

    @abstractmethod
    def save(self, session_id: str, snapshot: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> None:
        raise NotImplementedError
