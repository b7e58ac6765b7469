from __future__ import annotations

import copy
from typing import Any

from quotewizard.application.ports.snapshot_store import SnapshotStorePort


class MemorySnapshotStore(SnapshotStorePort):
    def __init__(self) -> None:
        self._snapshots: dict[str, dict[str, Any]] = {}

    def load(self, session_id: str) -> dict[str, Any] | None:
        snapshot = self._snapshots.get(session_id)
        return copy.deepcopy(snapshot) if snapshot is not None else None

    def save(self, session_id: str, snapshot: dict[str, Any]) -> None:
        self._snapshots[session_id] = copy.deepcopy(snapshot)

    def delete(self, session_id: str) -> None:
        self._snapshots.pop(session_id, None)
