from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any

from quotewizard.application.ports.snapshot_store import SnapshotStorePort

_SAFE_ID = re.compile(r"[^A-Za-z0-9_.-]")


class JsonSnapshotStore(SnapshotStorePort):
    def __init__(self, data_dir: str = "./data/sessions") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, session_id: str) -> threading.Lock:
        """Get or create a lock for a session_id."""
        with self._lock_lock:
            if session_id not in self._locks:
                self._locks[session_id] = threading.Lock()
            return self._locks[session_id]

    def _get_file_path(self, session_id: str) -> Path:
        return self._data_dir / f"{_SAFE_ID.sub('_', session_id)}.json"

    def load(self, session_id: str) -> dict[str, Any] | None:
        file_path = self._get_file_path(session_id)
        with self._get_lock(session_id):
            if not file_path.exists():
                return None
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                # Corrupted snapshot counts as no snapshot
                self._logger.warning("Corrupted snapshot file", extra={"session_id": session_id, "reason": str(e)})
                return None

    def save(self, session_id: str, snapshot: dict[str, Any]) -> None:
        """Save snapshot to JSON file atomically."""
        file_path = self._get_file_path(session_id)
        temp_path = file_path.with_suffix(".json.tmp")

        with self._get_lock(session_id):
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(snapshot, f, indent=2, ensure_ascii=False)
                temp_path.replace(file_path)
            except OSError:
                if temp_path.exists():
                    temp_path.unlink(missing_ok=True)
                raise

    def delete(self, session_id: str) -> None:
        with self._get_lock(session_id):
            self._get_file_path(session_id).unlink(missing_ok=True)
