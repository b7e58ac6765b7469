from __future__ import annotations

from typing import Any

from quotewizard.application.ports.enrichment import EnrichmentCachePort


class MemoryEnrichmentCache(EnrichmentCachePort):
    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], dict[str, Any]] = {}

    def get(self, channel: str, variant_id: str) -> dict[str, Any] | None:
        entry = self._entries.get((channel, variant_id))
        return dict(entry) if entry is not None else None

    def put(self, channel: str, variant_id: str, payload: dict[str, Any]) -> None:
        self._entries[(channel, variant_id)] = dict(payload)
