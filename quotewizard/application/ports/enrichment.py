from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class EnrichmentPort(ABC):
    @abstractmethod
    def fetch_variants(self, channel: str, variant_ids: list[str]) -> dict[str, dict[str, Any]]:
        """Fetch live variant data (price, weight, image, handle, stock) keyed by variant id."""
        raise NotImplementedError


class EnrichmentCachePort(ABC):
    @abstractmethod
    def get(self, channel: str, variant_id: str) -> dict[str, Any] | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, channel: str, variant_id: str, payload: dict[str, Any]) -> None:
        raise NotImplementedError
