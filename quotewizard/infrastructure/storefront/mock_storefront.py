from __future__ import annotations

import logging
import uuid
from typing import Any

from quotewizard.application.ports.enrichment import EnrichmentPort
from quotewizard.application.ports.submission import SubmissionPort
from quotewizard.domain.entities.submission import DraftOrderRequest, SubmissionReceipt


class MockStorefront(EnrichmentPort, SubmissionPort):
    def __init__(self, variants: dict[str, dict[str, dict[str, Any]]] | None = None) -> None:
        # channel -> variant id -> payload
        self._variants = variants or {}
        self.orders: list[DraftOrderRequest] = []
        self._logger = logging.getLogger(__name__)

    def fetch_variants(self, channel: str, variant_ids: list[str]) -> dict[str, dict[str, Any]]:
        known = self._variants.get(channel, {})
        return {vid: dict(known[vid]) for vid in variant_ids if vid in known}

    def create_draft_order(self, request: DraftOrderRequest) -> SubmissionReceipt:
        self.orders.append(request)
        reference = f"mock-{uuid.uuid4().hex[:8]}"
        self._logger.info("Mock draft order", extra={"channel": request.channel, "reason": reference})
        return SubmissionReceipt(reference=reference, order_url=f"https://example.invalid/orders/{reference}")
