from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from quotewizard.application.exceptions import StorefrontContractError, StorefrontUpstreamError
from quotewizard.application.ports.enrichment import EnrichmentCachePort, EnrichmentPort
from quotewizard.application.utils.numbers import parse_number
from quotewizard.domain.entities.product import Product
from quotewizard.domain.services.selection_store import SelectionStore


@dataclass(frozen=True)
class EnrichmentResult:
    """Result of refreshing catalog data for one channel."""

    channel: str
    updated_product_ids: tuple[str, ...]
    fetched_count: int
    cached_count: int
    error: str | None = None  # user-facing, non-blocking


class EnrichCatalogUseCase:
    """Refresh price/weight/image data for the products of one channel."""

    def __init__(self, enrichment: EnrichmentPort, cache: EnrichmentCachePort) -> None:
        self._enrichment = enrichment
        self._cache = cache
        self._logger = logging.getLogger(__name__)

    def execute(self, store: SelectionStore, channel: str) -> EnrichmentResult:
        products = store.products()
        variant_ids = [vid for vid in (p.variant_id_for(channel) for p in products) if vid]
        if not variant_ids:
            self._logger.info("No variant ids to enrich", extra={"channel": channel})
            return EnrichmentResult(channel=channel, updated_product_ids=(), fetched_count=0, cached_count=0)

        cached: dict[str, dict[str, Any]] = {}
        missing: list[str] = []
        for variant_id in dict.fromkeys(variant_ids):
            entry = self._cache.get(channel, variant_id)
            if entry is not None:
                cached[variant_id] = entry
            else:
                missing.append(variant_id)

        fetched: dict[str, dict[str, Any]] = {}
        error: str | None = None
        if missing:
            try:
                fetched = self._enrichment.fetch_variants(channel, missing)
            except (StorefrontUpstreamError, StorefrontContractError) as e:
                self._logger.warning("Enrichment failed", extra={"channel": channel, "reason": str(e)})
                error = "We could not refresh pricing. Showing saved values."
            for variant_id, payload in fetched.items():
                self._cache.put(channel, str(variant_id), payload)

        merged = {**cached, **{str(k): v for k, v in fetched.items()}}
        updates: list[Product] = []
        for product in products:
            variant_id = product.variant_id_for(channel)
            payload = merged.get(variant_id) if variant_id else None
            if not payload:
                continue
            updates.append(apply_enrichment(product, payload))

        store.set_products(updates)
        return EnrichmentResult(
            channel=channel,
            updated_product_ids=tuple(p.id for p in updates),
            fetched_count=len(fetched),
            cached_count=len(cached),
            error=error,
        )


def apply_enrichment(product: Product, payload: dict[str, Any]) -> Product:
    """Overlay storefront data on a product. Unparsable numbers keep the catalog value."""
    return replace(
        product,
        price=parse_number(payload.get("price"), product.price),
        weight=parse_number(payload.get("weight"), product.weight),
        image=payload.get("image") or product.image,
        handle=payload.get("handle") or product.handle,
        stock=payload.get("stock") or product.stock,
    )
