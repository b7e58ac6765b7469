from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

import httpx

from quotewizard.application.exceptions import StorefrontContractError, StorefrontUpstreamError
from quotewizard.application.ports.enrichment import EnrichmentPort
from quotewizard.application.ports.submission import SubmissionPort
from quotewizard.core.config import settings
from quotewizard.domain.entities.submission import DraftOrderRequest, SubmissionReceipt

CUSTOMER_KEYS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "state": "state",
    "postcode": "postcode",
    "notes": "notes",
}


def _wire_variant_id(variant_id: str) -> int | str:
    return int(variant_id) if variant_id.isdigit() else variant_id


def draft_order_payload(request: DraftOrderRequest) -> dict[str, Any]:
    customer = asdict(request.customer)
    return {
        "store": request.channel,
        "customer": {wire: customer[attr] for attr, wire in CUSTOMER_KEYS.items()},
        "items": [{"variantId": _wire_variant_id(item.variant_id), "quantity": item.quantity} for item in request.items],
        "meta": dict(request.meta),
    }


class StorefrontClient(EnrichmentPort, SubmissionPort):
    """HTTP client for the storefront's enrichment and draft-order endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.STOREFRONT_BASE_URL).rstrip("/")
        self._api_token = api_token if api_token is not None else settings.STOREFRONT_API_TOKEN
        self._client = client or httpx.Client(timeout=timeout or settings.STOREFRONT_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            resp = self._client.post(url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            self._logger.error("Storefront request failed", extra={"reason": str(e)})
            raise StorefrontUpstreamError(f"Storefront request to {path} failed: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Storefront returned an error",
                extra={"reason": f"{resp.status_code} {resp.text[:200]}"},
            )
            raise StorefrontUpstreamError(f"Storefront {path} returned {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise StorefrontContractError(f"Storefront {path} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise StorefrontContractError(f"Storefront {path} returned {type(data).__name__}, expected object")
        return data

    def fetch_variants(self, channel: str, variant_ids: list[str]) -> dict[str, dict[str, Any]]:
        data = self._post(
            "/enrich",
            {"store": channel, "variantIds": [_wire_variant_id(v) for v in variant_ids]},
        )
        variants = data.get("variants") or {}
        if not isinstance(variants, dict):
            raise StorefrontContractError("Storefront enrich response has no variants object")
        return {str(k): v for k, v in variants.items() if isinstance(v, dict)}

    def create_draft_order(self, request: DraftOrderRequest) -> SubmissionReceipt:
        data = self._post("/draft-order", draft_order_payload(request))
        reference = data.get("id") or data.get("reference") or data.get("name")
        order_url = data.get("orderUrl") or ""
        if not reference and not order_url:
            raise StorefrontContractError("Storefront draft-order response has no reference")
        return SubmissionReceipt(reference=str(reference) if reference else None, order_url=order_url or None)
