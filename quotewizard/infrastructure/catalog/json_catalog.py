from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from quotewizard.application.ports.catalog_source import CatalogSourcePort
from quotewizard.application.utils.numbers import parse_number
from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import (
    FieldDescriptor,
    SelectionMode,
    StepDefinition,
    ValidatorKind,
)
from quotewizard.domain.services.visibility import parse_visibility_rule

logger = logging.getLogger(__name__)


def product_from_dict(data: dict[str, Any]) -> Product:
    compatible = data.get("compatibleWith")
    if compatible is None:
        compatible = data.get("compatibleVehicles")
    variant_ids = data.get("variantIds") or data.get("variantIdByStore") or {}
    return Product(
        id=str(data["id"]),
        step_id=str(data.get("stepId") or ""),
        name=str(data.get("name") or data.get("title") or ""),
        price=parse_number(data.get("price")),
        weight=parse_number(data.get("weight")),
        compatible_with=frozenset(str(v) for v in (compatible or [])),
        variant_ids={str(channel): str(vid) for channel, vid in variant_ids.items() if vid not in (None, "")},
        image=data.get("image"),
        handle=data.get("handle"),
        stock=data.get("stock"),
        make=data.get("make"),
        model=data.get("model"),
        years=tuple(str(y).strip() for y in (data.get("years") or []) if str(y).strip()),
    )


def _selection_mode(value: Any) -> SelectionMode:
    try:
        return SelectionMode(value or SelectionMode.single)
    except ValueError:
        logger.warning("Unknown selection mode, using single", extra={"reason": repr(value)})
        return SelectionMode.single


def _validator_kind(value: Any) -> ValidatorKind:
    try:
        return ValidatorKind(value or ValidatorKind.none)
    except ValueError:
        return ValidatorKind.none


def field_from_dict(data: dict[str, Any]) -> FieldDescriptor:
    return FieldDescriptor(
        id=str(data["id"]),
        label=str(data.get("label") or ""),
        required=bool(data.get("required", False)),
        validator=_validator_kind(data.get("validator")),
    )


def step_from_dict(data: dict[str, Any]) -> StepDefinition:
    return StepDefinition(
        id=str(data["id"]),
        title=str(data.get("title") or ""),
        selection_mode=_selection_mode(data.get("selectionMode")),
        required=bool(data.get("required", False)),
        visibility_rule=parse_visibility_rule(data.get("visibleWhen")),
        fields=tuple(field_from_dict(f) for f in data.get("fields") or []),
    )


class JsonCatalogSource(CatalogSourcePort):
    """Steps and products authored in one JSON file: {"steps": [...], "products": [...]}."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is None:
            with open(self._path, "r", encoding="utf-8") as f:
                self._data = json.load(f)
        return self._data

    def load_products(self) -> list[Product]:
        products: list[Product] = []
        for raw in self._load().get("products", []):
            if not isinstance(raw, dict) or not raw.get("id"):
                logger.warning("Skipping product without id", extra={"reason": repr(raw)})
                continue
            products.append(product_from_dict(raw))
        return products

    def load_steps(self) -> list[StepDefinition]:
        return [step_from_dict(raw) for raw in self._load().get("steps", []) if isinstance(raw, dict) and raw.get("id")]
