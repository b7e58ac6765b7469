from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class Product:
    id: str
    step_id: str
    name: str = ""
    price: float | None = None
    weight: float | None = None  # grams
    # Empty means compatible with every anchor product
    compatible_with: frozenset[str] = frozenset()
    variant_ids: Mapping[str, str] = field(default_factory=dict)  # channel -> external variant id
    image: str | None = None
    handle: str | None = None
    stock: Any = None
    # Vehicle products only
    make: str | None = None
    model: str | None = None
    years: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Read-only copy so a held product cannot rewrite catalog variants
        object.__setattr__(self, "variant_ids", MappingProxyType(dict(self.variant_ids)))

    def variant_id_for(self, channel: str) -> str | None:
        variant_id = self.variant_ids.get(channel)
        return str(variant_id) if variant_id not in (None, "") else None

    def merged_with(self, other: "Product") -> "Product":
        """Merge fields from a later copy of the same product, keeping identity."""
        return replace(
            self,
            step_id=other.step_id or self.step_id,
            name=other.name or self.name,
            price=other.price if other.price is not None else self.price,
            weight=other.weight if other.weight is not None else self.weight,
            compatible_with=other.compatible_with or self.compatible_with,
            variant_ids={**self.variant_ids, **other.variant_ids},
            image=other.image or self.image,
            handle=other.handle or self.handle,
            stock=other.stock if other.stock is not None else self.stock,
            make=other.make or self.make,
            model=other.model or self.model,
            years=other.years or self.years,
        )
