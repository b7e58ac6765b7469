from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LineItem:
    step_id: str
    product_id: str


@dataclass(frozen=True)
class ChannelLineItem:
    variant_id: str
    quantity: int = 1


@dataclass(frozen=True)
class Totals:
    total_price: float
    total_weight: float
    line_items: tuple[LineItem, ...]
