from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from quotewizard.domain.entities.totals import ChannelLineItem, Totals


@dataclass(frozen=True)
class CustomerRecord:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    state: str = ""
    postcode: str = ""
    notes: str = ""


@dataclass(frozen=True)
class DraftOrderRequest:
    channel: str
    customer: CustomerRecord
    items: tuple[ChannelLineItem, ...]
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SubmissionReceipt:
    reference: str | None = None
    order_url: str | None = None


@dataclass(frozen=True)
class SummaryItem:
    step_id: str
    step_title: str
    product_names: tuple[str, ...]


@dataclass(frozen=True)
class QuoteConfirmation:
    receipt: SubmissionReceipt
    channel: str
    summary_items: tuple[SummaryItem, ...]
    totals: Totals
