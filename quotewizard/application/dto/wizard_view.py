from __future__ import annotations

from dataclasses import dataclass, field

from quotewizard.application.utils.vehicle_options import VehicleOptions
from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import StepDefinition
from quotewizard.domain.entities.submission import QuoteConfirmation, SummaryItem
from quotewizard.domain.entities.totals import Totals
from quotewizard.domain.entities.vehicle_selection import VehicleSelection


@dataclass(frozen=True)
class StatusMessage:
    status: str  # "info", "error"
    message: str


@dataclass(frozen=True)
class ProgressStep:
    id: str
    title: str
    status: str  # "complete", "current", "upcoming"


@dataclass(frozen=True)
class NavigationState:
    can_go_previous: bool
    can_go_next: bool
    is_last_step: bool
    next_disabled: bool
    blocking_message: str = ""


@dataclass(frozen=True)
class StepView:
    step: StepDefinition | None
    compatible: tuple[Product, ...] = ()
    incompatible: tuple[Product, ...] = ()
    selected_product_ids: tuple[str, ...] = ()
    helper_text: str = ""
    is_empty: bool = False
    vehicle_options: VehicleOptions | None = None
    vehicle_selection: VehicleSelection = VehicleSelection()


@dataclass(frozen=True)
class WizardView:
    session_id: str
    channel: str
    active_index: int
    highest_accessible_index: int
    progress: tuple[ProgressStep, ...]
    summary: tuple[SummaryItem, ...]
    totals: Totals
    step: StepView
    navigation: NavigationState
    form_values: dict[str, str] = field(default_factory=dict)
    form_errors: dict[str, str] = field(default_factory=dict)
    status: StatusMessage | None = None
    confirmation: QuoteConfirmation | None = None
