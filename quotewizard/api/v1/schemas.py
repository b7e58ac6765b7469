from typing import Any

from pydantic import BaseModel, Field


class CreateSessionRequestSchema(BaseModel):
    session_id: str | None = None
    vehicle: str | None = None


class ToggleRequestSchema(BaseModel):
    step_id: str
    product_id: str


class JumpRequestSchema(BaseModel):
    index: int = Field(ge=0)


class VehicleRequestSchema(BaseModel):
    make: str | None = None
    model: str | None = None
    year: str | None = None


class FieldRequestSchema(BaseModel):
    step_id: str
    field_id: str
    value: str = ""


class BlurRequestSchema(BaseModel):
    step_id: str


class ProductSchema(BaseModel):
    id: str
    name: str
    price: float | None = None
    weight: float | None = None
    image: str | None = None
    handle: str | None = None


class StepSchema(BaseModel):
    id: str
    title: str
    selection_mode: str
    required: bool
    fields: list[dict[str, Any]] = Field(default_factory=list)


class ProgressStepSchema(BaseModel):
    id: str
    title: str
    status: str


class SummaryItemSchema(BaseModel):
    step_id: str
    step_title: str
    product_names: list[str]


class LineItemSchema(BaseModel):
    step_id: str
    product_id: str


class TotalsSchema(BaseModel):
    total_price: float
    total_weight: float
    line_items: list[LineItemSchema]


class ActiveStepSchema(BaseModel):
    step: StepSchema | None = None
    compatible: list[ProductSchema] = Field(default_factory=list)
    incompatible: list[ProductSchema] = Field(default_factory=list)
    selected_product_ids: list[str] = Field(default_factory=list)
    helper_text: str = ""
    is_empty: bool = False
    vehicle_options: dict[str, Any] | None = None
    vehicle_selection: dict[str, str] = Field(default_factory=dict)


class NavigationSchema(BaseModel):
    can_go_previous: bool
    can_go_next: bool
    is_last_step: bool
    next_disabled: bool
    blocking_message: str = ""


class StatusSchema(BaseModel):
    status: str
    message: str


class ConfirmationSchema(BaseModel):
    reference: str | None = None
    order_url: str | None = None
    channel: str
    summary: list[SummaryItemSchema]
    totals: TotalsSchema


class WizardViewSchema(BaseModel):
    session_id: str
    channel: str
    active_index: int
    highest_accessible_index: int
    progress: list[ProgressStepSchema]
    summary: list[SummaryItemSchema]
    totals: TotalsSchema
    active_step: ActiveStepSchema
    navigation: NavigationSchema
    form_values: dict[str, str] = Field(default_factory=dict)
    form_errors: dict[str, str] = Field(default_factory=dict)
    status: StatusSchema | None = None
    confirmation: ConfirmationSchema | None = None
    changed: bool | None = None
