from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from quotewizard.api.v1.schemas import (
    ActiveStepSchema,
    BlurRequestSchema,
    ConfirmationSchema,
    CreateSessionRequestSchema,
    FieldRequestSchema,
    JumpRequestSchema,
    LineItemSchema,
    NavigationSchema,
    ProductSchema,
    ProgressStepSchema,
    StatusSchema,
    StepSchema,
    SummaryItemSchema,
    ToggleRequestSchema,
    TotalsSchema,
    VehicleRequestSchema,
    WizardViewSchema,
)
from quotewizard.application.dto.wizard_view import WizardView
from quotewizard.application.exceptions import (
    EmptyOrderError,
    FormValidationError,
    StorefrontContractError,
    StorefrontUpstreamError,
)
from quotewizard.application.use_cases.wizard_session import WizardSession
from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.submission import SummaryItem
from quotewizard.domain.entities.totals import Totals
from quotewizard.wiring.dependencies import create_session, drop_session, get_session

router = APIRouter()


def session_dependency(session_id: str) -> WizardSession:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown session")
    return session


def _product(product: Product) -> ProductSchema:
    return ProductSchema(
        id=product.id,
        name=product.name,
        price=product.price,
        weight=product.weight,
        image=product.image,
        handle=product.handle,
    )


def _totals(totals: Totals) -> TotalsSchema:
    return TotalsSchema(
        total_price=totals.total_price,
        total_weight=totals.total_weight,
        line_items=[LineItemSchema(step_id=li.step_id, product_id=li.product_id) for li in totals.line_items],
    )


def _summary(items: tuple[SummaryItem, ...]) -> list[SummaryItemSchema]:
    return [
        SummaryItemSchema(step_id=i.step_id, step_title=i.step_title, product_names=list(i.product_names))
        for i in items
    ]


def to_schema(view: WizardView, changed: bool | None = None) -> WizardViewSchema:
    step = view.step.step
    return WizardViewSchema(
        session_id=view.session_id,
        channel=view.channel,
        active_index=view.active_index,
        highest_accessible_index=view.highest_accessible_index,
        progress=[ProgressStepSchema(id=p.id, title=p.title, status=p.status) for p in view.progress],
        summary=_summary(view.summary),
        totals=_totals(view.totals),
        active_step=ActiveStepSchema(
            step=(
                StepSchema(
                    id=step.id,
                    title=step.title,
                    selection_mode=step.selection_mode.value,
                    required=step.required,
                    fields=[
                        {"id": f.id, "label": f.label, "required": f.required, "validator": f.validator.value}
                        for f in step.fields
                    ],
                )
                if step
                else None
            ),
            compatible=[_product(p) for p in view.step.compatible],
            incompatible=[_product(p) for p in view.step.incompatible],
            selected_product_ids=list(view.step.selected_product_ids),
            helper_text=view.step.helper_text,
            is_empty=view.step.is_empty,
            vehicle_options=asdict(view.step.vehicle_options) if view.step.vehicle_options else None,
            vehicle_selection=asdict(view.step.vehicle_selection),
        ),
        navigation=NavigationSchema(**asdict(view.navigation)),
        form_values=view.form_values,
        form_errors=view.form_errors,
        status=StatusSchema(status=view.status.status, message=view.status.message) if view.status else None,
        confirmation=(
            ConfirmationSchema(
                reference=view.confirmation.receipt.reference,
                order_url=view.confirmation.receipt.order_url,
                channel=view.confirmation.channel,
                summary=_summary(view.confirmation.summary_items),
                totals=_totals(view.confirmation.totals),
            )
            if view.confirmation
            else None
        ),
        changed=changed,
    )


@router.post("/sessions", response_model=WizardViewSchema)
def create(req: CreateSessionRequestSchema):
    session = create_session(req.session_id, req.vehicle)
    return to_schema(session.view())


@router.get("/sessions/{session_id}", response_model=WizardViewSchema)
def show(session: WizardSession = Depends(session_dependency)):
    return to_schema(session.view())


@router.post("/sessions/{session_id}/toggle", response_model=WizardViewSchema)
def toggle(req: ToggleRequestSchema, session: WizardSession = Depends(session_dependency)):
    changed = session.toggle_product(req.step_id, req.product_id)
    return to_schema(session.view(), changed)


@router.post("/sessions/{session_id}/next", response_model=WizardViewSchema)
def next_step(session: WizardSession = Depends(session_dependency)):
    changed = session.go_next()
    return to_schema(session.view(), changed)


@router.post("/sessions/{session_id}/previous", response_model=WizardViewSchema)
def previous_step(session: WizardSession = Depends(session_dependency)):
    changed = session.go_previous()
    return to_schema(session.view(), changed)


@router.post("/sessions/{session_id}/jump", response_model=WizardViewSchema)
def jump(req: JumpRequestSchema, session: WizardSession = Depends(session_dependency)):
    changed = session.jump_to(req.index)
    return to_schema(session.view(), changed)


@router.post("/sessions/{session_id}/vehicle", response_model=WizardViewSchema)
def vehicle(req: VehicleRequestSchema, session: WizardSession = Depends(session_dependency)):
    # Apply in picker order so a new make resets model and year first
    changed = False
    fields = req.model_fields_set
    if "make" in fields:
        changed = session.set_vehicle_make(req.make) or changed
    if "model" in fields:
        changed = session.set_vehicle_model(req.model) or changed
    if "year" in fields:
        changed = session.set_vehicle_year(req.year) or changed
    return to_schema(session.view(), changed)


@router.post("/sessions/{session_id}/fields", response_model=WizardViewSchema)
def set_field(req: FieldRequestSchema, session: WizardSession = Depends(session_dependency)):
    changed = session.set_field_value(req.step_id, req.field_id, req.value)
    return to_schema(session.view(), changed)


@router.post("/sessions/{session_id}/fields/{field_id}/blur", response_model=WizardViewSchema)
def blur_field(field_id: str, req: BlurRequestSchema, session: WizardSession = Depends(session_dependency)):
    session.blur_field(req.step_id, field_id)
    return to_schema(session.view())


@router.post("/sessions/{session_id}/submit", response_model=WizardViewSchema)
def submit(session: WizardSession = Depends(session_dependency)):
    try:
        session.submit()
    except FormValidationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})
    except EmptyOrderError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": {}})
    except (StorefrontUpstreamError, StorefrontContractError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return to_schema(session.view(), True)


@router.post("/sessions/{session_id}/restart", response_model=WizardViewSchema)
def restart(session: WizardSession = Depends(session_dependency)):
    # The restarted session has no snapshot left, so it leaves the live registry too
    view = session.restart()
    drop_session(session.session_id)
    return to_schema(view, True)
