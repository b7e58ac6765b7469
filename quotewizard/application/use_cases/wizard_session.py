from __future__ import annotations

import logging
from dataclasses import dataclass

from quotewizard.application.dto.wizard_view import (
    NavigationState,
    ProgressStep,
    StatusMessage,
    StepView,
    WizardView,
)
from quotewizard.application.exceptions import (
    EmptyOrderError,
    FormValidationError,
    StorefrontContractError,
    StorefrontUpstreamError,
)
from quotewizard.application.ports.snapshot_store import SnapshotStorePort
from quotewizard.application.use_cases.enrich_catalog import EnrichCatalogUseCase
from quotewizard.application.use_cases.submit_quote import SubmitQuoteUseCase, collect_form_values
from quotewizard.application.utils.channels import ChannelPolicy
from quotewizard.application.utils.field_validation import is_form_complete, validate_field
from quotewizard.application.utils.summary import build_summary_items
from quotewizard.application.utils.vehicle_options import build_vehicle_options, find_vehicle
from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import SelectionMode, StepDefinition, ValidatorKind
from quotewizard.domain.entities.submission import QuoteConfirmation
from quotewizard.domain.services.selection_store import SelectionStore
from quotewizard.domain.services.snapshot_codec import snapshot_to_dict
from quotewizard.domain.services.step_graph import StepGraphEngine


@dataclass(frozen=True)
class WizardConfig:
    vehicle_step_id: str
    anchor_step_id: str
    channel_policy: ChannelPolicy
    snapshot_version: str


class WizardSession:
    """
    Turns user intents into SelectionStore / StepGraphEngine calls for one session.

    Every selection change runs the same sequence: capture, mutate, recompute,
    clear downstream, recompute again, re-anchor, persist.
    """

    def __init__(
        self,
        session_id: str,
        steps: list[StepDefinition],
        products: list[Product],
        config: WizardConfig,
        snapshots: SnapshotStorePort,
        enrich: EnrichCatalogUseCase,
        submit: SubmitQuoteUseCase,
    ) -> None:
        self.session_id = session_id
        self._config = config
        self._snapshots = snapshots
        self._enrich = enrich
        self._submit = submit
        self._logger = logging.getLogger(__name__)

        self.store = SelectionStore(products, snapshot_version=config.snapshot_version)
        self.engine = StepGraphEngine(
            steps,
            self.store,
            anchor_step_id=config.anchor_step_id,
            step_completion=self.is_step_complete,
        )
        self.channel = config.channel_policy.default
        self._form_errors: dict[str, str] = {}
        self._touched: set[str] = set()
        self._show_all_errors = False
        self._status: StatusMessage | None = None
        self._confirmation: QuoteConfirmation | None = None

    # Lifecycle

    def start(self, preselected_vehicle_id: str | None = None) -> WizardView:
        persisted_channel: str | None = None
        raw = self._load_snapshot()
        if raw is not None and self.store.restore(raw):
            persisted_channel = raw.get("channel") if isinstance(raw, dict) else None
            self._logger.info("Session restored", extra={"session_id": self.session_id})

        if preselected_vehicle_id:
            self._apply_preselected_vehicle(preselected_vehicle_id)

        self.channel = self._config.channel_policy.initial(self._region_value(), persisted_channel)
        self.engine.reset()
        self.refresh_catalog()
        return self.view()

    def refresh_catalog(self) -> None:
        result = self._enrich.execute(self.store, self.channel)
        self._status = StatusMessage("error", result.error) if result.error else None
        self.engine.recompute_visible_steps()
        self._persist()

    def restart(self) -> WizardView:
        self.store.clear_all()
        self._form_errors = {}
        self._touched = set()
        self._show_all_errors = False
        self._confirmation = None
        self._status = None
        self.channel = self._config.channel_policy.for_region(None)
        self.engine.reset()
        try:
            self._snapshots.delete(self.session_id)
        except OSError as e:
            self._logger.warning("Failed to delete snapshot", extra={"session_id": self.session_id, "reason": str(e)})
        return self.view()

    # Selection intents

    def toggle_product(self, step_id: str, product_id: str) -> bool:
        step = self._visible_step(step_id)
        if step is None:
            return False
        mode = SelectionMode.multi if step.selection_mode == SelectionMode.multi else SelectionMode.single
        before_visible = self.engine.visible_steps()
        before = self.store.get_selected_ids(step_id)
        self.store.toggle_selection(step_id, product_id, mode)
        changed = self.store.get_selected_ids(step_id) != before
        if changed and mode == SelectionMode.single:
            self._clear_downstream(step_id, before_visible)
        self._settle(step_id)
        return changed

    def set_vehicle_make(self, make: str | None) -> bool:
        if not self.store.set_vehicle_make(make):
            return False
        self._replace_vehicle(None)
        return True

    def set_vehicle_model(self, model: str | None) -> bool:
        if not self.store.set_vehicle_model(model):
            return False
        self._replace_vehicle(None)
        return True

    def set_vehicle_year(self, year: str | None) -> bool:
        if not self.store.set_vehicle_year(year):
            return False
        vehicle = self.store.vehicle_selection
        product = find_vehicle(self._vehicle_products(), vehicle.make, vehicle.model)
        self._replace_vehicle(product.id if vehicle.year and product else None)
        return True

    def _replace_vehicle(self, product_id: str | None) -> None:
        step_id = self._config.vehicle_step_id
        before_visible = self.engine.visible_steps()
        before = self.store.get_selected_ids(step_id)
        self.store.set_selection(step_id, product_id, SelectionMode.single)
        if self.store.get_selected_ids(step_id) != before:
            self._clear_downstream(step_id, before_visible)
        self._settle(step_id)

    def _apply_preselected_vehicle(self, product_id: str) -> None:
        product = self.store.get_product(product_id)
        if product is None or product.step_id != self._config.vehicle_step_id:
            return
        self.store.set_vehicle_make(product.make)
        self.store.set_vehicle_model(product.model or product.name or product.id)
        self._replace_vehicle(product_id)

    def _clear_downstream(self, step_id: str, before_visible: list[StepDefinition]) -> None:
        """
        Clear every step after `step_id` using the post-mutation visible list.
        Steps that the mutation itself just hid are included so their answers
        cannot resurface when they become visible again.
        """
        after_visible = self.engine.recompute_visible_steps()
        in_flow = {step.id for step in before_visible} | {step.id for step in after_visible}
        ordered = [step for step in self.engine.all_steps() if step.id in in_flow]
        position = next((i for i, step in enumerate(ordered) if step.id == step_id), None)
        if position is None:
            return
        self.store.clear_selections_from(position + 1, ordered)
        self._logger.debug(
            "Cleared downstream selections", extra={"session_id": self.session_id, "step_id": step_id}
        )

    def _settle(self, step_id: str) -> None:
        self.engine.recompute_visible_steps()
        self.engine.set_active_by_id(step_id)
        self._persist()

    # Form intents

    def set_field_value(self, step_id: str, field_id: str, value: str | None) -> bool:
        step = self.engine.find_step(step_id)
        if step is None or step.selection_mode != SelectionMode.form:
            return False
        field = next((f for f in step.fields if f.id == field_id), None)
        if field is None:
            return False
        changed = self.store.set_field_value(step_id, field_id, value)

        if field.validator == ValidatorKind.state:
            channel = self._config.channel_policy.for_region(value)
            if channel != self.channel:
                self.channel = channel
                self._logger.info("Channel switched", extra={"session_id": self.session_id, "channel": channel})
                self.refresh_catalog()

        if field_id in self._touched or self._show_all_errors:
            self._form_errors[field_id] = validate_field(field, value)
        self._persist()
        return changed

    def blur_field(self, step_id: str, field_id: str) -> None:
        step = self.engine.find_step(step_id)
        field = next((f for f in step.fields if f.id == field_id), None) if step else None
        if field is None:
            return
        self._touched.add(field_id)
        self._form_errors[field_id] = validate_field(field, self.store.get_field_values(step_id).get(field_id))

    # Navigation

    def is_step_complete(self, step: StepDefinition | None) -> bool:
        if step is not None and step.selection_mode == SelectionMode.form:
            return is_form_complete(step.fields, self.store.get_field_values(step.id))
        return self.store.is_step_complete(step)

    def go_next(self) -> bool:
        active = self.engine.active_step()
        if active is not None and not self.is_step_complete(active):
            return False
        return self.engine.go_next()

    def go_previous(self) -> bool:
        if self._confirmation is not None:
            self._confirmation = None
            return True
        return self.engine.go_previous()

    def jump_to(self, index: int) -> bool:
        return self.engine.jump_to(index)

    # Submission

    def submit(self) -> QuoteConfirmation:
        """
        Send the quote. Correctable failures are recorded on the session
        status and re-raised for the caller.
        """
        self._show_all_errors = True
        visible = self.engine.visible_steps()
        self._form_errors = self._submit.validate(self.store, visible)
        self.channel = self._config.channel_policy.initial(self._region_value(), self.channel)
        try:
            confirmation = self._submit.execute(self.store, visible, self.channel)
        except FormValidationError as e:
            self._form_errors = dict(e.errors)
            raise
        except EmptyOrderError as e:
            self._status = StatusMessage("error", str(e))
            raise
        except (StorefrontUpstreamError, StorefrontContractError) as e:
            self._logger.error("Draft order failed", extra={"session_id": self.session_id, "reason": str(e)})
            self._status = StatusMessage("error", "We could not create a draft order. Please try again.")
            raise
        self._status = None
        self._confirmation = confirmation
        self._persist()
        return confirmation

    # Queries

    def view(self) -> WizardView:
        visible = self.engine.visible_steps()
        active = self.engine.active_step()
        active_index = self.engine.active_index

        step_view = StepView(step=None)
        if active is not None:
            partition = self.engine.products_for_step(active.id)
            is_vehicle = active.id == self._config.vehicle_step_id
            helper = ""
            if active.required and active.selection_mode != SelectionMode.form and not self.store.is_step_complete(active):
                helper = "Select an option to continue."
            step_view = StepView(
                step=active,
                compatible=partition.compatible,
                incompatible=partition.incompatible,
                selected_product_ids=tuple(self.store.get_selected_ids(active.id)),
                helper_text=helper,
                is_empty=active.selection_mode not in (SelectionMode.form, SelectionMode.none)
                and not partition.compatible,
                vehicle_options=build_vehicle_options(self._vehicle_products()) if is_vehicle else None,
                vehicle_selection=self.store.vehicle_selection,
            )

        active_complete = active is None or self.is_step_complete(active)
        blocking = ""
        if not active_complete:
            blocking = (
                "Complete the required fields to submit."
                if active.selection_mode == SelectionMode.form
                else "Select an option to continue."
            )

        visible_errors = {
            field_id: error
            for field_id, error in self._form_errors.items()
            if error and (self._show_all_errors or field_id in self._touched)
        }

        return WizardView(
            session_id=self.session_id,
            channel=self.channel,
            active_index=active_index,
            highest_accessible_index=self.engine.highest_accessible_index(),
            progress=tuple(
                ProgressStep(
                    id=step.id,
                    title=step.title,
                    status="complete" if i < active_index else "current" if i == active_index else "upcoming",
                )
                for i, step in enumerate(visible)
            ),
            summary=tuple(
                build_summary_items(
                    visible,
                    self.store.get_all_selected_products(),
                    self.store.vehicle_selection,
                    self._config.vehicle_step_id,
                )
            ),
            totals=self.store.get_totals(),
            step=step_view,
            navigation=NavigationState(
                can_go_previous=active_index > 0,
                can_go_next=active_index < len(visible) - 1,
                is_last_step=bool(visible) and active_index == len(visible) - 1,
                next_disabled=not active_complete,
                blocking_message=blocking,
            ),
            form_values=collect_form_values(self.store, visible),
            form_errors=visible_errors,
            status=self._status,
            confirmation=self._confirmation,
        )

    # Helpers

    def _visible_step(self, step_id: str) -> StepDefinition | None:
        index = self.engine.step_index(step_id)
        return self.engine.visible_steps()[index] if index is not None else None

    def _vehicle_products(self) -> list[Product]:
        return [p for p in self.store.products() if p.step_id == self._config.vehicle_step_id]

    def _region_value(self) -> str | None:
        for step in self.engine.all_steps():
            if step.selection_mode != SelectionMode.form:
                continue
            values = self.store.get_field_values(step.id)
            for field in step.fields:
                if field.validator == ValidatorKind.state and values.get(field.id):
                    return values[field.id]
        return None

    def _load_snapshot(self) -> dict | None:
        try:
            return self._snapshots.load(self.session_id)
        except OSError as e:
            self._logger.warning("Failed to read snapshot", extra={"session_id": self.session_id, "reason": str(e)})
            return None

    def _persist(self) -> None:
        try:
            self._snapshots.save(self.session_id, snapshot_to_dict(self.store.serialize(self.channel)))
        except OSError as e:
            self._logger.warning("Failed to persist snapshot", extra={"session_id": self.session_id, "reason": str(e)})
