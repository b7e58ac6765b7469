from __future__ import annotations

import logging
from dataclasses import asdict

from quotewizard.application.exceptions import EmptyOrderError, FormValidationError
from quotewizard.application.ports.submission import SubmissionPort
from quotewizard.application.utils.field_validation import validate_fields
from quotewizard.application.utils.summary import build_summary_items
from quotewizard.domain.entities.step_definition import SelectionMode, StepDefinition
from quotewizard.domain.entities.submission import (
    CustomerRecord,
    DraftOrderRequest,
    QuoteConfirmation,
)
from quotewizard.domain.services.selection_store import SelectionStore

CUSTOMER_FIELD_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "state": "state",
    "postcode": "postcode",
    "notes": "notes",
}


def collect_form_values(store: SelectionStore, steps: list[StepDefinition]) -> dict[str, str]:
    values: dict[str, str] = {}
    for step in steps:
        if step.selection_mode == SelectionMode.form:
            values.update(store.get_field_values(step.id))
    return values


def build_customer(values: dict[str, str]) -> CustomerRecord:
    return CustomerRecord(
        **{attr: (values.get(field_id) or "").strip() for field_id, attr in CUSTOMER_FIELD_MAP.items()}
    )


class SubmitQuoteUseCase:
    def __init__(self, submission: SubmissionPort, vehicle_step_id: str) -> None:
        self._submission = submission
        self._vehicle_step_id = vehicle_step_id
        self._logger = logging.getLogger(__name__)

    def validate(self, store: SelectionStore, steps: list[StepDefinition]) -> dict[str, str]:
        errors: dict[str, str] = {}
        for step in steps:
            if step.selection_mode == SelectionMode.form:
                errors.update(validate_fields(step.fields, store.get_field_values(step.id)))
        return errors

    def execute(
        self,
        store: SelectionStore,
        visible_steps: list[StepDefinition],
        channel: str,
    ) -> QuoteConfirmation:
        """
        Build and send the draft order.
        Raises FormValidationError or EmptyOrderError for conditions the user must fix,
        and lets storefront errors propagate.
        """
        errors = self.validate(store, visible_steps)
        if errors:
            raise FormValidationError(errors)

        items = store.get_line_items_for_channel(channel)
        if not items:
            self._logger.info("No line items resolved for channel", extra={"channel": channel})
            raise EmptyOrderError("No products could be added to the draft order. Please review your selections.")

        values = collect_form_values(store, visible_steps)
        request = DraftOrderRequest(
            channel=channel,
            customer=build_customer(values),
            items=tuple(items),
            meta={
                "vehicleId": store.get_anchor_id(self._vehicle_step_id),
                "vehicleSelection": asdict(store.vehicle_selection),
                "selections": store.step_selections(),
            },
        )
        receipt = self._submission.create_draft_order(request)
        self._logger.info(
            "Draft order created",
            extra={"channel": channel, "reason": receipt.reference or receipt.order_url},
        )

        return QuoteConfirmation(
            receipt=receipt,
            channel=channel,
            summary_items=tuple(
                build_summary_items(
                    visible_steps,
                    store.get_all_selected_products(),
                    store.vehicle_selection,
                    self._vehicle_step_id,
                )
            ),
            totals=store.get_totals(),
        )
