from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import SelectionMode, StepDefinition
from quotewizard.domain.entities.totals import ChannelLineItem, LineItem, Totals
from quotewizard.domain.entities.vehicle_selection import VehicleSelection
from quotewizard.domain.entities.wizard_snapshot import WizardSnapshot
from quotewizard.domain.services.snapshot_codec import snapshot_from_dict

DEFAULT_SNAPSHOT_VERSION = "1.1.0"


class SelectionStore:
    """
    What the user has chosen, plus the catalog it was chosen from.

    Knows nothing about step order or visibility. Every accessor returns a copy,
    and mutators return True only when state actually changed.
    """

    def __init__(
        self,
        products: Iterable[Product] | None = None,
        snapshot_version: str = DEFAULT_SNAPSHOT_VERSION,
    ) -> None:
        self._products: dict[str, Product] = {}
        self._selections: dict[str, list[str]] = {}
        self._field_values: dict[str, dict[str, str]] = {}
        self._vehicle = VehicleSelection()
        self._snapshot_version = snapshot_version
        self._logger = logging.getLogger(__name__)
        self.set_products(products or [])

    # Catalog

    def set_products(self, products: Iterable[Product]) -> bool:
        """Merge products into the catalog by id. Ids missing from `products` are kept."""
        changed = False
        for product in products:
            if not product or not product.id:
                continue
            existing = self._products.get(product.id)
            merged = existing.merged_with(product) if existing else product
            if merged != existing:
                self._products[product.id] = merged
                changed = True
        return changed

    def get_product(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def products(self) -> list[Product]:
        return list(self._products.values())

    def _is_recordable(self, step_id: str, product_id: str | None) -> bool:
        product = self._products.get(product_id) if product_id else None
        return product is not None and product.step_id == step_id

    # Selections

    def toggle_selection(self, step_id: str, product_id: str, mode: SelectionMode | str) -> bool:
        if not self._is_recordable(step_id, product_id):
            return False

        existing = self._selections.get(step_id, [])
        if mode == SelectionMode.multi:
            if product_id in existing:
                next_ids = [pid for pid in existing if pid != product_id]
            else:
                next_ids = [*existing, product_id]
        else:
            # Re-clicking the sole selection deselects it
            next_ids = [] if existing == [product_id] else [product_id]

        return self._replace(step_id, next_ids)

    def set_selection(
        self,
        step_id: str,
        product_ids: str | Sequence[str] | None,
        mode: SelectionMode | str | None = None,
    ) -> bool:
        """
        Set a step's whole answer. None or an empty list clears the step.
        Ids that are unknown or belong to another step are dropped; when nothing
        recordable remains the call leaves the step untouched.
        """
        if product_ids is None:
            return self._replace(step_id, [])

        ids = [product_ids] if isinstance(product_ids, str) else list(product_ids)
        if not ids:
            return self._replace(step_id, [])

        filtered: list[str] = []
        for product_id in ids:
            if self._is_recordable(step_id, product_id) and product_id not in filtered:
                filtered.append(product_id)
        if not filtered:
            self._logger.debug("Ignoring selection of unknown products", extra={"step_id": step_id})
            return False
        if mode == SelectionMode.single:
            filtered = filtered[:1]
        return self._replace(step_id, filtered)

    def _replace(self, step_id: str, product_ids: list[str]) -> bool:
        previous = self._selections.get(step_id, [])
        if previous == product_ids:
            return False
        if product_ids:
            self._selections[step_id] = list(product_ids)
        else:
            self._selections.pop(step_id, None)
        return True

    def clear_selection(self, step_id: str) -> bool:
        return self._replace(step_id, [])

    def clear_selections_from(self, step_index: int, ordered_steps: Sequence[StepDefinition]) -> bool:
        """Drop selections and field values for every step at or after `step_index`."""
        changed = False
        for step in list(ordered_steps)[max(step_index, 0):]:
            if self._selections.pop(step.id, None) is not None:
                changed = True
            if self._field_values.pop(step.id, None) is not None:
                changed = True
        return changed

    def clear_all(self) -> None:
        self._selections = {}
        self._field_values = {}
        self._vehicle = VehicleSelection()

    def get_selected_ids(self, step_id: str) -> list[str]:
        return list(self._selections.get(step_id, []))

    def get_selected_products(self, step_id: str) -> list[Product]:
        return [self._products[pid] for pid in self._selections.get(step_id, []) if pid in self._products]

    def get_all_selected_products(self) -> dict[str, list[Product]]:
        return {step_id: self.get_selected_products(step_id) for step_id in self._selections}

    def get_anchor_id(self, step_id: str) -> str | None:
        ids = self._selections.get(step_id)
        return ids[0] if ids else None

    def step_selections(self) -> dict[str, list[str]]:
        return {step_id: list(ids) for step_id, ids in self._selections.items()}

    # Form fields

    def set_field_value(self, step_id: str, field_id: str, value: str | None) -> bool:
        values = self._field_values.setdefault(step_id, {})
        value = value or ""
        if values.get(field_id) == value:
            return False
        values[field_id] = value
        return True

    def get_field_values(self, step_id: str) -> dict[str, str]:
        return dict(self._field_values.get(step_id, {}))

    # Vehicle picker

    @property
    def vehicle_selection(self) -> VehicleSelection:
        return self._vehicle

    def set_vehicle_make(self, make: str | None) -> bool:
        return self._set_vehicle(self._vehicle.with_make(make))

    def set_vehicle_model(self, model: str | None) -> bool:
        return self._set_vehicle(self._vehicle.with_model(model))

    def set_vehicle_year(self, year: str | None) -> bool:
        return self._set_vehicle(self._vehicle.with_year(year))

    def _set_vehicle(self, vehicle: VehicleSelection) -> bool:
        if vehicle == self._vehicle:
            return False
        self._vehicle = vehicle
        return True

    # Derived

    def is_step_complete(self, step: StepDefinition | None) -> bool:
        if step is None:
            return False
        if step.selection_mode in (SelectionMode.none, SelectionMode.form):
            return True
        selected = self._selections.get(step.id, [])
        if not selected:
            return not step.required
        if step.selection_mode == SelectionMode.single:
            return len(selected) == 1
        return True

    def get_totals(self) -> Totals:
        total_price = 0.0
        total_weight = 0.0
        line_items: list[LineItem] = []
        for step_id, product_ids in self._selections.items():
            for product_id in product_ids:
                product = self._products.get(product_id)
                if product is None:
                    continue
                total_price += product.price or 0
                total_weight += product.weight or 0
                line_items.append(LineItem(step_id=step_id, product_id=product_id))
        return Totals(total_price=total_price, total_weight=total_weight, line_items=tuple(line_items))

    def get_line_items_for_channel(self, channel: str) -> list[ChannelLineItem]:
        """Selected products resolved to the channel's variant ids. Products without one are skipped."""
        items: list[ChannelLineItem] = []
        for line in self.get_totals().line_items:
            variant_id = self._products[line.product_id].variant_id_for(channel)
            if variant_id:
                items.append(ChannelLineItem(variant_id=variant_id))
        return items

    # Persistence

    def serialize(self, channel: str | None = None) -> WizardSnapshot:
        return WizardSnapshot(
            version=self._snapshot_version,
            step_selections=self.step_selections(),
            field_values={step_id: dict(values) for step_id, values in self._field_values.items()},
            vehicle_selection=self._vehicle,
            channel=channel,
        )

    def restore(self, snapshot: WizardSnapshot | dict[str, Any] | None) -> bool:
        """
        Adopt a persisted snapshot. A missing, malformed or foreign-version snapshot
        is ignored entirely; products no longer in the catalog are dropped.
        """
        if snapshot is None:
            return False
        if not isinstance(snapshot, WizardSnapshot):
            try:
                snapshot = snapshot_from_dict(snapshot)
            except ValueError as e:
                self._logger.warning("Discarding malformed snapshot", extra={"reason": str(e)})
                return False
        if snapshot.version != self._snapshot_version:
            self._logger.info(
                "Discarding snapshot with foreign version",
                extra={"reason": f"{snapshot.version} != {self._snapshot_version}"},
            )
            return False

        selections: dict[str, list[str]] = {}
        for step_id, ids in snapshot.step_selections.items():
            kept: list[str] = []
            for product_id in ids:
                if self._is_recordable(step_id, product_id) and product_id not in kept:
                    kept.append(product_id)
            if kept:
                selections[step_id] = kept

        self._selections = selections
        self._field_values = {step_id: dict(values) for step_id, values in snapshot.field_values.items()}
        self._vehicle = snapshot.vehicle_selection
        return True
