from __future__ import annotations

from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import StepDefinition
from quotewizard.domain.entities.submission import SummaryItem
from quotewizard.domain.entities.vehicle_selection import VehicleSelection


def build_summary_items(
    steps: list[StepDefinition],
    selections: dict[str, list[Product]],
    vehicle_selection: VehicleSelection,
    vehicle_step_id: str,
) -> list[SummaryItem]:
    """One summary line per visible step that has a selection, in step order."""
    items: list[SummaryItem] = []
    for step in steps:
        selected = selections.get(step.id) or []
        if not selected:
            continue
        names = []
        for product in selected:
            name = product.name or product.id
            if step.id == vehicle_step_id and vehicle_selection.year:
                name = f"{name} {vehicle_selection.year}"
            names.append(name)
        items.append(SummaryItem(step_id=step.id, step_title=step.title or step.id, product_names=tuple(names)))
    return items
