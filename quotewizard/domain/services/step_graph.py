from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import StepDefinition
from quotewizard.domain.services.selection_store import SelectionStore
from quotewizard.domain.services.visibility import is_visible


@dataclass(frozen=True)
class ProductPartition:
    compatible: tuple[Product, ...]
    incompatible: tuple[Product, ...]


class StepGraphEngine:
    """
    Which authored steps are currently in the flow, and which one is active.

    The authored order never changes; visibility is recomputed from the
    SelectionStore. The engine does not gate `go_next` on completeness,
    that is the caller's job.
    """

    def __init__(
        self,
        steps: Iterable[StepDefinition],
        store: SelectionStore,
        anchor_step_id: str | None = None,
        step_completion: Callable[[StepDefinition], bool] | None = None,
    ) -> None:
        self._steps: tuple[StepDefinition, ...] = tuple(steps)
        self._store = store
        self._anchor_step_id = anchor_step_id
        self._step_completion = step_completion or store.is_step_complete
        self._visible: list[StepDefinition] = []
        self._active_index = 0
        self.recompute_visible_steps()

    @property
    def active_index(self) -> int:
        return self._active_index

    def all_steps(self) -> list[StepDefinition]:
        return list(self._steps)

    def find_step(self, step_id: str) -> StepDefinition | None:
        return next((step for step in self._steps if step.id == step_id), None)

    def recompute_visible_steps(self) -> list[StepDefinition]:
        self._visible = [
            step for step in self._steps if is_visible(step.visibility_rule, self._store.get_selected_ids)
        ]
        if self._active_index >= len(self._visible):
            self._active_index = max(len(self._visible) - 1, 0)
        return list(self._visible)

    def visible_steps(self) -> list[StepDefinition]:
        return list(self._visible)

    def step_index(self, step_id: str) -> int | None:
        for index, step in enumerate(self._visible):
            if step.id == step_id:
                return index
        return None

    def active_step(self) -> StepDefinition | None:
        if not self._visible:
            return None
        return self._visible[self._active_index]

    def go_next(self) -> bool:
        if self._active_index < len(self._visible) - 1:
            self._active_index += 1
            return True
        return False

    def go_previous(self) -> bool:
        if self._active_index > 0:
            self._active_index -= 1
            return True
        return False

    def highest_accessible_index(self) -> int:
        """Position of the first incomplete required step, or the last position when all are complete."""
        for index, step in enumerate(self._visible):
            if not self._step_completion(step):
                return index
        return max(len(self._visible) - 1, 0)

    def jump_to(self, index: int) -> bool:
        if index < 0 or index >= len(self._visible):
            return False
        if index > self.highest_accessible_index():
            return False
        changed = index != self._active_index
        self._active_index = index
        return changed

    def set_active_by_id(self, step_id: str) -> bool:
        index = self.step_index(step_id)
        if index is None:
            return False
        changed = index != self._active_index
        self._active_index = index
        return changed

    def reset(self) -> None:
        self.recompute_visible_steps()
        self._active_index = 0

    def products_for_step(self, step_id: str, store: SelectionStore | None = None) -> ProductPartition:
        """
        Split a step's products by compatibility with the anchor step's selection.
        With no anchor selected every product counts as compatible.
        """
        store = store or self._store
        anchor_id = store.get_anchor_id(self._anchor_step_id) if self._anchor_step_id else None
        compatible: list[Product] = []
        incompatible: list[Product] = []
        for product in store.products():
            if product.step_id != step_id:
                continue
            if not anchor_id or not product.compatible_with or anchor_id in product.compatible_with:
                compatible.append(product)
            else:
                incompatible.append(product)
        return ProductPartition(compatible=tuple(compatible), incompatible=tuple(incompatible))
