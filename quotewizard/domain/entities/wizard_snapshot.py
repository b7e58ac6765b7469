from __future__ import annotations

from dataclasses import dataclass, field

from quotewizard.domain.entities.vehicle_selection import VehicleSelection


@dataclass(frozen=True)
class WizardSnapshot:
    version: str
    step_selections: dict[str, list[str]] = field(default_factory=dict)
    field_values: dict[str, dict[str, str]] = field(default_factory=dict)
    vehicle_selection: VehicleSelection = VehicleSelection()
    channel: str | None = None
