from __future__ import annotations

from typing import Any

from quotewizard.domain.entities.vehicle_selection import VehicleSelection
from quotewizard.domain.entities.wizard_snapshot import WizardSnapshot


def snapshot_to_dict(snapshot: WizardSnapshot) -> dict[str, Any]:
    """Serialize WizardSnapshot to the persisted JSON shape."""
    return {
        "version": snapshot.version,
        "stepSelections": {step_id: list(ids) for step_id, ids in snapshot.step_selections.items()},
        "fieldValues": {step_id: dict(values) for step_id, values in snapshot.field_values.items()},
        "vehicleSelection": {
            "make": snapshot.vehicle_selection.make,
            "model": snapshot.vehicle_selection.model,
            "year": snapshot.vehicle_selection.year,
        },
        "channel": snapshot.channel,
    }


def snapshot_from_dict(data: Any) -> WizardSnapshot:
    """
    Deserialize the persisted JSON shape.
    Raises ValueError on any shape problem so callers can discard the whole snapshot.
    """
    if not isinstance(data, dict):
        raise ValueError("snapshot must be an object")

    version = data.get("version")
    if not isinstance(version, str) or not version:
        raise ValueError("snapshot version missing")

    raw_selections = data.get("stepSelections", {}) or {}
    if not isinstance(raw_selections, dict):
        raise ValueError("stepSelections must be an object")
    step_selections: dict[str, list[str]] = {}
    for step_id, ids in raw_selections.items():
        if not isinstance(ids, list):
            raise ValueError(f"stepSelections[{step_id}] must be a list")
        step_selections[str(step_id)] = [str(product_id) for product_id in ids]

    raw_fields = data.get("fieldValues", {}) or {}
    if not isinstance(raw_fields, dict):
        raise ValueError("fieldValues must be an object")
    field_values: dict[str, dict[str, str]] = {}
    for step_id, values in raw_fields.items():
        if not isinstance(values, dict):
            raise ValueError(f"fieldValues[{step_id}] must be an object")
        field_values[str(step_id)] = {
            str(field_id): "" if value is None else str(value) for field_id, value in values.items()
        }

    raw_vehicle = data.get("vehicleSelection") or {}
    if not isinstance(raw_vehicle, dict):
        raise ValueError("vehicleSelection must be an object")
    vehicle = VehicleSelection(
        make=str(raw_vehicle.get("make") or ""),
        model=str(raw_vehicle.get("model") or ""),
        year=str(raw_vehicle.get("year") or ""),
    )

    channel = data.get("channel")
    return WizardSnapshot(
        version=version,
        step_selections=step_selections,
        field_values=field_values,
        vehicle_selection=vehicle,
        channel=str(channel) if channel else None,
    )
