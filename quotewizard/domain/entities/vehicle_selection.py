from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class VehicleSelection:
    make: str = ""
    model: str = ""
    year: str = ""

    def with_make(self, make: str | None) -> "VehicleSelection":
        return VehicleSelection(make=make or "")

    def with_model(self, model: str | None) -> "VehicleSelection":
        return VehicleSelection(make=self.make, model=model or "")

    def with_year(self, year: str | None) -> "VehicleSelection":
        return replace(self, year=year or "")
