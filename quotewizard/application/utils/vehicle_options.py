from __future__ import annotations

from dataclasses import dataclass, field

from quotewizard.domain.entities.product import Product


@dataclass(frozen=True)
class VehicleOptions:
    makes: list[str] = field(default_factory=list)
    models_by_make: dict[str, list[str]] = field(default_factory=dict)
    years_by_make_model: dict[str, list[str]] = field(default_factory=dict)


def make_model_key(make: str, model: str) -> str:
    return f"{make}|||{model}"


def vehicle_make(product: Product) -> str:
    return product.make or "Other"


def vehicle_model(product: Product) -> str:
    return product.model or product.name or product.id


def build_vehicle_options(vehicles: list[Product]) -> VehicleOptions:
    """Sorted make -> model -> year choices for the vehicle picker."""
    makes: list[str] = []
    models_by_make: dict[str, list[str]] = {}
    years_by_make_model: dict[str, list[str]] = {}

    for vehicle in vehicles:
        make = vehicle_make(vehicle)
        model = vehicle_model(vehicle)
        if make not in makes:
            makes.append(make)
        models = models_by_make.setdefault(make, [])
        if model not in models:
            models.append(model)
        years = [str(year).strip() for year in vehicle.years]
        years_by_make_model[make_model_key(make, model)] = sorted({year for year in years if year})

    return VehicleOptions(
        makes=sorted(makes),
        models_by_make={make: sorted(models) for make, models in models_by_make.items()},
        years_by_make_model=years_by_make_model,
    )


def find_vehicle(vehicles: list[Product], make: str, model: str) -> Product | None:
    if not make or not model:
        return None
    for vehicle in vehicles:
        if (vehicle.make or "").lower() == make.lower() and vehicle_model(vehicle).lower() == model.lower():
            return vehicle
    return None
