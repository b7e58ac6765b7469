from __future__ import annotations

from pathlib import Path

import pytest

from quotewizard.application.use_cases.enrich_catalog import EnrichCatalogUseCase
from quotewizard.application.use_cases.submit_quote import SubmitQuoteUseCase
from quotewizard.application.use_cases.wizard_session import WizardConfig, WizardSession
from quotewizard.application.utils.channels import ChannelPolicy
from quotewizard.domain.entities.product import Product
from quotewizard.domain.entities.step_definition import SelectionMode, StepDefinition
from quotewizard.domain.entities.visibility_rule import Requirement, Requires
from quotewizard.infrastructure.catalog.json_catalog import JsonCatalogSource
from quotewizard.infrastructure.store.memory_snapshot_store import MemorySnapshotStore
from quotewizard.infrastructure.storefront.memory_enrichment_cache import MemoryEnrichmentCache
from quotewizard.infrastructure.storefront.mock_storefront import MockStorefront

SAMPLE_CATALOG = Path(__file__).resolve().parents[1] / "data" / "catalog.json"


@pytest.fixture
def scenario_products() -> list[Product]:
    return [
        Product(id="v1", step_id="vehicle", price=0),
        Product(id="p1", step_id="parts", price=50, compatible_with=frozenset({"v1"})),
        Product(id="p2", step_id="parts", price=30),
    ]


@pytest.fixture
def scenario_steps() -> list[StepDefinition]:
    return [
        StepDefinition(id="vehicle", selection_mode=SelectionMode.single, required=True),
        StepDefinition(
            id="parts",
            selection_mode=SelectionMode.multi,
            required=True,
            visibility_rule=Requires(Requirement(step_id="vehicle")),
        ),
    ]



@pytest.fixture
def sample_catalog() -> JsonCatalogSource:
    return JsonCatalogSource(str(SAMPLE_CATALOG))


@pytest.fixture
def storefront() -> MockStorefront:
    return MockStorefront(
        variants={
            "autospec": {"1001": {"price": "5190.00", "weight": 96000}, "1003": {"price": 700}},
            "linex": {"2001": {"price": 5400}},
        }
    )


@pytest.fixture
def snapshots() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture
def wizard_config() -> WizardConfig:
    return WizardConfig(
        vehicle_step_id="vehicle_select",
        anchor_step_id="vehicle_select",
        channel_policy=ChannelPolicy(default="autospec", secondary="linex", secondary_region="WA"),
        snapshot_version="1.1.0",
    )


@pytest.fixture
def make_session(sample_catalog, storefront, snapshots, wizard_config):
    cache = MemoryEnrichmentCache()

    def _make(session_id: str = "s1", preselected_vehicle_id: str | None = None) -> WizardSession:
        session = WizardSession(
            session_id=session_id,
            steps=sample_catalog.load_steps(),
            products=sample_catalog.load_products(),
            config=wizard_config,
            snapshots=snapshots,
            enrich=EnrichCatalogUseCase(enrichment=storefront, cache=cache),
            submit=SubmitQuoteUseCase(submission=storefront, vehicle_step_id="vehicle_select"),
        )
        session.start(preselected_vehicle_id)
        return session

    return _make
