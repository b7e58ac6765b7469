from functools import lru_cache
import logging
import threading
import uuid

from quotewizard.core.config import settings
from quotewizard.application.ports.catalog_source import CatalogSourcePort
from quotewizard.application.ports.enrichment import EnrichmentCachePort
from quotewizard.application.ports.snapshot_store import SnapshotStorePort
from quotewizard.application.use_cases.enrich_catalog import EnrichCatalogUseCase
from quotewizard.application.use_cases.submit_quote import SubmitQuoteUseCase
from quotewizard.application.use_cases.wizard_session import WizardConfig, WizardSession
from quotewizard.application.utils.channels import ChannelPolicy
from quotewizard.infrastructure.catalog.json_catalog import JsonCatalogSource
from quotewizard.infrastructure.store.json_snapshot_store import JsonSnapshotStore
from quotewizard.infrastructure.store.memory_snapshot_store import MemorySnapshotStore
from quotewizard.infrastructure.storefront.memory_enrichment_cache import MemoryEnrichmentCache
from quotewizard.infrastructure.storefront.mock_storefront import MockStorefront
from quotewizard.infrastructure.storefront.storefront_client import StorefrontClient


_snapshot_store: SnapshotStorePort | None = None
_sessions: dict[str, WizardSession] = {}
_sessions_lock = threading.Lock()


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_catalog_source() -> CatalogSourcePort:
    return JsonCatalogSource(settings.CATALOG_PATH)


def get_snapshot_store() -> SnapshotStorePort:
    global _snapshot_store
    if _snapshot_store is None:
        if _is_local():
            _snapshot_store = JsonSnapshotStore(settings.SNAPSHOT_DIR)
        else:
            _snapshot_store = MemorySnapshotStore()
    return _snapshot_store


@lru_cache
def get_storefront() -> MockStorefront | StorefrontClient:
    if _is_local() or not settings.STOREFRONT_API_TOKEN:
        logging.getLogger(__name__).info("Using mock storefront")
        return MockStorefront()
    return StorefrontClient()


@lru_cache
def get_enrichment_cache() -> EnrichmentCachePort:
    return MemoryEnrichmentCache()


def get_wizard_config() -> WizardConfig:
    return WizardConfig(
        vehicle_step_id=settings.VEHICLE_STEP_ID,
        anchor_step_id=settings.COMPATIBILITY_ANCHOR_STEP_ID,
        channel_policy=ChannelPolicy(
            default=settings.DEFAULT_CHANNEL,
            secondary=settings.SECONDARY_CHANNEL,
            secondary_region=settings.SECONDARY_CHANNEL_REGION,
            forced=settings.FORCED_CHANNEL,
        ),
        snapshot_version=settings.SNAPSHOT_VERSION,
    )


def build_session(session_id: str) -> WizardSession:
    catalog = get_catalog_source()
    storefront = get_storefront()
    config = get_wizard_config()
    return WizardSession(
        session_id=session_id,
        steps=catalog.load_steps(),
        products=catalog.load_products(),
        config=config,
        snapshots=get_snapshot_store(),
        enrich=EnrichCatalogUseCase(enrichment=storefront, cache=get_enrichment_cache()),
        submit=SubmitQuoteUseCase(submission=storefront, vehicle_step_id=config.vehicle_step_id),
    )


def create_session(session_id: str | None = None, preselected_vehicle_id: str | None = None) -> WizardSession:
    session = build_session(session_id or uuid.uuid4().hex)
    session.start(preselected_vehicle_id)
    _remember(session)
    return session


def get_session(session_id: str) -> WizardSession | None:
    """Live session, or one rebuilt from its persisted snapshot."""
    with _sessions_lock:
        session = _sessions.pop(session_id, None)
        if session is not None:
            _sessions[session_id] = session
            return session
    if get_snapshot_store().load(session_id) is None:
        return None
    return create_session(session_id)


def drop_session(session_id: str) -> None:
    with _sessions_lock:
        _sessions.pop(session_id, None)


def _remember(session: WizardSession) -> None:
    """Register a live session, evicting the least recently used ones past the cap."""
    with _sessions_lock:
        _sessions.pop(session.session_id, None)
        _sessions[session.session_id] = session
        while len(_sessions) > max(settings.MAX_LIVE_SESSIONS, 1):
            evicted = next(iter(_sessions))
            del _sessions[evicted]
            logging.getLogger(__name__).debug("Evicted live session", extra={"session_id": evicted})
