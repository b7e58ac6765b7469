from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    CATALOG_PATH: str = "./data/catalog.json"
    SNAPSHOT_DIR: str = "./data/sessions"
    SNAPSHOT_VERSION: str = "1.1.0"

    VEHICLE_STEP_ID: str = "vehicle_select"
    COMPATIBILITY_ANCHOR_STEP_ID: str = "vehicle_select"

    DEFAULT_CHANNEL: str = "autospec"
    SECONDARY_CHANNEL: str = "linex"
    SECONDARY_CHANNEL_REGION: str = "WA"
    FORCED_CHANNEL: str | None = None

    STOREFRONT_BASE_URL: str = "http://127.0.0.1:8000/api/quote-builder"
    STOREFRONT_API_TOKEN: str | None = None
    STOREFRONT_TIMEOUT_SECONDS: float = 10.0

    # Live sessions kept in memory; evicted ones are rebuilt from their snapshot
    MAX_LIVE_SESSIONS: int = 500


settings = Settings()
