from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./gear_gauge.db"
    debug: bool = False
    app_env: str = "development"

    # Intervals.icu is the external workout source; empty credentials mean the source is unavailable
    intervals_icu_base_url: str = "https://intervals.icu/api/v1"
    intervals_athlete_id: str = ""
    intervals_api_key: str = ""
    intervals_request_timeout_seconds: int = 60
    sync_lookback_days: int = 365

    # Background fetch: periodic sync while the hasBackgroundFetchEnabled flag is on
    background_fetch_interval_minutes: int = 30
    # Subscribe to source change notifications (webhook) on startup
    observe_on_startup: bool = True

    cors_origins: str = "http://localhost:8081,http://localhost:19006,http://localhost:19000"
    rate_limit_default: str = "200/minute"


settings = Settings()
