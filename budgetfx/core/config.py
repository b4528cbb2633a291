from functools import lru_cache

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    RATES_CACHE_TTL_SECONDS, EXCHANGE_RATE_PROVIDER, HTTP_TIMEOUT_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Multi-Currency Budget Tracker"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 3600  # 1 hour
    exchange_api_base_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest"
    http_timeout_seconds: float = 5.0
    http_retries: int = 1

    # Allowed: 'external-http' (live upstream), 'static' (fallback table only)
    exchange_rate_provider: str = "external-http"

    # Sample expenses / budgets loaded into the in-memory stores at startup
    seed_demo_data: bool = True

    def init_post_load(self) -> None:
        """Validate fields that depend on each other or on allowed values."""
        allowed = {"static", "external-http"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        if self.rates_cache_ttl_seconds <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        if self.http_retries < 0:
            raise ValueError("http_retries cannot be negative")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
