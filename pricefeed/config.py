"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # CoinGecko
    coingecko_api_key: str = ""
    coingecko_timeout: float = 10.0
    coingecko_max_retries: int = 3

    # Shared cache store
    provider_cache_ttl_seconds: int = 300
    provider_cache_maxsize: int = 1024

    # Application
    log_level: str = "INFO"
    debug: bool = True

    # CORS
    allowed_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


settings = Settings()
