"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "EVV Logger Backend"
    debug: bool = False
    log_level: str = "INFO"
    port: int = 8080
    database_url: str = "postgresql+psycopg2://postgres@localhost:5432/evv_logger"
    db_pool_size: int = 20
    db_max_overflow: int = 30
    db_pool_timeout: int = 30
    db_pool_recycle: int = 300
    db_statement_timeout_ms: int = 15000
    cors_allow_origins: str = "*"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "evv-logger"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
