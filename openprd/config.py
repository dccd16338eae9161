"""Application configuration using Pydantic Settings."""
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "OpenPRD API"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./openprd.db"
    db_echo: bool = False
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Security
    key_vault_secret: str = ""
    rate_limit_enabled: bool = True

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:4000"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" for production, "text" for development

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 8000
    server_workers: int = 1

    # LLM calls
    llm_timeout: float = 120.0
    llm_max_tokens: int = 4000
    llm_temperature: float = 0.7
    context_budget_ratio: float = 0.6

    # Attribution headers sent to aggregators
    app_referer: str = "https://openprd.dev"
    app_title_header: str = "OpenPRD"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.database_url

    def validate_production_secrets(self) -> None:
        """Raise if production is using a placeholder vault secret."""
        if not self.is_production:
            return
        weak = {"", "change-me-in-production"}
        if self.key_vault_secret in weak:
            raise ValueError("KEY_VAULT_SECRET must be set to a strong value in production")
        if len(self.key_vault_secret) < 32:
            raise ValueError("KEY_VAULT_SECRET must be at least 32 characters in production")

    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
