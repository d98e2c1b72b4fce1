"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_enabled: Toggle for slowapi limits.
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for endpoints that call out to SEC
            or the screening service.
        screening_base_url: Root URL of the screening API used when
            locking from the current result.
        http_timeout_seconds: Timeout applied to outbound HTTP calls.
        sec_user_agent: Contact string sent to SEC EDGAR (fair-access policy).
        sec_min_interval_seconds: Minimum spacing between SEC requests.
        ticker_map_ttl_seconds: Lifetime of the cached ticker -> CIK map.
        admin_username: Operator login name. Empty disables admin login.
        admin_password: Operator password. Empty disables admin login.
        admin_auth_secret: HMAC key for admin session tokens.
        admin_token_ttl_seconds: Admin session lifetime.

    Database settings: ``database_url`` wins when set; otherwise a
    PostgreSQL DSN is assembled from the ``postgres_*`` values.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Rizq Screener"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    # Override store
    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "rizq"

    # Outbound HTTP
    screening_base_url: str = "http://localhost:8000/api/v1"
    http_timeout_seconds: float = 15.0
    sec_user_agent: str = "RizqScreener/0.1 (ops@rizq.example)"
    sec_min_interval_seconds: float = 0.2
    ticker_map_ttl_seconds: int = 86_400  # 24 h

    # Admin sessions
    admin_username: str = ""
    admin_password: str = ""
    admin_auth_secret: str = ""
    admin_token_ttl_seconds: int = 604_800  # 7 days

    def get_database_url(self) -> str:
        """Return the effective SQLAlchemy URL for the override store.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build DSN from postgres_* values (useful for Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
