"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. SECRET_KEY is validated at load time; without DATABASE_URL
the SQL-backed endpoints answer 503 (SqlNotConfiguredException).
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (secret_key).
    """

    # App
    app_name: str = "brokerage-core"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy async + Alembic). Empty = SQL not configured.
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security: bearer tokens are issued by the identity provider and verified here.
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Tenant
    tenant_header_name: str = "X-Tenant-ID"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Redis Cache (falls back to an in-process cache when disabled or unreachable)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_permissions: int = 300
    cache_ttl_tenants: int = 900

    # Access control: roles whose name contains "admin" are treated as administrators
    # unless this is turned off (explicit is_super_role is always honoured).
    admin_role_name_fallback: bool = True

    # Payment references: countries whose IBAN checksum failures are tolerated.
    iban_lenient_checksum_countries: str = "CH,LI"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env (token secret)."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Use the JWT secret of the identity provider "
                "that issues bearer tokens."
            )
        return self

    @property
    def lenient_checksum_countries(self) -> frozenset[str]:
        """Country codes parsed from iban_lenient_checksum_countries."""
        return frozenset(
            c.strip().upper()
            for c in self.iban_lenient_checksum_countries.split(",")
            if c.strip()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
