"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (DATABASE_URL, SECRET_KEY) are
validated on the first get_settings() call, not at import.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "authcore"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security (tokens are issued elsewhere; this service only verifies them)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Tenant resolution
    tenant_header_name: str = "X-Tenant-ID"
    tenant_query_param: str = "tenantId"
    tenant_bypass_path_prefixes: str = (
        "/api/v1/health,/api/v1/auth,/api/v1/admin/global,/api/v1/test,"
        "/docs,/redoc,/openapi.json"
    )
    loopback_hosts: str = "localhost,127.0.0.1,::1"
    default_tenant_slug: str = "default"
    # Oldest active tenant is used on loopback hosts when nothing else matches.
    tenant_dev_fallback_enabled: bool = True

    # Authorization
    # Catalog grants from DEPARTMENT-scoped or scope-less assignments apply
    # without a context check while this is on.
    legacy_unscoped_grant: bool = True
    # Expired role sweep interval; 0 disables the background task.
    role_cleanup_interval_seconds: int = 3600

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env (DATABASE_URL, SECRET_KEY)."""
        if not self.database_url:
            raise ValueError(
                "DATABASE_URL is required. Set in environment or .env file."
            )
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.telemetry_sample_rate < 0 or self.telemetry_sample_rate > 1:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0.0 and 1.0")
        if self.role_cleanup_interval_seconds < 0:
            raise ValueError("ROLE_CLEANUP_INTERVAL_SECONDS must be >= 0")
        return self

    @property
    def allowed_origins_list(self) -> list[str]:
        return _split_csv(self.allowed_origins)

    @property
    def bypass_path_prefixes(self) -> tuple[str, ...]:
        return tuple(_split_csv(self.tenant_bypass_path_prefixes))

    @property
    def loopback_host_set(self) -> frozenset[str]:
        return frozenset(h.lower() for h in _split_csv(self.loopback_hosts))


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (validated on first call)."""
    return Settings()
