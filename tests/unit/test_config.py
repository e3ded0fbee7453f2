"""Tests for Settings validation, derived properties, and the tenant ContextVar."""

import pytest
from pydantic import ValidationError

from authcore.core.config import Settings
from authcore.core.tenant_context import get_tenant_id, reset_tenant_id, set_tenant_id


def _settings(**overrides) -> Settings:
    values = {"database_url": "postgresql+asyncpg://u:p@db/x", "secret_key": "s3cret"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_required_values() -> None:
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        _settings(database_url="")
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        _settings(secret_key="")


def test_range_checks() -> None:
    with pytest.raises(ValidationError):
        _settings(telemetry_sample_rate=1.5)
    with pytest.raises(ValidationError):
        _settings(role_cleanup_interval_seconds=-1)


def test_csv_properties() -> None:
    settings = _settings(
        allowed_origins=" https://a.example.com ,https://b.example.com,",
        tenant_bypass_path_prefixes="/api/v1/health, /docs",
        loopback_hosts="LocalHost,127.0.0.1",
    )
    assert settings.allowed_origins_list == ["https://a.example.com", "https://b.example.com"]
    assert settings.bypass_path_prefixes == ("/api/v1/health", "/docs")
    assert settings.loopback_host_set == frozenset({"localhost", "127.0.0.1"})


def test_tenant_context_var_set_and_reset() -> None:
    assert get_tenant_id() is None
    token = set_tenant_id("t-1")
    assert get_tenant_id() == "t-1"
    reset_tenant_id(token)
    assert get_tenant_id() is None
