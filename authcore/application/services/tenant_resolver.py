"""Map an incoming request (host, headers, query, path) to a tenant.

Rules run in order and the first match wins. A request that cannot be bound
to a tenant yields DeniedTenant; nothing here raises for expected misses.
"""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Iterable, Mapping

from authcore.application.dtos.tenant import (
    BypassedTenant,
    DeniedTenant,
    ResolvedTenant,
    TenantResolution,
    TenantResult,
)
from authcore.application.interfaces.repositories import ITenantRepository
from authcore.core.config import Settings
from authcore.domain.enums import DenialReason, ResolutionStep
from authcore.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

_IGNORED_SUBDOMAINS = frozenset({"www", "api"})


def normalize_hostname(host: str) -> str:
    """Lower-case host with any port removed ("Acme.example.com:8000" -> "acme.example.com")."""
    host = host.strip().lower()
    if host.startswith("["):
        return host[1:].split("]", 1)[0]
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        wanted = name.lower()
        value = next((v for k, v in headers.items() if k.lower() == wanted), None)
    return value.strip() if value and value.strip() else None


class TenantResolver:
    """Resolve the tenant for one request."""

    def __init__(
        self,
        tenant_repo: ITenantRepository,
        *,
        bypass_prefixes: Iterable[str] = (),
        loopback_hosts: Iterable[str] = ("localhost", "127.0.0.1", "::1"),
        header_name: str = "X-Tenant-ID",
        query_param: str = "tenantId",
        default_slug: str = "default",
        dev_fallback_enabled: bool = False,
    ) -> None:
        self._tenants = tenant_repo
        self._bypass_prefixes = tuple(bypass_prefixes)
        self._loopback_hosts = frozenset(h.lower() for h in loopback_hosts)
        self._header_name = header_name
        self._query_param = query_param
        self._default_slug = default_slug
        self._dev_fallback_enabled = dev_fallback_enabled

    @classmethod
    def from_settings(
        cls, tenant_repo: ITenantRepository, settings: Settings
    ) -> "TenantResolver":
        return cls(
            tenant_repo,
            bypass_prefixes=settings.bypass_path_prefixes,
            loopback_hosts=settings.loopback_host_set,
            header_name=settings.tenant_header_name,
            query_param=settings.tenant_query_param,
            default_slug=settings.default_tenant_slug,
            dev_fallback_enabled=settings.tenant_dev_fallback_enabled,
        )

    def is_bypassed(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._bypass_prefixes)

    def is_loopback(self, hostname: str) -> bool:
        if hostname in self._loopback_hosts or hostname.endswith(".localhost"):
            return True
        try:
            return ipaddress.ip_address(hostname).is_loopback
        except ValueError:
            return False

    @traced("tenant.resolve")
    async def resolve(
        self,
        host: str | None,
        headers: Mapping[str, str],
        query: Mapping[str, str],
        path: str,
    ) -> TenantResolution:
        if self.is_bypassed(path):
            return BypassedTenant(path=path)
        if not host or not host.strip():
            return DeniedTenant(DenialReason.HOST_REQUIRED, host=None, path=path)

        hostname = normalize_hostname(host)
        loopback = self.is_loopback(hostname)
        matched = (
            await self._resolve_loopback(hostname, headers, query)
            if loopback
            else await self._resolve_public(hostname)
        )
        if matched is None:
            logger.info("No tenant for host=%s path=%s", host, path)
            return DeniedTenant(DenialReason.NO_TENANT, host=host, path=path)

        tenant, step = matched
        add_span_attributes(tenant_id=tenant.id, resolution_step=step.value)
        logger.debug("Tenant %s (%s) resolved via %s", tenant.slug, tenant.id, step)
        return ResolvedTenant(tenant=tenant, step=step)

    async def _resolve_public(
        self, hostname: str
    ) -> tuple[TenantResult, ResolutionStep] | None:
        tenant = await self._tenants.get_by_domain(hostname)
        if tenant is not None:
            return tenant, ResolutionStep.DOMAIN
        subdomain = hostname.split(".")[0]
        if subdomain and subdomain not in _IGNORED_SUBDOMAINS:
            tenant = await self._tenants.get_by_slug(subdomain)
            if tenant is not None:
                return tenant, ResolutionStep.SUBDOMAIN
        return None

    async def _resolve_loopback(
        self,
        hostname: str,
        headers: Mapping[str, str],
        query: Mapping[str, str],
    ) -> tuple[TenantResult, ResolutionStep] | None:
        header_value = _header(headers, self._header_name)
        if header_value:
            tenant = await self._tenants.get_by_id_or_slug(header_value)
            if tenant is not None:
                return tenant, ResolutionStep.HEADER
        query_value = (query.get(self._query_param) or "").strip()
        if query_value:
            tenant = await self._tenants.get_by_id_or_slug(query_value)
            if tenant is not None:
                return tenant, ResolutionStep.QUERY
        tenant = await self._tenants.get_by_domain(hostname)
        if tenant is not None:
            return tenant, ResolutionStep.LOOPBACK_DOMAIN

        tenant = await self._default_tenant(hostname)
        if tenant is not None:
            return tenant, ResolutionStep.DEFAULT_TENANT

        if self._dev_fallback_enabled:
            tenant = await self._tenants.get_oldest()
            if tenant is not None:
                logger.warning(
                    "Falling back to oldest tenant %s for loopback host %s",
                    tenant.slug,
                    hostname,
                )
                return tenant, ResolutionStep.DEV_FALLBACK
        return None

    async def _default_tenant(self, hostname: str) -> TenantResult | None:
        """Designated default: slug, then domain (hostname, localhost), then name."""
        tenant = await self._tenants.get_by_slug(self._default_slug)
        if tenant is None:
            tenant = await self._tenants.get_by_domain(hostname)
        if tenant is None and hostname != "localhost":
            tenant = await self._tenants.get_by_domain("localhost")
        if tenant is None:
            tenant = await self._tenants.get_first_by_name_containing("default")
        return tenant
