"""Core: config, tenant context, exception handlers, and application bootstrap."""

from authcore.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
