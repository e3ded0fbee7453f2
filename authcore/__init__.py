"""authcore: tenant resolution and role/permission authorization for a multi-tenant business API."""

__version__ = "0.1.0"
