"""Tenant API schemas."""

from pydantic import BaseModel, ConfigDict


class TenantResponse(BaseModel):
    """Tenant bound to the current request."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    name: str
    domain: str | None
