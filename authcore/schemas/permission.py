"""Permission check API schemas."""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class PermissionCheckRequest(BaseModel):
    """Either a permission identifier, or a resource + action pair."""

    permission: str | None = Field(default=None, max_length=64)
    resource: str | None = Field(default=None, max_length=64)
    action: str | None = Field(default=None, max_length=32)
    company_id: str | None = None
    resource_id: str | None = None

    @model_validator(mode="after")
    def _permission_or_resource_action(self) -> "PermissionCheckRequest":
        if self.permission:
            return self
        if self.resource and self.action:
            return self
        raise ValueError("Provide permission, or both resource and action")


class PermissionCheckResponse(BaseModel):
    granted: bool
    permission: str | None = None
    resource: str | None = None
    action: str | None = None
    source: str | None = None


class PermissionFilterRequest(BaseModel):
    """Data to project to the fields the caller may see."""

    resource: str = Field(..., min_length=1, max_length=64)
    action: str = Field(default="read", min_length=1, max_length=32)
    data: dict[str, Any] | list[dict[str, Any]]


class PermissionFilterResponse(BaseModel):
    data: dict[str, Any] | list[dict[str, Any]]


class EffectivePermissionsResponse(BaseModel):
    """Effective permission set of a person in the current tenant."""

    person_id: str
    tenant_id: str
    permissions: list[str]
