"""Health check endpoint. No dependencies; used for liveness probes."""

from fastapi import APIRouter

from authcore.application.services.permission_catalog import catalog
from authcore.core.config import get_settings
from authcore.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status with service and permission catalog versions."""
    return HealthResponse(
        version=get_settings().app_version, catalog_version=catalog.version
    )
