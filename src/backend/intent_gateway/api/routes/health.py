from __future__ import annotations

from fastapi import APIRouter, Depends

from intent_gateway.api import deps
from intent_gateway.core.config import Settings
from intent_gateway.schemas.health import HealthStatus
from intent_gateway.services.secrets import Credential

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus, summary="Liveness probe")
def health_check(
    settings: Settings = Depends(deps.get_app_settings),
    credential: Credential = Depends(deps.get_credential),
) -> HealthStatus:
    return HealthStatus(ok=True, port=settings.port, key_source=credential.source)
