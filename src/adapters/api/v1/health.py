from datetime import datetime, timezone
from typing import Any, Dict

import httpx
from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.core.config.settings import settings
from src.core.logging import logger
from src.utils.i18n import get_translated_message

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    message: str
    services: Dict[str, Any]
    timestamp: datetime


async def check_auth_provider_health(request: Request) -> Dict[str, Any]:
    """Check that the configured auth provider answers."""
    if settings.AUTH_PROVIDER == "memory":
        return {"status": "healthy", "provider": "memory"}

    client = getattr(request.app.state, "auth_http_client", None)
    if client is None:
        return {"status": "unhealthy", "provider": "supabase", "error": "client not initialized"}

    try:
        response = await client.get(
            "/auth/v1/health",
            headers={"apikey": settings.SUPABASE_ANON_KEY.get_secret_value()},
        )
    except httpx.HTTPError as e:
        logger.error("auth_provider_health_check_failed", error=str(e))
        return {"status": "unhealthy", "provider": "supabase", "error": type(e).__name__}

    healthy = response.status_code == 200
    if not healthy:
        logger.warning("auth_provider_unhealthy", status_code=response.status_code)
    return {
        "status": "healthy" if healthy else "unhealthy",
        "provider": "supabase",
        "status_code": response.status_code,
    }


@router.get("", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint that verifies the auth provider dependency.
    """
    language = request.state.language
    status_message = get_translated_message("health_status_ok", language)

    provider_health = await check_auth_provider_health(request)
    overall_status = "ok" if provider_health["status"] == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        env=settings.APP_ENV,
        message=status_message,
        services={"auth_provider": provider_health},
        timestamp=datetime.now(timezone.utc),
    )
