import asyncio
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel

from userauth.core.config.settings import settings
from userauth.infrastructure.database import check_database_health
from userauth.infrastructure.dependency_injection.dependencies import AppContainer
from userauth.infrastructure.redis import check_redis_health

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    services: Dict[str, Any]
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check(container: AppContainer) -> HealthResponse:
    """
    Health check endpoint that verifies MongoDB and Redis.

    ``status`` is ``ok`` when both answer and ``degraded`` otherwise. Redis
    is not required in the test environment.
    """
    database_ok, redis_ok = await asyncio.gather(
        check_database_health(container.database),
        check_redis_health(container.redis),
    )

    services_healthy = database_ok and (redis_ok or settings.is_test)

    return HealthResponse(
        status="ok" if services_healthy else "degraded",
        env=settings.APP_ENV,
        version=settings.VERSION,
        services={
            "database": {"status": "healthy" if database_ok else "unhealthy"},
            "redis": {"status": "healthy" if redis_ok else "unhealthy"},
        },
        timestamp=datetime.now(timezone.utc),
    )
