from __future__ import annotations

from fastapi import APIRouter, Response, status

from tableside.infrastructure.cache.redis_client import ping_redis
from tableside.infrastructure.db.session import ping_database

router = APIRouter(prefix="/health", tags=["health"])

READINESS_TIMEOUT_SECONDS = 1.0


@router.get("/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
def ready(response: Response) -> dict[str, object]:
    """Readiness for the order and menu paths: the store and the catalog cache."""
    checks = {
        "postgres": ping_database(timeout_seconds=READINESS_TIMEOUT_SECONDS),
        "redis": ping_redis(timeout_seconds=READINESS_TIMEOUT_SECONDS),
    }
    if all(checks.values()):
        return {"status": "ok", "checks": checks}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
