"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from notely.core.logging import get_logger
from notely.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database() -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    from notely.core.database import get_db_session

    try:
        start = utc_now()
        async for session in get_db_session():
            await session.execute(text("SELECT 1"))
            break

        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        return {"status": "healthy", "latency_ms": latency_ms}

    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": type(e).__name__}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy", "message": "API is healthy and running"}


@router.get("/health/ready", response_model=None)
async def readiness_check() -> dict[str, Any] | JSONResponse:
    """
    Readiness check.

    Returns 503 when the database is unreachable.
    """
    checks = {"database": await check_database()}
    unhealthy = [name for name, check in checks.items() if check["status"] != "healthy"]

    body = {
        "status": "unhealthy" if unhealthy else "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
    if unhealthy:
        logger.warning("Readiness check failed", extra={"unhealthy": unhealthy})
        return JSONResponse(status_code=503, content=body)
    return body
