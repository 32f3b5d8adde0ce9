"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.lending.api.http.app_data import ApplicationDependencies
from src.lending.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


def _database_type() -> str:
    return "postgresql" if "postgresql" in get_config().database.url else "sqlite"


@router.get("")
async def health() -> dict[str, str]:
    """Basic health check endpoint - checks if app is running.

    This is a liveness probe that returns 200 OK as long as the application
    process is running. It does not check dependencies.
    """
    return {"status": "healthy", "service": "library-api"}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness check - returns 503 when the database is unreachable."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies

    db_healthy = app_deps.database_service.health_check()
    response = {
        "status": "ready" if db_healthy else "not_ready",
        "environment": get_config().app.environment,
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": _database_type(),
            }
        },
    }

    if not db_healthy:
        return JSONResponse(status_code=503, content=response)

    return response


@router.get("/database", response_model=None)
def health_database(request: Request) -> dict[str, Any] | JSONResponse:
    """Database-specific health check with connection pool status."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies

    healthy = app_deps.database_service.health_check()
    content = {
        "status": "healthy" if healthy else "unhealthy",
        "type": _database_type(),
        "pool": app_deps.database_service.get_pool_status(),
    }
    if not healthy:
        return JSONResponse(status_code=503, content=content)
    return content
