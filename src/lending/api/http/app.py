"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.lending import __version__
from src.lending.api.http.app_data import ApplicationDependencies
from src.lending.api.http.routers.books import router as books_router
from src.lending.api.http.routers.health import router as health_router
from src.lending.api.utils.app_startup import configure_logging
from src.lending.core.errors import (
    Conflict,
    LendingError,
    NotFound,
    StorageFailure,
    ValidationError,
)
from src.lending.core.security import StaticSecretAuthenticator
from src.lending.core.services import DbManageService, DbSessionService
from src.lending.runtime.context import get_config

_STATUS_BY_ERROR: dict[type[LendingError], int] = {
    ValidationError: 400,
    NotFound: 404,
    Conflict: 409,
    StorageFailure: 500,
}


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


async def handle_lending_error(request: Request, exc: LendingError) -> JSONResponse:
    """Map lending error kinds to HTTP status codes."""
    status_code = next(
        (code for kind, code in _STATUS_BY_ERROR.items() if isinstance(exc, kind)),
        500,
    )
    request_id = getattr(request.state, "request_id", "-")
    if status_code >= 500:
        logger.bind(error_type=type(exc).__name__).error("request.failed: {}", exc.message)
        detail = "Internal Server Error"
    else:
        logger.bind(status_code=status_code).info("request.rejected: {}", exc.message)
        detail = exc.message
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": request_id},
    )


# --- Lifecycle hooks ---
def _build_dependencies() -> ApplicationDependencies:
    config = get_config()
    return ApplicationDependencies(
        database_service=DbSessionService(),
        authenticator=StaticSecretAuthenticator(config.security.admin_secret),
    )


async def startup(app: FastAPI, dependencies: ApplicationDependencies | None = None) -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    app.state.owns_dependencies = dependencies is None
    deps = dependencies or _build_dependencies()
    app.state.app_dependencies = deps

    if config.database.create_tables:
        DbManageService(deps.database_service.engine).create_all()


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    if getattr(app.state, "owns_dependencies", False):
        app.state.app_dependencies.database_service.dispose()


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the API; `dependencies` replaces the config-built services when given."""
    config = get_config()
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app, dependencies)
        try:
            yield
        finally:
            await shutdown(app)

    app = FastAPI(
        title="Library Lending API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )

    app.add_middleware(SecurityHeadersMiddleware)

    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(LendingError, handle_lending_error)  # type: ignore[arg-type]

    app.include_router(health_router)
    app.include_router(books_router)

    return app


app = create_app()

__all__ = ["app", "create_app", "startup", "shutdown"]


def main() -> None:
    import uvicorn

    config = get_config()
    # Access logging happens in the request middleware
    uvicorn.run(
        app,
        host=config.app.host,
        port=config.app.port,
        access_log=False,
    )


if __name__ == "__main__":
    main()
