"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from src.lending.api.http.app_data import ApplicationDependencies
from src.lending.core.security import Authenticator
from src.lending.core.services import DbSessionService, LendingService
from src.lending.runtime.context import get_config


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_authenticator(request: Request) -> Authenticator:
    """Get the admin authenticator instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.authenticator


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a database session that is closed once the request completes."""
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_lending_service(db: Session = Depends(get_db_session)) -> LendingService:
    """Get a lending service bound to the request's session."""
    return LendingService(db)


def require_admin(
    request: Request,
    authenticator: Authenticator = Depends(get_authenticator),
) -> None:
    """Reject the request unless it carries the admin secret header."""
    header_name = get_config().security.admin_header_name
    if not authenticator.check(request.headers.get(header_name)):
        raise HTTPException(status_code=401, detail="Unauthorized")
