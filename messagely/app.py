"""FastAPI application factory."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from messagely.core.config import Settings, get_settings
from messagely.core.logging_config import setup_logging
from messagely.domain.errors import (
    ConflictError,
    IntegrityError,
    InvalidInputError,
    MessagelyError,
    NotFoundError,
)
from messagely.repositories.sql_repository import SQLRepository
from messagely.routers import auth as auth_router
from messagely.routers import users as users_router
from messagely.services.identity_service import IdentityService, InvalidCredentialsError
from messagely.services.message_service import MessageDirectory
from messagely.services.profile_resolver import ProfileResolver

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (InvalidInputError, 400),
    (InvalidCredentialsError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (IntegrityError, 500),
)


async def _domain_error_handler(request: Request, exc: MessagelyError) -> JSONResponse:
    status_code = 500
    for kind, code in _STATUS_BY_ERROR:
        if isinstance(exc, kind):
            status_code = code
            break
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"detail": exc.message}, status_code=status_code)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[SQLRepository] = None,
) -> FastAPI:
    """Build the API with its services wired to one repository."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    repository = repository or SQLRepository()

    app = FastAPI(title="Messagely API")
    app.state.settings = settings
    app.state.identity_service = IdentityService(repository=repository, settings=settings)
    app.state.message_directory = MessageDirectory(repository=repository)
    app.state.profile_resolver = ProfileResolver(repository=repository)

    app.add_exception_handler(MessagelyError, _domain_error_handler)
    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    return app
