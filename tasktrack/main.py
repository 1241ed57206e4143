"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tasktrack import __version__
from tasktrack.api.auth import router as auth_router
from tasktrack.api.tasks import router as tasks_router
from tasktrack.api.users import router as users_router
from tasktrack.config import Settings, load_settings
from tasktrack.container import Services, build_services
from tasktrack.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)
from tasktrack.logging_config import configure_logging

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Translate application errors into status codes."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": exc.errors},
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"{exc.entity} not found"},
        )

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "field": exc.field},
        )

    @app.exception_handler(TransientStoreError)
    async def store_error_handler(request: Request, exc: TransientStoreError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage temporarily unavailable"},
        )


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """
    Build the application.

    With prebuilt ``services`` the lifespan does nothing; otherwise it loads
    settings, connects to the store and tears the connection down on exit.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned: Services | None = None
        if app.state.services is None:
            app_settings = app.state.settings or load_settings()
            configure_logging(app_settings.LOG_LEVEL)
            owned = await build_services(app_settings)
            app.state.services = owned
        try:
            yield
        finally:
            if owned is not None:
                owned.close()
                app.state.services = None

    app = FastAPI(
        title="TaskTrack API",
        description="Task management API with user registration and bearer authentication",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(tasks_router)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
