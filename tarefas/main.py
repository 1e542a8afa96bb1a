"""
FastAPI application entry point for the Tarefas system.

Main application configuration including:
- CORS middleware setup
- Error-to-JSON exception handlers
- Router registration
- Database initialization
- Health check endpoint
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from tarefas.api import api_router
from tarefas.config import Settings, settings as default_settings
from tarefas.core.errors import APIError, INTERNAL_ERROR_MESSAGE, INVALID_BODY_MESSAGE
from tarefas.core.oauth import GitHubOAuthClient
from tarefas.core.sessions import SessionManager
from tarefas.db.init_db import create_tables
from tarefas.db.session import create_db_engine, create_session_factory
from tarefas.db.task_store import SqlTaskStore


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install the root log handler used by every ``tarefas`` module."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Initializes database tables on startup and releases the session
    store and database engine on shutdown.
    """
    create_tables(app.state.engine)
    if not app.state.settings.oauth_configured:
        logger.warning("GITHUB_CLIENT_SECRET is not set; every route is open")
    yield
    await app.state.sessions.close()
    app.state.engine.dispose()


class ErrorResponseMiddleware(BaseHTTPMiddleware):
    """Render unexpected exceptions as a 500 inside the CORS layer."""

    async def dispatch(
        self, request: Request, call_next: Callable[..., Any]
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
            )
            return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"error": message}``."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_request_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": INVALID_BODY_MESSAGE})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment-loaded ones

    Returns:
        FastAPI: Application with its collaborators on ``app.state``
    """
    if app_settings is None:
        app_settings = default_settings

    app = FastAPI(
        title="Tarefas API",
        description="CRUD de tarefas com login pelo GitHub",
        version="1.0.0",
        lifespan=lifespan,
    )

    engine = create_db_engine(app_settings.db_url, echo=app_settings.debug)
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.task_store = SqlTaskStore(create_session_factory(engine))
    app.state.sessions = SessionManager.from_settings(app_settings)
    app.state.oauth_client = GitHubOAuthClient.from_settings(app_settings)

    # Added last, CORS wraps the error middleware and so covers 500 responses
    app.add_middleware(ErrorResponseMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routers
    app.include_router(api_router)

    @app.get("/", response_class=PlainTextResponse, tags=["Root"])
    def root() -> str:
        """Plain-text greeting."""
        return "Olá Tarefas"

    @app.get("/health", tags=["Health"])
    def health_check() -> dict:
        """
        Health check endpoint.

        Returns service status for container orchestration.
        """
        return {"status": "healthy"}

    return app


# Create FastAPI application
app = create_app()


def run() -> None:
    """Serve the application with uvicorn (console script ``tarefas``)."""
    configure_logging(default_settings.log_level)
    logger.info("Aplicação executando em http://localhost:%s/", default_settings.port)
    uvicorn.run(app, host=default_settings.host, port=default_settings.port, log_config=None)


if __name__ == "__main__":
    run()
