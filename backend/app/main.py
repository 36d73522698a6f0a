"""
FastAPI application entry point.

Uses structured logging from core.logging. The profile router is mounted
under `{API_PREFIX}/profile`.
"""

from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.api.github_api import GitHubReposClient
from core.config import get_settings
from core.db import db
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .routers import profile as profile_router


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject bodies whose Content-Length exceeds the configured limit."""

    def __init__(self, app, max_size_mb: int = 1):
        super().__init__(app)
        self.max_size = max_size_mb * 1024 * 1024
        self.max_size_mb = max_size_mb

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"msg": f"Maximum request size is {self.max_size_mb}MB"},
            )
        return await call_next(request)


settings = get_settings()
configure_logging(level="DEBUG" if settings.debug else "INFO")
logger = get_logger("api")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    # GitHub credentials are resolved here, once, not per request
    app.state.github_client = GitHubReposClient.from_settings(settings)

    app.add_middleware(RequestSizeLimitMiddleware, max_size_mb=settings.max_request_size_mb)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
            "X-Auth-Token",
            "X-Request-ID",
        ],
        expose_headers=["X-Request-ID"],
    )
    # Added last so it runs first and the logging middleware sees its id
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        logger.info("app_startup", app_name=settings.app_name)

        db.initialize(settings.database_url)
        if settings.auto_create_tables:
            db.create_all_tables()
            logger.info("database_tables_ready")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("app_shutdown")
        await app.state.github_client.aclose()

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """Readiness probe. 503 until the database answers."""
        database = db.health_check()
        if not database["healthy"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": {"database": False}},
            )
        return {"status": "ready", "checks": {"database": True}}

    app.include_router(profile_router.router, prefix=settings.api_prefix)

    return app


app = create_app()
