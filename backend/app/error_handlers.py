"""
Custom exception handlers for FastAPI.

Response bodies:
- `{"msg": ...}` for single-message errors
- `{"errors": [...]}` for request validation failures

500 responses carry a generic message only. Details, including the request
id, are logged server-side.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from core.api.github_api import GitHubAPIError
from core.logging import get_logger

from .services.profile_service import ProfileNotFoundError

logger = get_logger("backend.errors")

SERVER_ERROR_MESSAGE = "Server error"


def _get_request_id(request: Request | None = None) -> str:
    """Current request id, for server-side logs and the X-Request-ID header."""
    request_id = getattr(request.state, "request_id", None) if request is not None else None
    if request_id:
        return request_id
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("request_id", "-")


def _message(msg: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"msg": msg})


def format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Flatten Pydantic errors into `{msg, param, location, value}` items.

    `location` is the request part ("body", "path", ...) and `param` the
    field name within it.
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        location = loc[0] if loc else "body"
        param = ".".join(loc[1:]) if len(loc) > 1 else location
        formatted.append(
            {
                "msg": error.get("msg", "Invalid value"),
                "param": param,
                "location": location,
                "value": jsonable_encoder(error.get("input")),
            }
        )
    return formatted


def _server_error(request: Request, exc: Exception, event: str) -> JSONResponse:
    logger.error(
        event,
        error=str(exc),
        error_type=type(exc).__name__,
        request_id=_get_request_id(request),
        exc_info=exc,
    )
    return _message(SERVER_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"msg": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(list(exc.errors()))
        logger.warning(
            "validation_error",
            params=[error["param"] for error in errors],
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": errors},
        )

    @app.exception_handler(ProfileNotFoundError)
    async def missing_profile_handler(request: Request, exc: ProfileNotFoundError):
        return _server_error(request, exc, "profile_missing_for_update")

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        return _server_error(request, exc, "database_error")

    @app.exception_handler(GitHubAPIError)
    async def github_exception_handler(request: Request, exc: GitHubAPIError):
        return _server_error(request, exc, "github_request_failed")

    # Starlette runs this handler outside every middleware, so the request
    # id header is set here rather than by RequestIDMiddleware
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        response = _server_error(request, exc, "unhandled_exception")
        response.headers["X-Request-ID"] = _get_request_id(request)
        return response
