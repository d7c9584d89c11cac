# backend/app/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    status_code = 500
    message = "Unexpected error"

    def __init__(self, message: str | None = None, details=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details


class NotFoundError(TrackerError):
    status_code = 404
    message = "Resource not found"


def error_body(error: str, details=None) -> dict:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return body


def _field_errors(errors) -> list[dict]:
    out = []
    for err in errors:
        # Drop the request section ("body", "query", "path") from the location
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        out.append({"field": ".".join(loc) or None, "message": err.get("msg", "")})
    return out


async def tracker_error_handler(request: Request, exc: TrackerError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


async def validation_error_handler(request: Request, exc: Exception):
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", _field_errors(exc.errors())),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error in %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Database error", str(exc)))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception in API request %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content=error_body("Internal server error", str(exc)))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TrackerError, tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
