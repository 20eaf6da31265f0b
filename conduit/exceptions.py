"""
Domain errors and the global handlers that render them.

Every error response shares the RealWorld envelope::

    {"errors": {"body": ["message", ...]}}

Handler layers, most specific first:

- ``ConduitError`` (domain): status carried by the exception.
- ``RequestValidationError`` (pydantic): 422, one message per failing field.
- ``StarletteHTTPException``: unknown routes and methods keep their status.
- ``IntegrityError``: a uniqueness race lost at the storage layer → 422.
- ``Exception`` (catch-all): 500 with a generic body; details only in the log.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ConduitError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(ConduitError):
    """A unique field (username, email) is already taken."""

    status_code = 422


class NotFoundError(ConduitError):
    status_code = 404


class AuthenticationError(ConduitError):
    """Missing, malformed, invalid or expired credentials."""

    status_code = 401


def error_body(*messages: str) -> dict:
    return {"errors": {"body": list(messages)}}


def _format_validation_error(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    field = ".".join(loc)
    return f"{field}: {error['msg']}" if field else error["msg"]


def register_error_handlers(app: FastAPI) -> None:
    """Install the global error handlers on *app*."""

    @app.exception_handler(ConduitError)
    async def conduit_error_handler(request: Request, exc: ConduitError):
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error on %s: %s", request.url.path, exc.errors())
        messages = [_format_validation_error(e) for e in exc.errors()]
        return JSONResponse(
            status_code=422,
            content=error_body(*messages),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
        return JSONResponse(
            status_code=422,
            content=error_body("has already been taken"),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error"),
        )
