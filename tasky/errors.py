"""Domain errors and the JSON handlers that render them."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasky.core.config import settings

log = logging.getLogger(__name__)


def build_error_payload(message: str, errors: Optional[List[Any]] = None) -> dict:
    payload: dict = {"message": message}
    if errors:
        payload["errors"] = errors
    return payload


class TaskyError(Exception):
    """Application-scoped error rendered as ``{message, errors?}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    @property
    def payload(self) -> dict:
        return build_error_payload(self.message, self.errors)


class ValidationError(TaskyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthError(TaskyError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class IncorrectPasswordError(AuthError):
    # an authenticated caller retyping the wrong password is not a session failure
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Current password is incorrect"


class NotFoundError(TaskyError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class DuplicateError(TaskyError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "A record with this information already exists"


class UpstreamError(TaskyError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service failed"


class InternalError(TaskyError):
    @property
    def payload(self) -> dict:
        return {
            "message": "Internal Server Error",
            "error": self.message if settings.is_development else "Something went wrong",
        }


async def tasky_error_handler(_: Request, exc: TaskyError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthError) and exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.payload, headers=headers)


def _format_validation_errors(exc: RequestValidationError) -> list[dict]:
    out = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = str(err.get("msg", "Invalid value"))
        # pydantic prefixes messages from custom validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        out.append({"field": ".".join(loc), "message": msg})
    return out


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=build_error_payload("Validation failed", _format_validation_errors(exc)),
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_payload(message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "Internal Server Error",
            "error": str(exc) if settings.is_development else "Something went wrong",
        },
    )


def register_error_handlers(app) -> None:
    app.add_exception_handler(TaskyError, tasky_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
