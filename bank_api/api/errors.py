"""Uniform mapping from domain errors to ``{"Error": ...}`` JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.errors import AuthError, BankError, MethodNotAllowedError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"Error": message})


async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    return error_response(status.HTTP_403_FORBIDDEN, "Invalid token")


async def handle_bank_error(request: Request, exc: BankError) -> JSONResponse:
    logger.info("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body decoding failures as a single readable message."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(parts) or "invalid request")


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    """Report an unsupported method on a routed path as a 400; other statuses pass through."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return await handle_bank_error(request, MethodNotAllowedError(request.method))
    return await http_exception_handler(request, exc)


def install_error_handlers(app: FastAPI) -> None:
    """Register the error handlers; every handler error is a 400 except auth (403)."""
    app.add_exception_handler(AuthError, handle_auth_error)
    app.add_exception_handler(BankError, handle_bank_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
