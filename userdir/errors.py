"""
errors.py — Directory error taxonomy
====================================
Services raise these; the handler registered by ``create_app`` renders
them as ``{"message": ...}`` with the carried status code.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .rate_limit import apply_rate_limit_headers

log = logging.getLogger("userdir.errors")


class DirectoryError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DirectoryError):
    """Missing or malformed fields."""


class ConflictError(DirectoryError):
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(DirectoryError):
    """Unknown record. Reported as 400, not 404."""


class DeleteBlockedError(DirectoryError):
    """The user still owns notes."""


class UnauthorizedError(DirectoryError):
    status_code = status.HTTP_401_UNAUTHORIZED


def directory_error_handler(request: Request, exc: DirectoryError) -> JSONResponse:
    response = JSONResponse(status_code=exc.status_code, content={"message": exc.message})
    # Refused logins still count against the throttle; report the quota.
    apply_rate_limit_headers(request, response)
    return response


def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DirectoryError, directory_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
