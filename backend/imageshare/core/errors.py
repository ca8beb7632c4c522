"""Application errors and their JSON rendering."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Error surfaced to clients as ``{"title": ..., "errors": [...]}``."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    title: str = "Bad request"

    def __init__(self, errors: Iterable[str] | None = None, *, title: str | None = None) -> None:
        self.errors = list(errors or [])
        if title is not None:
            self.title = title
        super().__init__(self.title, self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "errors": self.errors}


class UserValidationError(AppError):
    title = "Validation error"


class DuplicateUsernameError(AppError):
    title = "Validation error"

    def __init__(self) -> None:
        super().__init__(["Username is already taken."])


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Login failed"

    def __init__(self) -> None:
        super().__init__(["The provided credentials were invalid."])


class NotAuthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Authentication required"

    def __init__(self) -> None:
        super().__init__(["Authentication required"])


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    title = "Forbidden"


class CsrfMismatchError(ForbiddenError):
    def __init__(self) -> None:
        super().__init__(["Invalid CSRF token."])


def _render(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _format_validation_errors(exc: RequestValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    """Attach JSON handlers for application, request-shape and storage errors."""

    @app.exception_handler(AppError)
    async def _handle_app_error(_: Request, exc: AppError) -> JSONResponse:
        return _render(exc)

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _render(UserValidationError(_format_validation_errors(exc)))

    @app.exception_handler(SQLAlchemyError)
    async def _handle_storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"title": "Server error", "errors": ["Internal server error"]},
        )
