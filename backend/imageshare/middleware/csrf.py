"""Double-submit cookie CSRF protection."""
from __future__ import annotations

import logging
import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from imageshare.core.config import get_settings
from imageshare.core.errors import CsrfMismatchError

logger = logging.getLogger(__name__)

SAFE_METHODS: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")


def new_csrf_token() -> str:
    return secrets.token_urlsafe(32)


def set_csrf_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.csrf_cookie_name,
        token,
        httponly=False,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def tokens_match(header: str | None, cookie: str | None) -> bool:
    if not header or not cookie:
        return False
    return secrets.compare_digest(header.encode("utf-8"), cookie.encode("utf-8"))


class CSRFMiddleware(BaseHTTPMiddleware):
    """Reject unsafe requests whose CSRF header does not echo the CSRF cookie."""

    def __init__(self, app):
        super().__init__(app)
        self.settings = get_settings()

    async def dispatch(self, request: Request, call_next):
        if not self.settings.csrf_enabled:
            return await call_next(request)

        cookie = request.cookies.get(self.settings.csrf_cookie_name)

        if request.method not in SAFE_METHODS:
            header = request.headers.get(self.settings.csrf_header_name)
            if not tokens_match(header, cookie):
                logger.warning("CSRF check failed for %s %s", request.method, request.url.path)
                error = CsrfMismatchError()
                return JSONResponse(status_code=error.status_code, content=error.to_dict())
            return await call_next(request)

        response = await call_next(request)
        # Routes may issue their own token (see /api/csrf/restore).
        if not cookie and not _sets_cookie(response, self.settings.csrf_cookie_name):
            set_csrf_cookie(response, new_csrf_token())
        return response


def _sets_cookie(response: Response, name: str) -> bool:
    prefix = f"{name}=".encode("latin-1")
    return any(
        key == b"set-cookie" and value.startswith(prefix)
        for key, value in response.raw_headers
    )
