"""CSRF token bootstrap endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Response

from imageshare.middleware.csrf import new_csrf_token, set_csrf_cookie
from imageshare.schemas.auth import CsrfTokenResponse

router = APIRouter(prefix="/csrf", tags=["csrf"])


@router.get("/restore", response_model=CsrfTokenResponse)
async def restore_csrf(response: Response) -> CsrfTokenResponse:
    token = new_csrf_token()
    set_csrf_cookie(response, token)
    return CsrfTokenResponse(xsrf_token=token)
