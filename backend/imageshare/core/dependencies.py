"""Reusable dependencies and session cookie helpers for FastAPI routes."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from imageshare.core.config import get_settings
from imageshare.core.errors import NotAuthenticatedError
from imageshare.core.security import SessionSigner, TokenError
from imageshare.db.session import get_session
from imageshare.schemas.user import SafeUser
from imageshare.services.users import find_by_id

logger = logging.getLogger(__name__)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_session() as session:
        yield session


def get_session_signer() -> SessionSigner:
    return SessionSigner()


def set_session_cookie(response: Response, user: SafeUser, signer: SessionSigner) -> None:
    settings = get_settings()
    issued = signer.issue(user.id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=issued.token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=signer.max_age,
        expires=issued.expires_at,
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


async def get_optional_user(
    request: Request,
    session: AsyncSession = Depends(get_db),
    signer: SessionSigner = Depends(get_session_signer),
) -> SafeUser | None:
    token = request.cookies.get(get_settings().session_cookie_name)
    if not token:
        return None
    try:
        user_id = signer.verify(token)
    except TokenError as exc:
        logger.debug("Rejected session token: %s", exc)
        return None
    return await find_by_id(session, user_id)


async def get_current_user(user: SafeUser | None = Depends(get_optional_user)) -> SafeUser:
    if user is None:
        raise NotAuthenticatedError()
    return user
