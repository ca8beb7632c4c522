"""Session endpoints: login, restore and logout."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from imageshare.core.config import get_settings
from imageshare.core.dependencies import (
    clear_session_cookie,
    get_db,
    get_optional_user,
    get_session_signer,
    set_session_cookie,
)
from imageshare.core.errors import AuthenticationError
from imageshare.core.security import SessionSigner
from imageshare.schemas.auth import LoginRequest, LogoutResponse
from imageshare.schemas.user import SafeUser, UserResponse
from imageshare.services.users import authenticate_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["session"])


@router.post("", response_model=UserResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_db),
    signer: SessionSigner = Depends(get_session_signer),
) -> UserResponse:
    user = await authenticate_user(session, payload.username, payload.password)
    if user is None:
        logger.info("Failed login for %s", payload.username)
        raise AuthenticationError()

    set_session_cookie(response, user, signer)
    logger.info("User %s logged in", user.id)
    return UserResponse(user=user)


@router.get("", response_model=UserResponse)
async def restore_session(
    request: Request,
    response: Response,
    user: SafeUser | None = Depends(get_optional_user),
) -> UserResponse:
    if user is None and get_settings().session_cookie_name in request.cookies:
        clear_session_cookie(response)
    return UserResponse(user=user)


@router.delete("", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    clear_session_cookie(response)
    logger.info("Session cookie cleared on logout")
    return LogoutResponse()
