"""Sign-up endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from imageshare.core.dependencies import get_db, get_session_signer, set_session_cookie
from imageshare.core.errors import UserValidationError
from imageshare.core.security import SessionSigner
from imageshare.schemas.user import UserCreate, UserResponse
from imageshare.services.users import create_user
from imageshare.services.validation import validate_new_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse)
async def signup(
    payload: UserCreate,
    response: Response,
    session: AsyncSession = Depends(get_db),
    signer: SessionSigner = Depends(get_session_signer),
) -> UserResponse:
    errors = validate_new_user(payload.username, payload.password, payload.profile_image_url)
    if errors:
        raise UserValidationError(errors)

    user = await create_user(session, payload.username, payload.password, payload.profile_image_url)
    await session.commit()

    set_session_cookie(response, user, signer)
    return UserResponse(user=user)
