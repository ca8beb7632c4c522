"""User service functions for the credential store and authentication."""
from __future__ import annotations

import logging
from typing import Literal, overload

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from imageshare.core.errors import DuplicateUsernameError, UserValidationError
from imageshare.core.security import PasswordHasher
from imageshare.models import User
from imageshare.schemas.user import SafeUser, UserCredentials
from imageshare.services.validation import validate_new_user

logger = logging.getLogger(__name__)

# Verified against when the username is unknown so both login failures cost a bcrypt round.
_DUMMY_HASH = PasswordHasher.hash("imageshare-timing-equaliser")


async def create_user(
    session: AsyncSession,
    username: str,
    password: str,
    profile_image_url: str | None = None,
) -> SafeUser:
    errors = validate_new_user(username, password, profile_image_url)
    if errors:
        raise UserValidationError(errors)

    try:
        hashed_password = PasswordHasher.hash(password)
    except ValueError as exc:
        # passlib rejects secrets its backend cannot hash
        raise UserValidationError(["Password contains characters that cannot be used."]) from exc

    user = User(
        username=username,
        profile_image_url=profile_image_url,
        hashed_password=hashed_password,
    )
    session.add(user)
    try:
        # The unique index on username is the only uniqueness check.
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateUsernameError() from exc

    logger.info("Created user %s (id=%s)", user.username, user.id)
    return SafeUser.model_validate(user)


@overload
async def find_by_username(
    session: AsyncSession, username: str, *, include_hash: Literal[False] = False
) -> SafeUser | None: ...


@overload
async def find_by_username(
    session: AsyncSession, username: str, *, include_hash: Literal[True]
) -> UserCredentials | None: ...


async def find_by_username(
    session: AsyncSession, username: str, *, include_hash: bool = False
) -> SafeUser | UserCredentials | None:
    result = await session.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None:
        return None
    if include_hash:
        return UserCredentials(id=user.id, username=user.username, hashed_password=user.hashed_password)
    return SafeUser.model_validate(user)


async def find_by_id(session: AsyncSession, user_id: int) -> SafeUser | None:
    user = await session.get(User, user_id)
    if user is None:
        return None
    return SafeUser.model_validate(user)


async def authenticate_user(session: AsyncSession, username: str, password: str) -> SafeUser | None:
    credentials = await find_by_username(session, username, include_hash=True)
    if credentials is None:
        PasswordHasher.verify(password, _DUMMY_HASH)
        return None
    if not PasswordHasher.verify(password, credentials.hashed_password):
        return None
    return await find_by_id(session, credentials.id)
