from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from imageshare.core.errors import DuplicateUsernameError, UserValidationError
from imageshare.db.base import Base
from imageshare.schemas.user import SafeUser, UserCredentials
from imageshare.services import users as user_service

T = TypeVar("T")


def run_with_session(work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    async def _run() -> T:
        engine = create_async_engine(
            "sqlite+aiosqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
        try:
            async with factory() as session:
                return await work(session)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


def test_create_user_returns_safe_projection() -> None:
    async def work(session: AsyncSession) -> SafeUser:
        return await user_service.create_user(session, "alice123", "secret1", "https://img.example.com/a.png")

    user = run_with_session(work)

    assert isinstance(user, SafeUser)
    assert user.username == "alice123"
    assert user.profile_image_url == "https://img.example.com/a.png"
    assert "hashed_password" not in user.model_dump()


def test_create_user_rejects_duplicate_username() -> None:
    async def work(session: AsyncSession) -> None:
        await user_service.create_user(session, "alice123", "secret1")
        await session.commit()
        await user_service.create_user(session, "alice123", "different-password")

    with pytest.raises(DuplicateUsernameError):
        run_with_session(work)


def test_usernames_are_case_sensitive() -> None:
    async def work(session: AsyncSession) -> tuple[SafeUser, SafeUser]:
        first = await user_service.create_user(session, "alice123", "secret1")
        second = await user_service.create_user(session, "Alice123", "secret1")
        return first, second

    first, second = run_with_session(work)

    assert first.id != second.id


def test_create_user_validates_before_writing() -> None:
    async def work(session: AsyncSession) -> SafeUser | None:
        with pytest.raises(UserValidationError) as excinfo:
            await user_service.create_user(session, "a@example.com", "123")
        assert excinfo.value.errors == [
            "Username cannot be an email.",
            "Password must be 6 characters or more.",
        ]
        return await user_service.find_by_username(session, "a@example.com")

    assert run_with_session(work) is None


def test_find_by_username_visibility_modes() -> None:
    async def work(session: AsyncSession):
        await user_service.create_user(session, "alice123", "secret1")
        return (
            await user_service.find_by_username(session, "alice123"),
            await user_service.find_by_username(session, "alice123", include_hash=True),
            await user_service.find_by_username(session, "nobody"),
        )

    safe, credentials, missing = run_with_session(work)

    assert isinstance(safe, SafeUser)
    assert isinstance(credentials, UserCredentials)
    assert len(credentials.hashed_password) == 60
    assert "hashed_password" not in repr(credentials)
    assert missing is None


def test_authenticate_user() -> None:
    async def work(session: AsyncSession):
        created = await user_service.create_user(session, "alice123", "secret1")
        return (
            created,
            await user_service.authenticate_user(session, "alice123", "secret1"),
            await user_service.authenticate_user(session, "alice123", "wrong-password"),
            await user_service.authenticate_user(session, "nobody", "secret1"),
            await user_service.find_by_id(session, created.id + 100),
        )

    created, ok, wrong_password, unknown_user, missing = run_with_session(work)

    assert ok == created
    assert wrong_password is None
    assert unknown_user is None
    assert missing is None


def test_create_user_reports_unhashable_password(monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(password: str) -> str:
        raise ValueError("backend refused secret")

    monkeypatch.setattr(user_service.PasswordHasher, "hash", staticmethod(refuse))

    async def work(session: AsyncSession) -> None:
        await user_service.create_user(session, "alice123", "secret1")

    with pytest.raises(UserValidationError) as excinfo:
        run_with_session(work)

    assert excinfo.value.errors == ["Password contains characters that cannot be used."]
