"""Security helpers for password hashing and session token signing."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from itsdangerous import BadData, BadSignature, SignatureExpired, URLSafeTimedSerializer
from itsdangerous.encoding import base64_decode, base64_encode
from passlib.context import CryptContext

from .config import get_settings


_password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class PasswordHasher:
    """Hash and verify user passwords using salted bcrypt."""

    @staticmethod
    def hash(password: str) -> str:
        return _password_context.hash(password)

    @staticmethod
    def verify(password: str, hashed: str) -> bool:
        try:
            return _password_context.verify(password, hashed)
        except (ValueError, TypeError):
            # unrecognised or malformed hash
            return False


class TokenError(Exception):
    """Base class for session token rejections."""


class TokenInvalidError(TokenError):
    """Token signature or payload does not check out."""


class TokenExpiredError(TokenError):
    """Token was valid but its lifetime has elapsed."""


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_at: datetime


def _is_canonical(token: str) -> bool:
    """Every segment must re-encode to itself; the decoder ignores spare trailing bits."""
    for segment in token.split("."):
        if not segment:
            continue
        try:
            decoded = base64_decode(segment)
        except BadData:
            return False
        if base64_encode(decoded) != segment.encode("utf-8"):
            return False
    return True


class SessionSigner:
    """Issue and verify signed, time-bounded session tokens.

    A token carries the user id and its issue timestamp, signed with the
    server secret. Nothing is stored server-side: validity is the signature
    plus ``max_age`` seconds from issuance.
    """

    def __init__(
        self,
        secret_key: str | None = None,
        max_age: int | None = None,
        salt: str = "imageshare-session",
    ) -> None:
        settings = get_settings()
        self.max_age = max_age if max_age is not None else settings.session_max_age
        self._serializer = URLSafeTimedSerializer(secret_key or settings.secret_key, salt=salt)

    def dumps(self, data: dict[str, Any]) -> str:
        return self._serializer.dumps(data)

    def loads(self, token: str, max_age: int | None = None) -> dict[str, Any]:
        try:
            return self._serializer.loads(token, max_age=max_age)
        except SignatureExpired as exc:
            raise TokenExpiredError("Session token expired") from exc
        except BadSignature as exc:
            raise TokenInvalidError("Invalid session token") from exc

    def issue(self, user_id: int) -> IssuedToken:
        token = self.dumps({"uid": user_id})
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=self.max_age)
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: str | None) -> int:
        if not token:
            raise TokenInvalidError("Missing session token")
        if not _is_canonical(token):
            raise TokenInvalidError("Non-canonical session token")
        payload = self.loads(token, max_age=self.max_age)
        user_id = payload.get("uid") if isinstance(payload, dict) else None
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise TokenInvalidError("Malformed session token")
        return user_id
