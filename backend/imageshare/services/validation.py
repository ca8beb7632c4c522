"""Explicit validation rules for new user records.

Each function returns a list of user-facing messages; an empty list means the
value is acceptable. The same rules run at the HTTP boundary and again inside
the credential store before anything is written.
"""
from __future__ import annotations

from pydantic import AnyHttpUrl, EmailStr, TypeAdapter, ValidationError

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72  # bcrypt ignores anything past this

_email_adapter = TypeAdapter(EmailStr)
_url_adapter = TypeAdapter(AnyHttpUrl)


def _is_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def validate_username(username: str | None) -> list[str]:
    username = username or ""
    errors = []
    if len(username) < USERNAME_MIN_LENGTH:
        errors.append("Please provide a username with at least 4 characters.")
    elif len(username) > USERNAME_MAX_LENGTH:
        errors.append("Username must be 30 characters or fewer.")
    if username and _is_email(username):
        errors.append("Username cannot be an email.")
    return errors


def validate_password(password: str | None) -> list[str]:
    password = password or ""
    if len(password) < PASSWORD_MIN_LENGTH:
        return ["Password must be 6 characters or more."]
    errors = []
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append("Password must be 72 bytes or fewer.")
    if "\x00" in password:
        errors.append("Password cannot contain null characters.")
    return errors


def validate_profile_image_url(url: str | None) -> list[str]:
    if url is None:
        return []
    try:
        _url_adapter.validate_python(url)
    except ValidationError:
        return ["Profile image must be a valid URL."]
    return []


def validate_new_user(username: str | None, password: str | None, profile_image_url: str | None = None) -> list[str]:
    return [
        *validate_username(username),
        *validate_password(password),
        *validate_profile_image_url(profile_image_url),
    ]
