"""Pydantic schemas and projections for user operations."""
from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SafeUser(CamelModel):
    """The only user shape that leaves the credential store."""

    id: int
    username: str
    profile_image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


@dataclass(frozen=True, slots=True)
class UserCredentials:
    """Internal login projection carrying the password hash."""

    id: int
    username: str
    hashed_password: str

    def __repr__(self) -> str:
        return f"UserCredentials(id={self.id!r}, username={self.username!r})"


class UserCreate(CamelModel):
    # Shape only; rules live in services.validation so every violation is reported.
    username: str = Field(default="")
    password: str = Field(default="")
    profile_image_url: str | None = None


class UserResponse(BaseModel):
    user: SafeUser | None = None
