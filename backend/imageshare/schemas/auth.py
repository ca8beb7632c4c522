"""Authentication-related schemas."""
from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(default="")
    password: str = Field(default="")


class LogoutResponse(BaseModel):
    message: str = "success"


class CsrfTokenResponse(BaseModel):
    xsrf_token: str = Field(..., serialization_alias="XSRF-Token")
