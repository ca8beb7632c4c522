"""Schemas for image references."""
from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from imageshare.schemas.user import CamelModel


class ImageRef(CamelModel):
    id: int
    key: str
    user_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ImageCreate(CamelModel):
    key: str = Field(..., min_length=1, max_length=1024)


class ImageListResponse(CamelModel):
    images: list[ImageRef]


class ImageResponse(CamelModel):
    image: ImageRef
