"""Image listing and storage endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from imageshare.core.dependencies import get_current_user, get_db
from imageshare.core.errors import ForbiddenError
from imageshare.schemas.image import ImageCreate, ImageListResponse, ImageResponse
from imageshare.schemas.user import SafeUser
from imageshare.services import images as image_service

router = APIRouter(prefix="/images", tags=["images"])


@router.get("/{user_id}", response_model=ImageListResponse)
async def list_images(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    current_user: SafeUser = Depends(get_current_user),
) -> ImageListResponse:
    if current_user.id != user_id:
        raise ForbiddenError(["You may only view your own images."])
    images = await image_service.list_by_owner(session, user_id)
    return ImageListResponse(images=images)


@router.post("", response_model=ImageResponse, status_code=status.HTTP_201_CREATED)
async def store_image(
    payload: ImageCreate,
    session: AsyncSession = Depends(get_db),
    current_user: SafeUser = Depends(get_current_user),
) -> ImageResponse:
    image = await image_service.store_image(session, current_user.id, payload.key)
    await session.commit()
    return ImageResponse(image=image)
