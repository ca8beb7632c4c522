"""Image reference storage owned by users."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from imageshare.models import Image
from imageshare.schemas.image import ImageRef

logger = logging.getLogger(__name__)


async def store_image(session: AsyncSession, owner_id: int, key: str) -> ImageRef:
    image = Image(key=key, user_id=owner_id)
    session.add(image)
    await session.flush()
    logger.info("Stored image %s for user %s", image.id, owner_id)
    return ImageRef.model_validate(image)


async def list_by_owner(session: AsyncSession, owner_id: int) -> list[ImageRef]:
    result = await session.execute(select(Image).where(Image.user_id == owner_id).order_by(Image.id))
    return [ImageRef.model_validate(image) for image in result.scalars().all()]
