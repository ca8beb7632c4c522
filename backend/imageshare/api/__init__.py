"""API router aggregator."""
from fastapi import APIRouter

from imageshare.api.routes import csrf, images, session, users

api_router = APIRouter(prefix="/api")
api_router.include_router(csrf.router)
api_router.include_router(session.router)
api_router.include_router(users.router)
api_router.include_router(images.router)

__all__ = ["api_router"]
