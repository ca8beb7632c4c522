"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from imageshare.api import api_router
from imageshare.core.config import get_settings
from imageshare.core.errors import register_exception_handlers
from imageshare.core.logging import configure_logging
from imageshare.db.session import dispose_engine, init_models
from imageshare.middleware.csrf import CSRFMiddleware

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    await init_models()
    logger.info("%s started", settings.app_name)
    try:
        yield
    finally:
        await dispose_engine()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# CSRF runs inside CORS so preflight responses are not rejected
app.add_middleware(CSRFMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router)
