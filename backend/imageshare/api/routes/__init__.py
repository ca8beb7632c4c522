"""Route modules for the ImageShare API."""
from . import csrf, images, session, users

__all__ = ["csrf", "images", "session", "users"]
