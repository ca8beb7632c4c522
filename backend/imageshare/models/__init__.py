"""SQLAlchemy models exposed for metadata creation and imports."""
from .image import Image
from .user import User

__all__ = ["User", "Image"]
