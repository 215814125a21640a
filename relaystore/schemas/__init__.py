"""Export Pydantic schemas for data validation."""

from relaystore.schemas.post import PostCreate
from relaystore.schemas.user import UserCreate
from relaystore.schemas.video import VideoCreate

__all__ = [
    "UserCreate",
    "PostCreate",
    "VideoCreate",
]
