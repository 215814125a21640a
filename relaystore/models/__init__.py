"""Export database models for use throughout the application."""

from relaystore.models.post import Post
from relaystore.models.user import User
from relaystore.models.video import Video

__all__ = [
    "User",
    "Post",
    "Video",
]
