from relaystore.crud.base import CRUDBase
from relaystore.crud.crud_post import post
from relaystore.crud.crud_user import user
from relaystore.crud.crud_video import video

__all__ = [
    "CRUDBase",
    "user",
    "post",
    "video",
]
