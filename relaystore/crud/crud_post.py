from relaystore.crud.base import CRUDBase
from relaystore.models.post import Post
from relaystore.schemas.post import PostCreate

post = CRUDBase[Post, PostCreate](Post)
