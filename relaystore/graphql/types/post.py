import uuid
from enum import Enum

import strawberry
from sqlalchemy import ColumnElement
from strawberry.types import Info

from relaystore import crud
from relaystore.graphql.common import Node, decode_node_id, to_global_id
from relaystore.graphql.pagination import OrderSpec
from relaystore.graphql.types.common import OrderDirection
from relaystore.graphql.types.user_error import UserError
from relaystore.graphql.types.video import Video
from relaystore.graphql.utils import NodeType
from relaystore.models.post import Post as PostModel


# --- Object Types ---
@strawberry.type
class Post(Node):
    """A post. Videos reference posts by ID without a relation edge."""

    db_id: strawberry.Private[uuid.UUID]
    title: str

    @strawberry.field
    def id(self) -> strawberry.ID:
        """The globally unique ID for the Post."""
        return to_global_id(NodeType.POST.value, self.db_id)

    @strawberry.field(description="Videos whose postID points at this post.")
    async def videos(self, info: Info) -> list[Video]:
        async with info.context.session() as db:
            models = await crud.video.aget_multi_by_post(db, self.db_id)
        return [Video.from_model(model) for model in models]

    @classmethod
    def from_model(cls, model: PostModel) -> "Post":
        return cls(db_id=model.id, title=model.title)


# --- Input Types ---
@strawberry.input
class PostWhereInput:
    id: strawberry.ID | None = None
    id_in: list[strawberry.ID] | None = None
    title: str | None = None
    title_contains: str | None = None

    def to_filters(self) -> list[ColumnElement[bool]]:
        filters = []
        if self.id is not None:
            filters.append(PostModel.id == decode_node_id(self.id, NodeType.POST.value))
        if self.id_in is not None:
            keys = [decode_node_id(gid, NodeType.POST.value) for gid in self.id_in]
            filters.append(PostModel.id.in_(keys))
        if self.title is not None:
            filters.append(PostModel.title == self.title)
        if self.title_contains is not None:
            filters.append(PostModel.title.contains(self.title_contains, autoescape=True))
        return filters


@strawberry.enum
class PostOrderField(Enum):
    ID = "id"
    TITLE = "title"


@strawberry.input
class PostOrder:
    field: PostOrderField
    direction: OrderDirection = OrderDirection.ASC

    def to_spec(self) -> OrderSpec:
        return OrderSpec.for_model(PostModel, self.field.value, self.direction)


@strawberry.input
class CreatePostInput:
    title: str


# --- Payloads ---
@strawberry.type
class CreatePostPayload:
    post: Post | None = None
    userErrors: list[UserError] = strawberry.field(default_factory=list)
