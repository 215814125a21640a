import uuid
from enum import Enum

import strawberry
from sqlalchemy import ColumnElement

from relaystore.graphql.common import Node, decode_node_id, to_global_id
from relaystore.graphql.pagination import OrderSpec
from relaystore.graphql.types.common import OrderDirection
from relaystore.graphql.types.user_error import UserError
from relaystore.graphql.utils import NodeType
from relaystore.models.video import Video as VideoModel


# --- Object Types ---
@strawberry.type
class Video(Node):
    db_id: strawberry.Private[uuid.UUID]
    db_post_id: strawberry.Private[uuid.UUID | None]
    name: str

    @strawberry.field
    def id(self) -> strawberry.ID:
        """The globally unique ID for the Video."""
        return to_global_id(NodeType.VIDEO.value, self.db_id)

    @strawberry.field(name="postID", description="Global ID of the referenced Post.")
    def post_id(self) -> strawberry.ID | None:
        if self.db_post_id is None:
            return None
        return to_global_id(NodeType.POST.value, self.db_post_id)

    @classmethod
    def from_model(cls, model: VideoModel) -> "Video":
        return cls(db_id=model.id, db_post_id=model.post_id, name=model.name)


# --- Input Types ---
@strawberry.input
class VideoWhereInput:
    id: strawberry.ID | None = None
    id_in: list[strawberry.ID] | None = None
    name: str | None = None
    name_contains: str | None = None
    post_id: strawberry.ID | None = strawberry.field(default=None, name="postID")

    def to_filters(self) -> list[ColumnElement[bool]]:
        filters = []
        if self.id is not None:
            filters.append(VideoModel.id == decode_node_id(self.id, NodeType.VIDEO.value))
        if self.id_in is not None:
            keys = [decode_node_id(gid, NodeType.VIDEO.value) for gid in self.id_in]
            filters.append(VideoModel.id.in_(keys))
        if self.name is not None:
            filters.append(VideoModel.name == self.name)
        if self.name_contains is not None:
            filters.append(VideoModel.name.contains(self.name_contains, autoescape=True))
        if self.post_id is not None:
            filters.append(
                VideoModel.post_id == decode_node_id(self.post_id, NodeType.POST.value)
            )
        return filters


@strawberry.enum
class VideoOrderField(Enum):
    ID = "id"
    NAME = "name"


@strawberry.input
class VideoOrder:
    field: VideoOrderField
    direction: OrderDirection = OrderDirection.ASC

    def to_spec(self) -> OrderSpec:
        return OrderSpec.for_model(VideoModel, self.field.value, self.direction)


@strawberry.input
class CreateVideoInput:
    name: str
    post_id: strawberry.ID | None = strawberry.field(default=None, name="postID")


# --- Payloads ---
@strawberry.type
class CreateVideoPayload:
    video: Video | None = None
    userErrors: list[UserError] = strawberry.field(default_factory=list)
