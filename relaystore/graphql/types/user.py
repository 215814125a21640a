from enum import Enum

import strawberry
from sqlalchemy import ColumnElement

from relaystore.graphql.common import Node, decode_node_id, to_global_id
from relaystore.graphql.pagination import OrderSpec
from relaystore.graphql.types.common import OrderDirection
from relaystore.graphql.types.user_error import UserError
from relaystore.graphql.utils import NodeType
from relaystore.models.user import User as UserModel


# --- Object Types ---
@strawberry.type
class User(Node):
    """Represents a user in the system."""

    db_id: strawberry.Private[int]
    name: str

    @strawberry.field
    def id(self) -> strawberry.ID:
        """The globally unique ID for the User."""
        return to_global_id(NodeType.USER.value, self.db_id)

    @classmethod
    def from_model(cls, model: UserModel) -> "User":
        return cls(db_id=model.id, name=model.name)


# --- Input Types ---
@strawberry.input
class UserWhereInput:
    id: strawberry.ID | None = None
    id_in: list[strawberry.ID] | None = None
    name: str | None = None
    name_contains: str | None = None

    def to_filters(self) -> list[ColumnElement[bool]]:
        filters = []
        if self.id is not None:
            filters.append(UserModel.id == decode_node_id(self.id, NodeType.USER.value))
        if self.id_in is not None:
            keys = [decode_node_id(gid, NodeType.USER.value) for gid in self.id_in]
            filters.append(UserModel.id.in_(keys))
        if self.name is not None:
            filters.append(UserModel.name == self.name)
        if self.name_contains is not None:
            filters.append(UserModel.name.contains(self.name_contains, autoescape=True))
        return filters


@strawberry.enum
class UserOrderField(Enum):
    ID = "id"
    NAME = "name"


@strawberry.input
class UserOrder:
    field: UserOrderField
    direction: OrderDirection = OrderDirection.ASC

    def to_spec(self) -> OrderSpec:
        return OrderSpec.for_model(UserModel, self.field.value, self.direction)


@strawberry.input
class CreateUserInput:
    name: str


# --- Payloads ---
@strawberry.type
class CreateUserPayload:
    """Payload returned after creating a user."""

    user: User | None = None
    userErrors: list[UserError] = strawberry.field(default_factory=list)
