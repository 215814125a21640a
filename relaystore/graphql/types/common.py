from enum import Enum
from typing import Generic, TypeVar

import strawberry

from relaystore.graphql.common import ConnectionCursor

NodeType = TypeVar("NodeType")


@strawberry.enum
class OrderDirection(Enum):
    ASC = "ASC"
    DESC = "DESC"


# --- Pagination Types ---


@strawberry.type
class PageInfo:
    """Information about pagination in a connection."""

    has_next_page: bool = strawberry.field(
        description="When paginating forwards, indicates if more items exist."
    )
    has_previous_page: bool = strawberry.field(
        description="When paginating backwards, indicates if more items exist."
    )
    start_cursor: ConnectionCursor | None = strawberry.field(
        description="The cursor to continue when paginating backwards.",
        default=None,
    )
    end_cursor: ConnectionCursor | None = strawberry.field(
        description="The cursor to continue when paginating forwards.",
        default=None,
    )


@strawberry.type
class Edge(Generic[NodeType]):
    node: NodeType
    cursor: ConnectionCursor


@strawberry.type
class Connection(Generic[NodeType]):
    """Relay-style connection for pagination."""

    total_count: int = strawberry.field(
        description="Number of items matching the filter, regardless of the page window."
    )
    edges: list[Edge[NodeType]]
    page_info: PageInfo = strawberry.field(
        description="Information to aid in pagination."
    )
