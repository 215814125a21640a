import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

import strawberry
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext
from strawberry.schema.config import StrawberryConfig
from strawberry.types import Info as StrawberryInfo

from relaystore.database import get_async_db

from .common import ConnectionCursor, CursorScalar, Node
from .extensions.error_handler import CustomErrorHandler
from .relay import register_default_nodes, resolve_node, resolve_nodes
from .resolvers.post import create_post, list_posts
from .resolvers.user import create_user, list_users
from .resolvers.video import create_video, list_videos
from .types.common import Connection
from .types.post import CreatePostInput, CreatePostPayload, Post, PostOrder, PostWhereInput
from .types.user import CreateUserInput, CreateUserPayload, User, UserOrder, UserWhereInput
from .types.user_error import (
    InputValidationError,
    InternalServerError,
    InvalidIDUserError,
    NotFoundError,
)
from .types.video import (
    CreateVideoInput,
    CreateVideoPayload,
    Video,
    VideoOrder,
    VideoWhereInput,
)

logger = logging.getLogger(__name__)


# --- Custom Context ---
class Context(BaseContext):
    """Request-scoped state: one database session shared by every resolver.

    Strawberry resolves sibling fields concurrently while an AsyncSession
    supports one operation at a time, so resolvers go through `session()`.
    """

    def __init__(self, db: AsyncSession | None = None):
        super().__init__()
        self.db = db
        self.db_lock = asyncio.Lock()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self.db is None:
            raise RuntimeError("No database session is bound to this context")
        async with self.db_lock:
            yield self.db


async def get_context() -> AsyncGenerator[Context, None]:
    logger.debug("Creating GraphQL context")
    async with get_async_db() as session:
        yield Context(db=session)


# --- Root Query/Mutation Definitions ---


@strawberry.type
class Query:
    @strawberry.field
    async def node(self, info: StrawberryInfo, id: strawberry.ID) -> Node | None:
        """Fetches an object given its globally unique ID."""
        return await resolve_node(info.context, id)

    @strawberry.field
    async def nodes(
        self, info: StrawberryInfo, ids: list[strawberry.ID]
    ) -> list[Node | None]:
        """Fetches objects given their globally unique IDs, in the same order."""
        return await resolve_nodes(info.context, ids)

    @strawberry.field
    async def users(
        self,
        info: StrawberryInfo,
        first: int | None = None,
        after: ConnectionCursor | None = None,
        last: int | None = None,
        before: ConnectionCursor | None = None,
        where: UserWhereInput | None = None,
        order_by: UserOrder | None = None,
    ) -> Connection[User]:
        """Lists users, paginated."""
        return await list_users(
            info=info,
            first=first,
            after=after,
            last=last,
            before=before,
            where=where,
            order_by=order_by,
        )

    @strawberry.field
    async def posts(
        self,
        info: StrawberryInfo,
        first: int | None = None,
        after: ConnectionCursor | None = None,
        last: int | None = None,
        before: ConnectionCursor | None = None,
        where: PostWhereInput | None = None,
        order_by: PostOrder | None = None,
    ) -> Connection[Post]:
        """Lists posts, paginated."""
        return await list_posts(
            info=info,
            first=first,
            after=after,
            last=last,
            before=before,
            where=where,
            order_by=order_by,
        )

    @strawberry.field
    async def videos(
        self,
        info: StrawberryInfo,
        first: int | None = None,
        after: ConnectionCursor | None = None,
        last: int | None = None,
        before: ConnectionCursor | None = None,
        where: VideoWhereInput | None = None,
        order_by: VideoOrder | None = None,
    ) -> Connection[Video]:
        """Lists videos, paginated."""
        return await list_videos(
            info=info,
            first=first,
            after=after,
            last=last,
            before=before,
            where=where,
            order_by=order_by,
        )


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_user(
        self, info: StrawberryInfo, input: CreateUserInput
    ) -> CreateUserPayload:
        return await create_user(info=info, input=input)

    @strawberry.mutation
    async def create_post(
        self, info: StrawberryInfo, input: CreatePostInput
    ) -> CreatePostPayload:
        return await create_post(info=info, input=input)

    @strawberry.mutation
    async def create_video(
        self, info: StrawberryInfo, input: CreateVideoInput
    ) -> CreateVideoPayload:
        """Creates a video; `postID` must be the global ID of an existing Post."""
        return await create_video(info=info, input=input)


register_default_nodes()

# --- Schema Definition ---
schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    # Node implementations and UserError implementations are only reachable
    # through their interfaces
    types=[
        User,
        Post,
        Video,
        InputValidationError,
        InvalidIDUserError,
        NotFoundError,
        InternalServerError,
    ],
    extensions=[CustomErrorHandler],
    config=StrawberryConfig(scalar_map={ConnectionCursor: CursorScalar}),
)
