import logging
import uuid
from collections.abc import Sequence

from pydantic import ValidationError
from strawberry.types import Info

from relaystore import crud
from relaystore.core.exceptions import APIException
from relaystore.graphql.errors import map_exception_to_user_errors
from relaystore.graphql.pagination import PaginationArgs, paginate
from relaystore.graphql.types.common import Connection
from relaystore.graphql.types.post import (
    CreatePostInput,
    CreatePostPayload,
    Post,
    PostOrder,
    PostWhereInput,
)
from relaystore.schemas.post import PostCreate

logger = logging.getLogger(__name__)


# --- Node loaders ---


async def load_post(context, pk: uuid.UUID) -> Post | None:
    async with context.session() as db:
        model = await crud.post.aget(db, pk)
    return Post.from_model(model) if model else None


async def load_posts(context, pks: Sequence[uuid.UUID]) -> list[Post | None]:
    async with context.session() as db:
        models = await crud.post.aget_many(db, pks)
    return [Post.from_model(model) if model else None for model in models]


# --- posts Query --- #
async def list_posts(
    info: Info,
    first: int | None = None,
    after: str | None = None,
    last: int | None = None,
    before: str | None = None,
    where: PostWhereInput | None = None,
    order_by: PostOrder | None = None,
) -> Connection[Post]:
    """Resolver for the `posts` connection."""
    logger.info(
        "Resolver 'posts' called",
        extra={"props": {"first": first, "last": last, "after": after, "before": before}},
    )
    filters = where.to_filters() if where else []
    async with info.context.session() as db:
        return await paginate(
            db,
            crud.post,
            args=PaginationArgs(first=first, after=after, last=last, before=before),
            to_node=Post.from_model,
            order=order_by.to_spec() if order_by else None,
            filters=filters,
        )


# --- createPost Mutation --- #
async def create_post(info: Info, input: CreatePostInput) -> CreatePostPayload:
    logger.info("Executing 'createPost' mutation")
    try:
        post_in = PostCreate(title=input.title)
        async with info.context.session() as db:
            model = await crud.post.acreate(db, obj_in=post_in)
    except (ValidationError, APIException) as e:
        return CreatePostPayload(userErrors=map_exception_to_user_errors(e))

    logger.info("Post created", extra={"props": {"post_id": str(model.id)}})
    return CreatePostPayload(post=Post.from_model(model))
