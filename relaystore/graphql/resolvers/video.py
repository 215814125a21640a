import logging
import uuid
from collections.abc import Sequence

from pydantic import ValidationError
from strawberry.types import Info

from relaystore import crud
from relaystore.core.exceptions import APIException, NotFoundError
from relaystore.graphql.common import decode_node_id
from relaystore.graphql.errors import map_exception_to_user_errors
from relaystore.graphql.pagination import PaginationArgs, paginate
from relaystore.graphql.types.common import Connection
from relaystore.graphql.types.video import (
    CreateVideoInput,
    CreateVideoPayload,
    Video,
    VideoOrder,
    VideoWhereInput,
)
from relaystore.graphql.utils import NodeType
from relaystore.schemas.video import VideoCreate

logger = logging.getLogger(__name__)


# --- Node loaders ---


async def load_video(context, pk: uuid.UUID) -> Video | None:
    async with context.session() as db:
        model = await crud.video.aget(db, pk)
    return Video.from_model(model) if model else None


async def load_videos(context, pks: Sequence[uuid.UUID]) -> list[Video | None]:
    async with context.session() as db:
        models = await crud.video.aget_many(db, pks)
    return [Video.from_model(model) if model else None for model in models]


# --- videos Query --- #
async def list_videos(
    info: Info,
    first: int | None = None,
    after: str | None = None,
    last: int | None = None,
    before: str | None = None,
    where: VideoWhereInput | None = None,
    order_by: VideoOrder | None = None,
) -> Connection[Video]:
    """Resolver for the `videos` connection."""
    logger.info(
        "Resolver 'videos' called",
        extra={"props": {"first": first, "last": last, "after": after, "before": before}},
    )
    filters = where.to_filters() if where else []
    async with info.context.session() as db:
        return await paginate(
            db,
            crud.video,
            args=PaginationArgs(first=first, after=after, last=last, before=before),
            to_node=Video.from_model,
            order=order_by.to_spec() if order_by else None,
            filters=filters,
        )


# --- createVideo Mutation --- #
async def create_video(info: Info, input: CreateVideoInput) -> CreateVideoPayload:
    logger.info("Executing 'createVideo' mutation")
    post_pk: uuid.UUID | None = None
    if input.post_id is not None:
        try:
            post_pk = decode_node_id(input.post_id, NodeType.POST.value)
            async with info.context.session() as db:
                if await crud.post.aget(db, post_pk) is None:
                    raise NotFoundError("Post not found.")
        except APIException as e:
            return CreateVideoPayload(
                userErrors=map_exception_to_user_errors(e, field="postID")
            )

    try:
        video_in = VideoCreate(name=input.name, post_id=post_pk)
        async with info.context.session() as db:
            model = await crud.video.acreate(db, obj_in=video_in)
    except (ValidationError, APIException) as e:
        return CreateVideoPayload(userErrors=map_exception_to_user_errors(e))

    logger.info("Video created", extra={"props": {"video_id": str(model.id)}})
    return CreateVideoPayload(video=Video.from_model(model))
