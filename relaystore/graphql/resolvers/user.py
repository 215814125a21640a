import logging
from collections.abc import Sequence

from pydantic import ValidationError
from strawberry.types import Info

from relaystore import crud
from relaystore.core.exceptions import APIException
from relaystore.graphql.errors import map_exception_to_user_errors
from relaystore.graphql.pagination import PaginationArgs, paginate
from relaystore.graphql.types.common import Connection
from relaystore.graphql.types.user import (
    CreateUserInput,
    CreateUserPayload,
    User,
    UserOrder,
    UserWhereInput,
)
from relaystore.schemas.user import UserCreate

logger = logging.getLogger(__name__)


# --- Node loaders ---


async def load_user(context, pk: int) -> User | None:
    async with context.session() as db:
        model = await crud.user.aget(db, pk)
    return User.from_model(model) if model else None


async def load_users(context, pks: Sequence[int]) -> list[User | None]:
    async with context.session() as db:
        models = await crud.user.aget_many(db, pks)
    return [User.from_model(model) if model else None for model in models]


# --- users Query --- #
async def list_users(
    info: Info,
    first: int | None = None,
    after: str | None = None,
    last: int | None = None,
    before: str | None = None,
    where: UserWhereInput | None = None,
    order_by: UserOrder | None = None,
) -> Connection[User]:
    """Resolver for the `users` connection."""
    logger.info(
        "Resolver 'users' called",
        extra={"props": {"first": first, "last": last, "after": after, "before": before}},
    )
    filters = where.to_filters() if where else []
    async with info.context.session() as db:
        return await paginate(
            db,
            crud.user,
            args=PaginationArgs(first=first, after=after, last=last, before=before),
            to_node=User.from_model,
            order=order_by.to_spec() if order_by else None,
            filters=filters,
        )


# --- createUser Mutation --- #
async def create_user(info: Info, input: CreateUserInput) -> CreateUserPayload:
    logger.info("Executing 'createUser' mutation")
    try:
        user_in = UserCreate(name=input.name)
        async with info.context.session() as db:
            model = await crud.user.acreate(db, obj_in=user_in)
    except (ValidationError, APIException) as e:
        return CreateUserPayload(userErrors=map_exception_to_user_errors(e))

    logger.info("User created", extra={"props": {"user_id": model.id}})
    return CreateUserPayload(user=User.from_model(model))
