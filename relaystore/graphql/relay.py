import asyncio
import logging
import uuid
from collections.abc import Sequence
from typing import Any

from relaystore.core.exceptions import DecodeError, InvalidIDError, UnknownTypeError
from relaystore.graphql.common import from_global_id
from relaystore.graphql.registry import NodeRegistry, node_registry
from relaystore.graphql.resolvers import post, user, video
from relaystore.graphql.utils import NodeType

logger = logging.getLogger(__name__)


# --- Node Fetching Logic ---


async def resolve_node(
    context: Any, global_id: str, registry: NodeRegistry | None = None
) -> Any | None:
    """Fetches any Node object by its global ID.

    Malformed IDs raise InvalidIDError and unregistered types raise
    UnknownTypeError. A well-formed ID whose entity no longer exists yields None.
    """
    if registry is None:
        registry = node_registry
    try:
        type_name, raw_key = from_global_id(global_id, registry)
    except UnknownTypeError as e:
        logger.warning(f"Unknown type name '{e.type_tag}' found in global ID '{global_id}'")
        raise
    except DecodeError as e:
        logger.warning(f"Could not decode global ID '{global_id}': {e}")
        raise InvalidIDError(e.message, global_id=global_id) from e

    registration = registry.lookup(type_name)
    node = await registration.load_one(context, raw_key)
    if node is None:
        logger.debug(f"Node {type_name} with key '{raw_key}' not found.")
    return node


async def resolve_nodes(
    context: Any, global_ids: Sequence[str], registry: NodeRegistry | None = None
) -> list[Any | None]:
    """Fetches many nodes, one result per requested ID and in request order.

    IDs are batched per type so each type is loaded with a single `load_many`
    call; the batches run concurrently. Positions whose ID is malformed,
    of an unregistered type or not found are None. A failing batch fails the
    whole call.
    """
    if registry is None:
        registry = node_registry

    results: list[Any | None] = [None] * len(global_ids)
    # type tag -> [(position in request, raw key)]
    groups: dict[str, list[tuple[int, Any]]] = {}
    for index, global_id in enumerate(global_ids):
        try:
            type_name, raw_key = from_global_id(global_id, registry)
        except DecodeError as e:
            logger.warning(f"Skipping undecodable global ID '{global_id}': {e}")
            continue
        groups.setdefault(type_name, []).append((index, raw_key))

    async def load_group(type_name: str, entries: list[tuple[int, Any]]):
        registration = registry.lookup(type_name)
        keys = [raw_key for _, raw_key in entries]
        nodes = await registration.load_many(context, keys)
        if len(nodes) != len(keys):
            raise RuntimeError(
                f"load_many for '{type_name}' returned {len(nodes)} results for {len(keys)} keys"
            )
        return entries, nodes

    tasks = [
        asyncio.ensure_future(load_group(type_name, entries))
        for type_name, entries in groups.items()
    ]
    try:
        batches = await asyncio.gather(*tasks)
    except BaseException:
        # No batch may outlive the call; the request session is released after it
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    for entries, nodes in batches:
        for (index, _), node in zip(entries, nodes):
            results[index] = node
    return results


# --- Node Registration ---


def register_default_nodes(registry: NodeRegistry | None = None) -> NodeRegistry:
    """Registers every Node type of the schema, then freezes the registry."""
    if registry is None:
        registry = node_registry

    registry.register(NodeType.USER.value, user.load_user, user.load_users, parse_key=int)
    registry.register(NodeType.POST.value, post.load_post, post.load_posts, parse_key=uuid.UUID)
    registry.register(
        NodeType.VIDEO.value, video.load_video, video.load_videos, parse_key=uuid.UUID
    )
    registry.freeze()
    logger.info(
        "Node registry initialised",
        extra={"props": {"node_types": list(registry.type_tags)}},
    )
    return registry
