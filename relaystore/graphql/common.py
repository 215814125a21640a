import base64
import uuid
from typing import Any, NamedTuple, NewType

import strawberry

from relaystore.core.exceptions import DecodeError, InvalidIDError, UnknownTypeError
from relaystore.graphql.registry import NodeRegistry, node_registry

# Opaque pagination cursor; produced only by the cursor codec in utils.py
ConnectionCursor = NewType("ConnectionCursor", str)

# Bound to ConnectionCursor through the schema's scalar_map
CursorScalar = strawberry.scalar(
    name="Cursor",
    description="Opaque cursor for use in pagination",
    serialize=str,
    parse_value=str,
)


# --- Node Interface ---
@strawberry.interface
class Node:
    """An object with an ID, conforming to Relay Node interface."""

    id: strawberry.ID


# --- Global ID Functions ---

_SEPARATOR = ":"


class GlobalID(NamedTuple):
    type_tag: str
    raw_key: Any


def _key_to_str(raw_key: str | int | uuid.UUID) -> str:
    if isinstance(raw_key, bool) or not isinstance(raw_key, (str, int, uuid.UUID)):
        raise TypeError(f"Unsupported raw key type: {type(raw_key).__name__}")
    return str(raw_key)


def to_global_id(type_name: str, id: str | int | uuid.UUID) -> strawberry.ID:
    """Encodes a type name and raw primary key into a global ID string."""
    if not type_name or _SEPARATOR in type_name:
        raise ValueError(f"Invalid node type tag: {type_name!r}")
    combined = f"{type_name}{_SEPARATOR}{_key_to_str(id)}"
    return strawberry.ID(
        base64.urlsafe_b64encode(combined.encode("utf-8")).decode("ascii")
    )


def from_global_id(
    global_id: str, registry: NodeRegistry | None = None
) -> GlobalID:
    """Decodes a global ID string into its type tag and native raw key.

    Raises UnknownTypeError when the tag is not registered and DecodeError for
    anything else that is not the canonical encoding of a registered node key.
    """
    if registry is None:
        registry = node_registry
    if not isinstance(global_id, str):
        raise DecodeError(f"Invalid Global ID: expected a string, got {type(global_id).__name__}")

    try:
        decoded_bytes = base64.b64decode(
            global_id.encode("ascii"), altchars=b"-_", validate=True
        )
        decoded_str = decoded_bytes.decode("utf-8")
    except ValueError as e:
        # binascii.Error and the unicode errors are all ValueErrors
        raise DecodeError(f"Invalid Global ID: {global_id!r}") from e

    type_name, separator, key_str = decoded_str.partition(_SEPARATOR)
    if not separator or not type_name:
        raise DecodeError(f"Invalid Global ID: {global_id!r}")

    registration = registry.get(type_name)
    if registration is None:
        raise UnknownTypeError(type_name)

    try:
        raw_key = registration.parse_key(key_str)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"Invalid {type_name} key in Global ID: {global_id!r}") from e

    # Only the canonical spelling of a (type, key) pair is accepted
    if to_global_id(type_name, raw_key) != global_id:
        raise DecodeError(f"Non-canonical Global ID: {global_id!r}")
    return GlobalID(type_name, raw_key)


def decode_node_id(
    global_id: str, expected_type: str, registry: NodeRegistry | None = None
) -> Any:
    """Decodes a client-supplied ID that must reference `expected_type`; returns the raw key."""
    try:
        decoded = from_global_id(global_id, registry)
    except DecodeError as e:
        raise InvalidIDError(e.message, global_id=global_id) from e
    if decoded.type_tag != expected_type:
        raise InvalidIDError(
            f"Expected a {expected_type} ID, got a {decoded.type_tag} ID",
            global_id=global_id,
        )
    return decoded.raw_key
