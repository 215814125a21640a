import base64
import json
from collections.abc import Sequence
from enum import Enum
from typing import Any, NamedTuple

from fastapi.encoders import jsonable_encoder

from relaystore.core.exceptions import InvalidCursorError


class NodeType(Enum):
    """Enum for identifying different node types in Global IDs."""

    USER = "User"
    POST = "Post"
    VIDEO = "Video"


class CursorPosition(NamedTuple):
    """A decoded cursor: the ordering it was issued under and its sort-key values."""

    ordering: str
    values: tuple[Any, ...]


_SCALARS = (str, int, float, bool, type(None))


def encode_cursor(ordering: str, values: Sequence[Any]) -> str:
    """Encodes an ordering signature and its sort-key values into an opaque cursor.

    Values are stored in their JSON form (datetimes as ISO strings, UUIDs as
    strings); the paginator converts them back using the column types.
    """
    if not values:
        raise ValueError("A cursor needs at least one sort-key value")
    payload = {"o": ordering, "v": jsonable_encoder(list(values))}
    combined = json.dumps(payload, separators=(",", ":"), sort_keys=True)
    return base64.urlsafe_b64encode(combined.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> CursorPosition:
    """Decodes an opaque cursor string back into its ordering and values.

    Raises
    ------
        InvalidCursorError: if the string is not a cursor produced by encode_cursor.

    """
    if not isinstance(cursor, str):
        raise InvalidCursorError("Invalid cursor: expected a string")
    try:
        decoded_bytes = base64.b64decode(
            cursor.encode("ascii"), altchars=b"-_", validate=True
        )
        payload = json.loads(decoded_bytes.decode("utf-8"))
    except ValueError as e:
        raise InvalidCursorError(f"Invalid cursor format: {cursor!r}") from e

    if not isinstance(payload, dict) or set(payload) != {"o", "v"}:
        raise InvalidCursorError(f"Invalid cursor format: {cursor!r}")
    ordering, values = payload["o"], payload["v"]
    if (
        not isinstance(ordering, str)
        or not isinstance(values, list)
        or not values
        or not all(isinstance(v, _SCALARS) for v in values)
    ):
        raise InvalidCursorError(f"Invalid cursor format: {cursor!r}")
    return CursorPosition(ordering, tuple(values))
