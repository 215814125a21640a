"""Relay cursor connections over an ordered, filtered CRUD collection.

A connection request is answered with two reads against the same session: a
windowed range scan fetching one row past the requested limit (the extra
"probe" row tells whether more rows remain in the scan direction) and a
count of every row matching the filter. Backward pages are scanned in
descending order so the limit keeps the tail, then reversed before being
returned.
"""

import datetime
import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from relaystore.core.config import settings
from relaystore.core.exceptions import (
    ConflictingArgumentsError,
    InvalidArgumentError,
    InvalidCursorError,
)
from relaystore.crud.base import CRUDBase
from relaystore.graphql.types.common import Connection, Edge, OrderDirection, PageInfo
from relaystore.graphql.utils import decode_cursor, encode_cursor

logger = logging.getLogger(__name__)

NodeT = TypeVar("NodeT")


@dataclass(frozen=True)
class OrderSpec:
    """Sort columns of a connection; the last column must make positions unique."""

    columns: tuple[InstrumentedAttribute, ...]
    direction: OrderDirection = OrderDirection.ASC

    @classmethod
    def for_model(
        cls,
        model: type,
        field: str = "id",
        direction: OrderDirection = OrderDirection.ASC,
    ) -> "OrderSpec":
        """Orders by `field`, with the primary key appended as tie-breaker."""
        columns = (getattr(model, field),)
        if field != "id":
            columns += (model.id,)
        return cls(columns=columns, direction=direction)

    @property
    def signature(self) -> str:
        # Scoped to the table so a cursor cannot be replayed on another connection
        table = self.columns[0].class_.__tablename__
        names = ",".join(column.key for column in self.columns)
        return f"{table}:{names}:{self.direction.value}"

    def position_of(self, obj: Any) -> tuple[Any, ...]:
        return tuple(getattr(obj, column.key) for column in self.columns)

    def cursor_for(self, obj: Any) -> str:
        return encode_cursor(self.signature, self.position_of(obj))


@dataclass(frozen=True)
class PaginationArgs:
    first: int | None = None
    after: str | None = None
    last: int | None = None
    before: str | None = None

    def validate(self, max_limit: int | None = None) -> None:
        if self.first is not None and self.last is not None:
            raise ConflictingArgumentsError()
        for name, value in (("first", self.first), ("last", self.last)):
            if value is None:
                continue
            if value < 0:
                raise InvalidArgumentError(
                    f"`{name}` must be a non-negative integer, got {value}", field=name
                )
            if max_limit is not None and value > max_limit:
                raise InvalidArgumentError(
                    f"`{name}` must not exceed {max_limit}, got {value}", field=name
                )

    @property
    def backward(self) -> bool:
        return self.last is not None


def _coerce(column: InstrumentedAttribute, value: Any) -> Any:
    """Converts a JSON cursor value back into the column's Python type."""
    try:
        python_type = column.expression.type.python_type
    except NotImplementedError:
        return value

    if value is None:
        return None
    if python_type is bool:
        if isinstance(value, bool):
            return value
    elif python_type is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif python_type is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif python_type is str:
        if isinstance(value, str):
            return value
    elif python_type is uuid.UUID:
        if isinstance(value, str):
            return uuid.UUID(value)
    elif python_type is datetime.datetime:
        if isinstance(value, str):
            return datetime.datetime.fromisoformat(value)
    elif python_type is datetime.date:
        if isinstance(value, str):
            return datetime.date.fromisoformat(value)
    else:
        return value
    raise ValueError(f"Cursor value {value!r} does not fit column '{column.key}'")


def decode_position(cursor: str, order: OrderSpec) -> tuple[Any, ...]:
    """Decodes `cursor` into typed sort-key values for `order`.

    Cursors issued under a different ordering are rejected rather than
    reinterpreted.
    """
    position = decode_cursor(cursor)
    if position.ordering != order.signature:
        raise InvalidCursorError(
            f"Cursor was issued for ordering '{position.ordering}', "
            f"not '{order.signature}'"
        )
    if len(position.values) != len(order.columns):
        raise InvalidCursorError("Cursor does not match the ordering columns")
    try:
        return tuple(
            _coerce(column, value)
            for column, value in zip(order.columns, position.values)
        )
    except ValueError as e:
        raise InvalidCursorError(str(e)) from e


async def paginate(
    db: AsyncSession,
    crud_obj: CRUDBase,
    *,
    args: PaginationArgs,
    to_node: Callable[[Any], NodeT],
    order: OrderSpec | None = None,
    filters: Sequence[ColumnElement[bool]] = (),
    default_limit: int | None = None,
    max_limit: int | None = None,
) -> Connection[NodeT]:
    """Computes one page of a connection over `crud_obj`'s model."""
    if order is None:
        order = OrderSpec.for_model(crud_obj.model)
    if default_limit is None:
        default_limit = settings.DEFAULT_PAGE_SIZE
    if max_limit is None:
        max_limit = settings.MAX_PAGE_SIZE
    args.validate(max_limit=max_limit)

    after = decode_position(args.after, order) if args.after is not None else None
    before = decode_position(args.before, order) if args.before is not None else None

    ascending = order.direction is OrderDirection.ASC
    # Storage bounds are in ascending column order
    lower, upper = (after, before) if ascending else (before, after)

    if args.backward:
        limit = args.last
        descending = ascending
    else:
        limit = args.first if args.first is not None else default_limit
        descending = not ascending

    rows = await crud_obj.ascan(
        db,
        order_by=order.columns,
        filters=filters,
        lower=lower,
        upper=upper,
        descending=descending,
        limit=limit + 1,
    )
    has_more = len(rows) > limit
    rows = rows[:limit]
    if args.backward:
        rows.reverse()

    total_count = await crud_obj.acount(db, filters=filters)

    edges = [Edge(node=to_node(row), cursor=order.cursor_for(row)) for row in rows]
    page_info = PageInfo(
        has_next_page=has_more and not args.backward,
        has_previous_page=has_more and args.backward,
        start_cursor=edges[0].cursor if edges else None,
        end_cursor=edges[-1].cursor if edges else None,
    )
    logger.debug(
        "Computed connection page",
        extra={
            "props": {
                "model": crud_obj.model.__name__,
                "ordering": order.signature,
                "limit": limit,
                "backward": args.backward,
                "edges": len(edges),
                "total_count": total_count,
            }
        },
    )
    return Connection(total_count=total_count, edges=edges, page_info=page_info)
