from collections.abc import Sequence
from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import ColumnElement, func, literal, tuple_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


def _position_clause(
    columns: Sequence[Any], values: Sequence[Any], *, greater: bool
) -> ColumnElement[bool]:
    """Builds `columns > values` (or `<`) using row-value comparison for compound keys."""
    if len(columns) != len(values):
        raise ValueError("Position does not match the ordering columns")
    if len(columns) == 1:
        column, value = columns[0], values[0]
        return column > value if greater else column < value
    left = tuple_(*columns)
    right = tuple_(*(literal(v, type_=c.type) for c, v in zip(columns, values)))
    return left > right if greater else left < right


class CRUDBase(Generic[ModelType, CreateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with point, batch, range-scan and count reads plus Create.

        **Parameters**

        * `model`: A SQLAlchemy model class whose primary key column is named `id`
        """
        self.model = model

    async def aget(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        result = await db.execute(select(self.model).filter(self.model.id == id))
        return result.scalars().first()

    async def aget_many(
        self, db: AsyncSession, ids: Sequence[Any]
    ) -> list[Optional[ModelType]]:
        """Returns one entry per requested id, in request order, None where absent."""
        if not ids:
            return []
        result = await db.execute(
            select(self.model).filter(self.model.id.in_(set(ids)))
        )
        by_id = {obj.id: obj for obj in result.scalars().all()}
        return [by_id.get(id) for id in ids]

    async def ascan(
        self,
        db: AsyncSession,
        *,
        order_by: Sequence[Any],
        filters: Sequence[ColumnElement[bool]] = (),
        lower: Sequence[Any] | None = None,
        upper: Sequence[Any] | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[ModelType]:
        """Ordered range scan.

        `lower` and `upper` are exclusive bounds over `order_by`, expressed in the
        columns' natural ascending order. `descending` only flips the scan
        direction, so a limited descending scan reads the tail of the range.
        """
        stmt = select(self.model).where(*filters)
        if lower is not None:
            stmt = stmt.where(_position_clause(order_by, lower, greater=True))
        if upper is not None:
            stmt = stmt.where(_position_clause(order_by, upper, greater=False))
        stmt = stmt.order_by(
            *(column.desc() if descending else column.asc() for column in order_by)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def acount(
        self, db: AsyncSession, *, filters: Sequence[ColumnElement[bool]] = ()
    ) -> int:
        stmt = select(func.count()).select_from(self.model).where(*filters)
        result = await db.execute(stmt)
        return result.scalar_one()

    async def acreate(self, db: AsyncSession, *, obj_in: CreateSchemaType) -> ModelType:
        db_obj = self.model(**obj_in.model_dump())
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj
