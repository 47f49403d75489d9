"""Shared persistence operations for catalog records."""

from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from repositories.query_builder import CatalogQuery
from repositories.utils import log_slow_query

COUNTER_COLUMNS = frozenset({"downloads", "views"})

T = TypeVar("T")


class CatalogRepository(Generic[T]):
    """Repository for one catalog model. Subclasses set ``model``."""

    model: ClassVar[type]

    def __init__(self, db: AsyncSession):
        self.db = db

    @log_slow_query("catalog.list_page")
    async def list_page(self, query: CatalogQuery) -> tuple[Sequence[T], int]:
        """Run the windowed select and its count companion."""
        total = (await self.db.execute(query.count_statement)).scalar_one()
        result = await self.db.execute(query.statement)
        return result.scalars().all(), total

    @log_slow_query("catalog.get_by_id")
    async def get_by_id(self, record_id: int) -> T | None:
        result = await self.db.execute(
            select(self.model).where(self.model.id == record_id)
        )
        return result.scalar_one_or_none()

    @log_slow_query("catalog.create")
    async def create(self, fields: Mapping[str, Any]) -> T:
        """Insert a record and flush so constraint errors surface immediately."""
        record = self.model(**fields)
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    @log_slow_query("catalog.update")
    async def update(self, record: T, fields: Mapping[str, Any]) -> T:
        """Apply a partial update. Keys absent from ``fields`` keep their value."""
        for name, value in fields.items():
            setattr(record, name, value)
        await self.db.flush()
        await self.db.refresh(record)
        return record

    @log_slow_query("catalog.delete")
    async def delete(self, record_id: int) -> bool:
        result = await self.db.execute(
            delete(self.model).where(self.model.id == record_id)
        )
        return result.rowcount > 0

    @log_slow_query("catalog.increment")
    async def increment(self, record_id: int, column: str) -> bool:
        """Atomically add 1 to a counter column in a single UPDATE.

        Returns False when no row has ``record_id``.
        """
        if column not in COUNTER_COLUMNS:
            raise ValueError(f"{column!r} is not a counter column")
        counter = getattr(self.model, column)
        result = await self.db.execute(
            update(self.model)
            .where(self.model.id == record_id)
            .values(**{column: counter + 1})
        )
        return result.rowcount > 0
