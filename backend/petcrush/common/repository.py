"""Generic async repository shared by the domain repositories."""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from petcrush.common.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """CRUD helpers; callers own the transaction (flush only, never commit)."""

    def __init__(self, model: Type[ModelT]):
        self.model = model

    async def get_by_id(self, session: AsyncSession, obj_id) -> Optional[ModelT]:
        return await session.get(self.model, obj_id)

    async def get_many(self, session: AsyncSession, ids) -> dict:
        """Fetch rows by id, returned as ``{id: row}``."""
        ids = set(ids)
        if not ids:
            return {}
        stmt = select(self.model).where(self.model.id.in_(ids))
        result = await session.execute(stmt)
        return {row.id: row for row in result.scalars()}

    async def create(self, session: AsyncSession, obj: ModelT) -> ModelT:
        session.add(obj)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def update(self, session: AsyncSession, obj: ModelT) -> ModelT:
        await session.flush()
        await session.refresh(obj)
        return obj

    async def delete(self, session: AsyncSession, obj: ModelT) -> None:
        await session.delete(obj)
        await session.flush()


async def insert_ignore(session: AsyncSession, model, conflict_columns, **values) -> None:
    """INSERT ... ON CONFLICT DO NOTHING for the bound dialect."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"insert_ignore is not supported on {dialect}")

    stmt = insert(model).values(**values).on_conflict_do_nothing(index_elements=conflict_columns)
    await session.execute(stmt)
