"""
Generic async repository.

A repository wraps queries for one mapped model. It never opens, commits or
rolls back sessions: the caller passes the session in, and DatabaseService
owns the transaction around it.

    class StayRepository(BaseRepository[Stay]):
        async def find_by_id(self, session, stay_id):
            return await self.get(session, stay_id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import exists as sql_exists
from sqlalchemy import func, select

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Lookups shared by every repository, logged at DEBUG."""

    def __init__(self, model_class: Type[T], logger: Logger) -> None:
        self.model_class = model_class
        self.log = logger

    @property
    def model_name(self) -> str:
        return self.model_class.__name__

    async def get(self, session: AsyncSession, id_value: Any) -> Optional[T]:
        """Row by primary key, or None."""
        instance = await session.get(self.model_class, id_value)
        self.log.debug(
            f"{self.model_name} lookup by key",
            extra={"model": self.model_name, "id": id_value, "found": instance is not None},
        )
        return instance

    async def find_many_where(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
        limit: Optional[int] = None,
    ) -> List[T]:
        stmt = select(self.model_class).where(*conditions)
        if limit is not None:
            stmt = stmt.limit(limit)

        instances = list((await session.execute(stmt)).scalars().all())
        self.log.debug(
            f"{self.model_name} lookup by condition",
            extra={"model": self.model_name, "found_count": len(instances), "limit": limit},
        )
        return instances

    async def exists(self, session: AsyncSession, *conditions: ColumnElement[bool]) -> bool:
        """`SELECT EXISTS(...)`; stops at the first matching row."""
        stmt = select(sql_exists().where(*conditions).select_from(self.model_class))
        found = bool((await session.execute(stmt)).scalar())
        self.log.debug(
            f"{self.model_name} existence check",
            extra={"model": self.model_name, "exists": found},
        )
        return found

    async def count(self, session: AsyncSession, *conditions: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model_class).where(*conditions)
        return (await session.execute(stmt)).scalar_one()
