"""Live location data access (read-only)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional

from guildstay.database.models import LiveLocation
from guildstay.modules.shared.base_repository import BaseRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class LiveLocationRepository(BaseRepository[LiveLocation]):
    """Repository for LiveLocation model."""

    async def find_by_user_ids(
        self, session: AsyncSession, user_ids: Iterable[int]
    ) -> List[LiveLocation]:
        """Stored locations for `user_ids`; users without a row are absent."""
        user_ids = sorted(set(user_ids))
        if not user_ids:
            return []
        return await self.find_many_where(session, LiveLocation.user_id.in_(user_ids))

    async def find_by_user_id(
        self, session: AsyncSession, user_id: int
    ) -> Optional[LiveLocation]:
        return await self.get(session, user_id)
