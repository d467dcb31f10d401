"""Recommendation data access."""

from __future__ import annotations

from typing import TYPE_CHECKING

from guildstay.database.models import Recommendation
from guildstay.modules.shared.base_repository import BaseRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class RecommendationRepository(BaseRepository[Recommendation]):
    """Repository for Recommendation model."""

    async def exists_for_place(
        self, session: AsyncSession, user_id: int, place_id: str
    ) -> bool:
        """True if `place_id` was ever recommended to `user_id`."""
        return await self.exists(
            session,
            Recommendation.user_id == user_id,
            Recommendation.place_id == place_id,
        )
