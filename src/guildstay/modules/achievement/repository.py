"""
Guild score ledger data access.

Writes are single-statement upserts so that concurrent credits for the same
(user, guild) pair add up instead of overwriting each other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from guildstay.core.database.base import utc_now
from guildstay.database.models import GuildScore
from guildstay.modules.shared.base_repository import BaseRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class GuildScoreRepository(BaseRepository[GuildScore]):
    """Repository for GuildScore model."""

    async def upsert_increment(
        self,
        session: AsyncSession,
        user_id: int,
        guild_id: int,
        amount: int,
    ) -> None:
        """
        Create the (user_id, guild_id) row with `amount`, or add `amount` to it.

        Runs inside the caller's transaction; nothing is committed here.

        Args:
            session: Session of the caller's transaction
            user_id: Credited user
            guild_id: Guild the points count towards
            amount: Points to add (never negative on the award path)
        """
        dialect = session.get_bind().dialect.name
        insert = sqlite_insert if dialect == "sqlite" else postgresql_insert

        now = utc_now()
        stmt = insert(GuildScore).values(
            user_id=user_id,
            guild_id=guild_id,
            score=amount,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[GuildScore.user_id, GuildScore.guild_id],
            set_={"score": GuildScore.score + amount, "updated_at": now},
        )
        await session.execute(stmt)

        self.log.debug(
            "Repository.upsert_increment: GuildScore",
            extra={
                "model": "GuildScore",
                "dialect": dialect,
                "amount": amount,
            },
        )

    async def get_score(self, session: AsyncSession, user_id: int, guild_id: int) -> int:
        """Current score of `user_id` in `guild_id`; 0 when no row exists."""
        stmt = select(GuildScore.score).where(
            GuildScore.user_id == user_id,
            GuildScore.guild_id == guild_id,
        )
        result = await session.execute(stmt)
        score = result.scalar_one_or_none()
        return score if score is not None else 0
