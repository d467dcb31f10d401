"""
Guild membership data access.

Only APPROVED memberships are returned; pending and rejected requests never
take part in guild context resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List

from sqlalchemy import select

from guildstay.database.models import Guild, GuildMembership, MembershipStatus
from guildstay.modules.shared.base_repository import BaseRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class GuildMemberRow:
    """Approved membership of another user, with the guild's display name."""

    user_id: int
    guild_id: int
    guild_name: str


class GuildMembershipRepository(BaseRepository[GuildMembership]):
    """Repository for GuildMembership model."""

    async def find_approved_guild_ids(
        self, session: AsyncSession, user_id: int
    ) -> List[int]:
        """Ids of the guilds `user_id` is an approved member of, ascending."""
        stmt = (
            select(GuildMembership.guild_id)
            .where(
                GuildMembership.user_id == user_id,
                GuildMembership.status == MembershipStatus.APPROVED.value,
            )
            .order_by(GuildMembership.guild_id)
        )
        result = await session.execute(stmt)
        guild_ids = list(result.scalars().all())

        self.log.debug(
            "Repository.find_approved_guild_ids: GuildMembership",
            extra={"model": "GuildMembership", "found_count": len(guild_ids)},
        )

        return guild_ids

    async def find_approved_members(
        self,
        session: AsyncSession,
        guild_ids: Iterable[int],
        excluding_user_id: int,
    ) -> List[GuildMemberRow]:
        """
        Approved members of any of `guild_ids`, other than `excluding_user_id`.

        A user in several of the guilds yields one row per guild.

        Args:
            session: Database session
            guild_ids: Guilds to search
            excluding_user_id: User to leave out (the requester)

        Returns:
            Rows ordered by (guild_id, user_id)
        """
        guild_ids = list(guild_ids)
        if not guild_ids:
            return []

        stmt = (
            select(GuildMembership.user_id, GuildMembership.guild_id, Guild.name)
            .join(Guild, Guild.id == GuildMembership.guild_id)
            .where(
                GuildMembership.guild_id.in_(guild_ids),
                GuildMembership.user_id != excluding_user_id,
                GuildMembership.status == MembershipStatus.APPROVED.value,
            )
            .order_by(GuildMembership.guild_id, GuildMembership.user_id)
        )
        result = await session.execute(stmt)
        rows = [
            GuildMemberRow(user_id=user_id, guild_id=guild_id, guild_name=name)
            for user_id, guild_id, name in result.all()
        ]

        self.log.debug(
            "Repository.find_approved_members: GuildMembership",
            extra={
                "model": "GuildMembership",
                "guild_count": len(guild_ids),
                "found_count": len(rows),
            },
        )

        return rows
