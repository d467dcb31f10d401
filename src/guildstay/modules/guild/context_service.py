"""
GuildContextService - Decides whether a user acts alone or as a guild party
===========================================================================

Handles:
- PERSONAL vs GUILD context resolution from a position and the membership graph
- Selection of the guild with the most approved members nearby
- Resolution from the user's own stored live location

Rules:
- Only APPROVED memberships count; the requester is never counted
- Members without a known position are skipped
- A member exactly on the radius boundary counts as nearby
- Ties between guilds go to the lowest guild id
- No caching: every call reads the stores again
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Set, Tuple

from guildstay.core.config.config import Config
from guildstay.core.database.service import DatabaseService
from guildstay.core.logging.logger import get_logger
from guildstay.modules.guild.repository import GuildMembershipRepository
from guildstay.modules.location.repository import LiveLocationRepository
from guildstay.modules.shared.base_service import BaseService
from guildstay.modules.shared.constants import DEFAULT_GUILD_NEARBY_RADIUS_M
from guildstay.modules.shared.formulas import distance_meters, is_within_radius
from guildstay.database.models import GuildMembership, LiveLocation

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncSession


class GuildMode(str, enum.Enum):
    PERSONAL = "PERSONAL"
    GUILD = "GUILD"


@dataclass(frozen=True)
class GuildContext:
    """
    Result of a context resolution.

    Attributes:
        mode: PERSONAL or GUILD
        guild_id: Selected guild (GUILD only)
        guild_name: Display name of the selected guild (GUILD only)
        nearby_member_count: Distinct nearby members of the selected guild,
            requester excluded (0 for PERSONAL)
        base_user_ids: Requester first, then the nearby members ascending
    """

    mode: GuildMode
    guild_id: Optional[int] = None
    guild_name: Optional[str] = None
    nearby_member_count: int = 0
    base_user_ids: Tuple[int, ...] = ()

    @classmethod
    def personal(cls, user_id: int) -> "GuildContext":
        return cls(mode=GuildMode.PERSONAL, base_user_ids=(user_id,))

    @property
    def is_guild(self) -> bool:
        return self.mode is GuildMode.GUILD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "guild_id": self.guild_id,
            "guild_name": self.guild_name,
            "nearby_member_count": self.nearby_member_count,
            "base_user_ids": list(self.base_user_ids),
        }


class GuildContextService(BaseService):
    """
    Resolves the guild context of a user at a position.

    Public Methods
    --------------
    - resolve() -> Context at explicit coordinates
    - resolve_from_live_location() -> Context at the user's stored position
    - resolve_in_session() -> Same as resolve(), inside a caller's session
    """

    def __init__(
        self,
        database_service: Any = DatabaseService,
        config: Any = Config,
        logger: Optional[Logger] = None,
        nearby_radius_m: Optional[float] = None,
    ) -> None:
        super().__init__(config, logger or get_logger(__name__))
        self.db = database_service

        if nearby_radius_m is None:
            nearby_radius_m = self.get_config(
                "GUILD_NEARBY_RADIUS_M", DEFAULT_GUILD_NEARBY_RADIUS_M
            )
        self.nearby_radius_m = self.validate_positive_number(
            nearby_radius_m, "nearby_radius_m"
        )

        self._membership_repo = GuildMembershipRepository(
            model_class=GuildMembership,
            logger=get_logger(f"{__name__}.GuildMembershipRepository"),
        )
        self._location_repo = LiveLocationRepository(
            model_class=LiveLocation,
            logger=get_logger(f"{__name__}.LiveLocationRepository"),
        )

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    async def resolve(self, user_id: int, lat: float, lng: float) -> GuildContext:
        """
        Resolve the context of `user_id` standing at (lat, lng).

        This is a **read-only** operation using get_session().

        Returns:
            GuildContext; PERSONAL when the user has no approved guild or no
            fellow member is within the radius
        """
        async with self.db.get_session() as session:
            return await self.resolve_in_session(session, user_id, lat, lng)

    async def resolve_from_live_location(self, user_id: int) -> GuildContext:
        """
        Resolve the context of `user_id` at their own stored live location.

        PERSONAL when no location is stored or its coordinates are unknown.
        """
        async with self.db.get_session() as session:
            location = await self._location_repo.find_by_user_id(session, user_id)
            if location is None or not location.has_position:
                self.log.debug(
                    "No live location for requester; personal context",
                    extra={"requester_id": user_id},
                )
                return GuildContext.personal(user_id)

            return await self.resolve_in_session(
                session, user_id, location.lat, location.lng
            )

    async def resolve_in_session(
        self,
        session: AsyncSession,
        user_id: int,
        lat: float,
        lng: float,
    ) -> GuildContext:
        guild_ids = await self._membership_repo.find_approved_guild_ids(session, user_id)
        if not guild_ids:
            return self._personal(user_id, "no_approved_membership")

        members = await self._membership_repo.find_approved_members(
            session, guild_ids, excluding_user_id=user_id
        )
        if not members:
            return self._personal(user_id, "no_other_members")

        locations = await self._location_repo.find_by_user_ids(
            session, (member.user_id for member in members)
        )
        positions = {
            location.user_id: (location.lat, location.lng)
            for location in locations
            if location.has_position
        }

        nearby: Dict[int, Set[int]] = {}
        guild_names: Dict[int, str] = {}
        for member in members:
            position = positions.get(member.user_id)
            if position is None:
                continue

            distance = distance_meters(lat, lng, position[0], position[1])
            if not is_within_radius(distance, self.nearby_radius_m):
                continue

            nearby.setdefault(member.guild_id, set()).add(member.user_id)
            guild_names[member.guild_id] = member.guild_name

        if not nearby:
            return self._personal(user_id, "no_member_nearby")

        guild_id, member_ids = min(
            nearby.items(), key=lambda item: (-len(item[1]), item[0])
        )
        context = GuildContext(
            mode=GuildMode.GUILD,
            guild_id=guild_id,
            guild_name=guild_names[guild_id],
            nearby_member_count=len(member_ids),
            base_user_ids=(user_id, *sorted(member_ids)),
        )

        self.log.debug(
            "Guild context resolved",
            extra={
                "requester_id": user_id,
                "mode": context.mode.value,
                "selected_guild_id": guild_id,
                "nearby_member_count": context.nearby_member_count,
                "candidate_guild_count": len(nearby),
            },
        )

        return context

    # ========================================================================
    # PRIVATE HELPERS
    # ========================================================================

    def _personal(self, user_id: int, reason: str) -> GuildContext:
        self.log.debug(
            "Personal context",
            extra={"requester_id": user_id, "mode": GuildMode.PERSONAL.value, "reason": reason},
        )
        return GuildContext.personal(user_id)
