"""
Test data helpers shared by the integration suite.

- north_of(): place a member at a known distance from a point
- DataFactory: write rows through DatabaseService transactions
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Optional, Type

from guildstay.core.database.service import DatabaseService
from guildstay.database.models import (
    Guild,
    GuildMembership,
    LiveLocation,
    MembershipStatus,
    Recommendation,
    Stay,
)
from guildstay.modules.shared.constants import EARTH_RADIUS_M

ORIGIN = (0.0, 0.0)


def north_of(lat: float, lng: float, meters: float) -> tuple[float, float]:
    """
    Point `meters` due north of (lat, lng).

    Along a meridian the haversine distance is R * delta_phi, so the result
    lies at that distance up to floating point error.
    """
    return lat + math.degrees(meters / EARTH_RADIUS_M), lng


class DataFactory:
    """Writes test rows through DatabaseService transactions."""

    def __init__(self, database: Type[DatabaseService]) -> None:
        self.db = database

    async def guild(self, name: str = "Night Walkers", owner_id: int = 1) -> Guild:
        async with self.db.get_transaction() as session:
            guild = Guild(name=name, owner_id=owner_id)
            session.add(guild)
            await session.flush()
            return guild

    async def membership(
        self,
        user_id: int,
        guild_id: int,
        status: MembershipStatus = MembershipStatus.APPROVED,
    ) -> GuildMembership:
        async with self.db.get_transaction() as session:
            membership = GuildMembership(
                user_id=user_id, guild_id=guild_id, status=status.value
            )
            session.add(membership)
            await session.flush()
            return membership

    async def location(
        self, user_id: int, lat: Optional[float], lng: Optional[float]
    ) -> LiveLocation:
        async with self.db.get_transaction() as session:
            location = LiveLocation(user_id=user_id, lat=lat, lng=lng)
            session.add(location)
            await session.flush()
            return location

    async def stay(
        self,
        user_id: int,
        place_id: Optional[str] = "place-1",
        lat: float = ORIGIN[0],
        lng: float = ORIGIN[1],
        rewarded_at: Optional[datetime] = None,
    ) -> Stay:
        end = datetime.now(timezone.utc)
        async with self.db.get_transaction() as session:
            stay = Stay(
                user_id=user_id,
                lat=lat,
                lng=lng,
                start_time=end - timedelta(minutes=30),
                end_time=end,
                place_id=place_id,
                rewarded_at=rewarded_at,
            )
            session.add(stay)
            await session.flush()
            return stay

    async def recommendation(
        self, user_id: int, place_id: str = "place-1", name: str = "Corner Cafe"
    ) -> Recommendation:
        async with self.db.get_transaction() as session:
            recommendation = Recommendation(
                user_id=user_id, place_id=place_id, name=name
            )
            session.add(recommendation)
            await session.flush()
            return recommendation

    async def reload_stay(self, stay_id: int) -> Optional[Stay]:
        async with self.db.get_session() as session:
            return await session.get(Stay, stay_id)
