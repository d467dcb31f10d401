"""
LiveLocation - most recently reported position of a user.
Pure schema only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float
from sqlalchemy.orm import Mapped, mapped_column

from guildstay.core.database.base import Base, utc_now


class LiveLocation(Base):
    """
    One row per user. lat/lng are NULL when the client stopped sharing its
    position; such rows mean "no known location".
    """

    __tablename__ = "live_locations"

    user_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)

    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    @property
    def has_position(self) -> bool:
        return self.lat is not None and self.lng is not None
