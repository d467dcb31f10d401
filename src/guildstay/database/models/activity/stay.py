"""
Stay - a recorded visit by a user.
Pure schema only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from guildstay.core.database.base import Base, IdMixin, TimestampMixin


class Stay(Base, IdMixin, TimestampMixin):
    """
    Visit row written by visit tracking.

    Schema-only:
    - user_id, position and time window of the visit
    - place_id: external place identifier once the place is resolved
    - rewarded_at: set exactly once, when the visit earns recommendation points
    """

    __tablename__ = "stays"
    __table_args__ = (Index("ix_stays_user_start_time", "user_id", "start_time"),)

    user_id: Mapped[int] = mapped_column(nullable=False)

    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    place_id: Mapped[Optional[str]] = mapped_column(String(64), default=None)

    rewarded_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        doc="When recommendation points were granted for this stay",
    )
