"""
Recommendation - a place a user was told to visit.
Pure schema only.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from guildstay.core.database.base import Base, IdMixin, TimestampMixin
from guildstay.database.models.enums import RecommendationSource


class Recommendation(Base, IdMixin, TimestampMixin):
    """
    Stored recommendation.

    A (user_id, place_id) pair marks place_id as a recognized recommendation
    for that user.
    """

    __tablename__ = "recommendations"
    __table_args__ = (Index("ix_recommendations_user_place", "user_id", "place_id"),)

    user_id: Mapped[int] = mapped_column(nullable=False)
    place_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    source: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RecommendationSource.PERSONAL.value,
    )

    guild_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("guilds.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )
