"""
GuildScore - accumulated guild points per (user, guild).
Pure schema only.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from guildstay.core.database.base import Base, IdMixin, TimestampMixin


class GuildScore(Base, IdMixin, TimestampMixin):
    """
    Point ledger row.

    At most one row per (user_id, guild_id); the unique constraint is the
    conflict target for upsert-increment writes.
    """

    __tablename__ = "guild_scores"
    __table_args__ = (
        UniqueConstraint("user_id", "guild_id", name="uq_guild_scores_user_guild"),
        Index("ix_guild_scores_guild_score", "guild_id", "score"),
    )

    user_id: Mapped[int] = mapped_column(nullable=False)

    guild_id: Mapped[int] = mapped_column(
        ForeignKey("guilds.id", ondelete="CASCADE"),
        nullable=False,
    )

    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
