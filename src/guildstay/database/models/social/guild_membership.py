"""
GuildMembership - association of users to guilds.
Pure schema only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guildstay.core.database.base import Base, IdMixin, TimestampMixin
from guildstay.database.models.enums import MembershipStatus

if TYPE_CHECKING:
    from .guild import Guild


class GuildMembership(Base, IdMixin, TimestampMixin):
    """
    Guild membership row.

    Schema-only:
    - user_id / guild_id (unique pair)
    - status (MembershipStatus value; APPROVED rows are active members)
    """

    __tablename__ = "guild_memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "guild_id", name="uq_guild_memberships_user_guild"),
        Index("ix_guild_memberships_guild_status", "guild_id", "status"),
    )

    user_id: Mapped[int] = mapped_column(nullable=False, index=True)

    guild_id: Mapped[int] = mapped_column(
        ForeignKey("guilds.id", ondelete="CASCADE"),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MembershipStatus.APPROVED.value,
    )

    guild: Mapped["Guild"] = relationship("Guild", back_populates="memberships")
