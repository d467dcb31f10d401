"""
Guild - social group a user can join.
Pure schema.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guildstay.core.database.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from .guild_membership import GuildMembership


class Guild(Base, IdMixin, TimestampMixin):
    """
    User-created guild.

    Schema-only:
    - name (display name surfaced in guild context)
    - owner, description, category
    """

    __tablename__ = "guilds"
    __table_args__ = (Index("ix_guilds_created_at", "created_at"),)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_id: Mapped[int] = mapped_column(nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(250), default=None)
    category: Mapped[Optional[str]] = mapped_column(String(50), default=None)

    memberships: Mapped[List["GuildMembership"]] = relationship(
        back_populates="guild",
        lazy="selectin",
    )
