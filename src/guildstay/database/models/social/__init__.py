"""
Social domain ORM models.

Exports:
- Guild
- GuildMembership
- GuildScore
"""

from .guild import Guild
from .guild_membership import GuildMembership
from .guild_score import GuildScore

__all__ = [
    "Guild",
    "GuildMembership",
    "GuildScore",
]
