"""
GuildStay ORM models.

Importing this package registers every table on `Base.metadata`.
"""

from .activity import LiveLocation, Recommendation, Stay
from .enums import MembershipStatus, RecommendationSource
from .social import Guild, GuildMembership, GuildScore

__all__ = [
    "Guild",
    "GuildMembership",
    "GuildScore",
    "LiveLocation",
    "MembershipStatus",
    "Recommendation",
    "RecommendationSource",
    "Stay",
]
