"""
Achievement Module
==================

Exactly-once guild point awards for visits to recommended places.

Exports:
- RecommendationAchievementService: award(), award_with_outcome(), get_guild_score()
- AwardOutcome, AwardResult: Tagged award outcomes
- GuildScoreRepository: Guild score ledger data access
"""

from .repository import GuildScoreRepository
from .service import AwardOutcome, AwardResult, RecommendationAchievementService

__all__ = [
    "AwardOutcome",
    "AwardResult",
    "GuildScoreRepository",
    "RecommendationAchievementService",
]
