"""
RecommendationAchievementService - Guild points for visiting recommended places
===============================================================================

Handles:
- Exactly-once reward of a stay at a recommended place
- Guild context gating (points are only granted inside a guild party)
- Atomic write of the stay's rewarded_at mark and the guild score credit
- Guild score reads

Award flow (linear, no retries):
1. Load the stay                      -> NOT_FOUND
2. Stay already rewarded              -> ALREADY_AWARDED
3. Place never recommended to user    -> NOT_RECOMMENDED
4. Context is not GUILD               -> PERSONAL_CONTEXT
5. One transaction: compare-and-swap rewarded_at, then upsert the score.
   Lost race                          -> ALREADY_AWARDED
   Any write failure rolls back both  -> PERSISTENCE_FAILURE
6. Commit                             -> AWARDED

The caller only ever sees a boolean; the outcome kind is kept for logs and
for `award_with_outcome()`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from guildstay.core.config.config import Config
from guildstay.core.database.base import utc_now
from guildstay.core.database.service import (
    DatabaseNotInitializedError,
    DatabaseService,
)
from guildstay.core.logging.logger import LogContext, get_logger
from guildstay.database.models import GuildScore, Recommendation, Stay
from guildstay.modules.achievement.repository import GuildScoreRepository
from guildstay.modules.guild.context_service import GuildContextService
from guildstay.modules.recommendation.repository import RecommendationRepository
from guildstay.modules.shared.base_service import BaseService
from guildstay.modules.shared.constants import DEFAULT_RECOMMENDATION_AWARD_POINTS
from guildstay.modules.shared.exceptions import AwardPersistenceError
from guildstay.modules.stay.repository import StayRepository

if TYPE_CHECKING:
    from logging import Logger


OPERATION = "award_recommendation_points"


class AwardOutcome(str, enum.Enum):
    AWARDED = "AWARDED"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_AWARDED = "ALREADY_AWARDED"
    NOT_RECOMMENDED = "NOT_RECOMMENDED"
    PERSONAL_CONTEXT = "PERSONAL_CONTEXT"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"


@dataclass(frozen=True)
class AwardResult:
    """
    Outcome of one award attempt.

    guild_id is known once context was resolved; awarded_at and points are
    only set for AWARDED.
    """

    outcome: AwardOutcome
    guild_id: Optional[int] = None
    awarded_at: Optional[datetime] = None
    points: int = 0

    @property
    def awarded(self) -> bool:
        return self.outcome is AwardOutcome.AWARDED


class RecommendationAchievementService(BaseService):
    """
    Grants guild points when a stay matches a stored recommendation.

    Public Methods
    --------------
    - award() -> True only if this call granted a new reward
    - award_with_outcome() -> Same decision, as an AwardResult
    - get_guild_score() -> Current ledger value for (user, guild)
    """

    def __init__(
        self,
        database_service: Any = DatabaseService,
        config: Any = Config,
        logger: Optional[Logger] = None,
        context_service: Optional[GuildContextService] = None,
        nearby_radius_m: Optional[float] = None,
        award_points: Optional[int] = None,
    ) -> None:
        """
        Initialize RecommendationAchievementService.

        Args:
            database_service: Session/transaction provider
            config: Configuration source
            logger: Structured logger instance
            context_service: Resolver to use; built from the same database
                service when omitted
            nearby_radius_m: Overrides GUILD_NEARBY_RADIUS_M for a built resolver
            award_points: Overrides RECOMMENDATION_AWARD_POINTS
        """
        super().__init__(config, logger or get_logger(__name__))
        self.db = database_service

        if award_points is None:
            award_points = self.get_config(
                "RECOMMENDATION_AWARD_POINTS", DEFAULT_RECOMMENDATION_AWARD_POINTS
            )
        self.award_points = self.validate_positive_int(award_points, "award_points")

        self._context_service = context_service or GuildContextService(
            database_service=database_service,
            config=config,
            nearby_radius_m=nearby_radius_m,
        )

        self._stay_repo = StayRepository(
            model_class=Stay,
            logger=get_logger(f"{__name__}.StayRepository"),
        )
        self._recommendation_repo = RecommendationRepository(
            model_class=Recommendation,
            logger=get_logger(f"{__name__}.RecommendationRepository"),
        )
        self._score_repo = GuildScoreRepository(
            model_class=GuildScore,
            logger=get_logger(f"{__name__}.GuildScoreRepository"),
        )

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    async def award(
        self,
        user_id: int,
        stay_id: int,
        place_id: str,
        lat: float,
        lng: float,
    ) -> bool:
        """
        Award recommendation points for a stay.

        Args:
            user_id: Visiting user
            stay_id: Stay being evaluated
            place_id: Place the stay was matched to
            lat: Current latitude of the user
            lng: Current longitude of the user

        Returns:
            True only if this call granted a new reward. Every other
            outcome, persistence failures included, returns False.
        """
        result = await self.award_with_outcome(user_id, stay_id, place_id, lat, lng)
        return result.awarded

    async def award_with_outcome(
        self,
        user_id: int,
        stay_id: int,
        place_id: str,
        lat: float,
        lng: float,
    ) -> AwardResult:
        async with LogContext(user_id=user_id, stay_id=stay_id, operation=OPERATION):
            async with self.db.get_session() as session:
                stay = await self._stay_repo.find_by_id(session, stay_id)
                if stay is None:
                    return self._finish(AwardResult(AwardOutcome.NOT_FOUND))

                if stay.rewarded_at is not None:
                    return self._finish(AwardResult(AwardOutcome.ALREADY_AWARDED))

                recommended = await self._recommendation_repo.exists_for_place(
                    session, user_id, place_id
                )
                if not recommended:
                    return self._finish(AwardResult(AwardOutcome.NOT_RECOMMENDED))

                context = await self._context_service.resolve_in_session(
                    session, user_id, lat, lng
                )
                if not context.is_guild or context.guild_id is None:
                    return self._finish(AwardResult(AwardOutcome.PERSONAL_CONTEXT))

            result = await self._persist_award(user_id, stay_id, context.guild_id)
            return self._finish(result)

    async def get_guild_score(self, user_id: int, guild_id: int) -> int:
        """
        Current guild score of `user_id` in `guild_id` (0 if never credited).

        This is a **read-only** operation using get_session().
        """
        async with self.db.get_session() as session:
            return await self._score_repo.get_score(session, user_id, guild_id)

    # ========================================================================
    # PRIVATE HELPERS
    # ========================================================================

    async def _persist_award(
        self, user_id: int, stay_id: int, guild_id: int
    ) -> AwardResult:
        awarded_at = utc_now()
        changed = False

        try:
            async with self.db.get_transaction() as session:
                changed = await self._stay_repo.set_rewarded(session, stay_id, awarded_at)
                # A concurrent call already marked the stay; nothing to credit
                if changed:
                    await self._score_repo.upsert_increment(
                        session, user_id, guild_id, self.award_points
                    )
        except DatabaseNotInitializedError:
            raise
        except Exception as exc:
            error = AwardPersistenceError(stay_id, guild_id, cause=exc)
            self.log_error(
                OPERATION,
                error,
                outcome=AwardOutcome.PERSISTENCE_FAILURE.value,
                cause=str(exc),
                cause_type=type(exc).__name__,
                error_code=error.error_code,
                severity=error.severity.value,
                is_retryable=error.is_retryable,
                guild_id=guild_id,
                points=self.award_points,
            )
            return AwardResult(AwardOutcome.PERSISTENCE_FAILURE, guild_id=guild_id)

        if not changed:
            return AwardResult(AwardOutcome.ALREADY_AWARDED, guild_id=guild_id)

        return AwardResult(
            AwardOutcome.AWARDED,
            guild_id=guild_id,
            awarded_at=awarded_at,
            points=self.award_points,
        )

    def _finish(self, result: AwardResult) -> AwardResult:
        # PERSISTENCE_FAILURE was already logged at ERROR with its cause
        if result.outcome is AwardOutcome.PERSISTENCE_FAILURE:
            return result

        if result.awarded:
            self.log_operation(
                OPERATION,
                outcome=result.outcome.value,
                guild_id=result.guild_id,
                points=result.points,
            )
        else:
            self.log.debug(
                f"Recommendation points not awarded: {result.outcome.value}",
                extra={
                    "operation": OPERATION,
                    "outcome": result.outcome.value,
                    "guild_id": result.guild_id,
                },
            )

        return result
