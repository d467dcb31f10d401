"""
Building blocks shared by every GuildStay module: the service and repository
base classes, domain errors, geo formulas and policy defaults.

    from guildstay.modules.shared import BaseService, BaseRepository, distance_meters
"""

from __future__ import annotations

from .base_repository import BaseRepository
from .base_service import BaseService
from .constants import (
    DEFAULT_GUILD_NEARBY_RADIUS_M,
    DEFAULT_RECOMMENDATION_AWARD_POINTS,
    EARTH_RADIUS_M,
)
from .exceptions import (
    AwardPersistenceError,
    ConfigurationError,
    ErrorSeverity,
    GuildStayDomainException,
    ValidationError,
)
from .formulas import distance_meters, is_within_radius

__all__ = [
    "BaseRepository",
    "BaseService",
    "AwardPersistenceError",
    "ConfigurationError",
    "ErrorSeverity",
    "GuildStayDomainException",
    "ValidationError",
    "DEFAULT_GUILD_NEARBY_RADIUS_M",
    "DEFAULT_RECOMMENDATION_AWARD_POINTS",
    "EARTH_RADIUS_M",
    "distance_meters",
    "is_within_radius",
]
