"""
Domain constants.

Defaults for policy values that Config may override at startup.
"""

from __future__ import annotations

# Mean Earth radius used by the haversine formula
EARTH_RADIUS_M: float = 6_371_000.0

# Co-location radius for guild context resolution
DEFAULT_GUILD_NEARBY_RADIUS_M: float = 3000.0

# Guild points granted once per rewarded stay
DEFAULT_RECOMMENDATION_AWARD_POINTS: int = 50
