"""
Activity domain ORM models.

Exports:
- Stay
- LiveLocation
- Recommendation
"""

from .live_location import LiveLocation
from .recommendation import Recommendation
from .stay import Stay

__all__ = [
    "LiveLocation",
    "Recommendation",
    "Stay",
]
