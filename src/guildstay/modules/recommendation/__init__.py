"""
Recommendation Module
=====================

Exports:
- RecommendationRepository: Recognized-recommendation lookups
"""

from .repository import RecommendationRepository

__all__ = ["RecommendationRepository"]
