"""
Location Module
===============

Exports:
- LiveLocationRepository: Last reported user positions
"""

from .repository import LiveLocationRepository

__all__ = ["LiveLocationRepository"]
