"""
Stay Module
===========

Exports:
- StayRepository: Stay lookups and the rewarded_at compare-and-swap
"""

from .repository import StayRepository

__all__ = ["StayRepository"]
