"""
GuildStay
=========

Guild context resolution and idempotent recommendation-achievement awarding
for a location-aware social recommendation backend.
"""

__version__ = "0.1.0"
