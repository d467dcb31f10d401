"""
Database Model Enums
====================

Lightweight enumerations for categorical columns. They are declarative schema
helpers, referenced by repositories and services for filtering.
"""

from __future__ import annotations

import enum


class MembershipStatus(str, enum.Enum):
    """
    Lifecycle of a guild membership request.

    Only APPROVED memberships count for guild context resolution.
    """

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class RecommendationSource(str, enum.Enum):
    """Whether a recommendation was generated for one user or for a guild party."""

    PERSONAL = "PERSONAL"
    GUILD = "GUILD"
