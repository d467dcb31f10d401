"""
Guild Module
============

Guild context resolution over approved memberships and live locations.

Exports:
- GuildContextService: PERSONAL/GUILD context resolution
- GuildContext, GuildMode: Resolution result types
- GuildMembershipRepository, GuildMemberRow: Membership data access
"""

from .context_service import GuildContext, GuildContextService, GuildMode
from .repository import GuildMemberRow, GuildMembershipRepository

__all__ = [
    "GuildContext",
    "GuildContextService",
    "GuildMode",
    "GuildMemberRow",
    "GuildMembershipRepository",
]
