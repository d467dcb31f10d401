"""
Database subsystem for GuildStay.

Provides the async SQLAlchemy engine, session and transaction management,
and the ORM base classes and mixins used by model definitions.
"""

from guildstay.core.database.base import Base, IdMixin, TimestampMixin, utc_now
from guildstay.core.database.service import (
    DatabaseInitializationError,
    DatabaseNotInitializedError,
    DatabaseService,
)

__all__ = [
    # ORM Base & Mixins
    "Base",
    "IdMixin",
    "TimestampMixin",
    "utc_now",
    # Main service
    "DatabaseService",
    # Exceptions
    "DatabaseInitializationError",
    "DatabaseNotInitializedError",
]
