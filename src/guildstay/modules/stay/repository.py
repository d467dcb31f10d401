"""
Stay data access.

The only mutation exposed here is the one-way transition of
`Stay.rewarded_at` from NULL to a timestamp.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import update

from guildstay.database.models import Stay
from guildstay.modules.shared.base_repository import BaseRepository

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class StayRepository(BaseRepository[Stay]):
    """Repository for Stay model."""

    async def find_by_id(self, session: AsyncSession, stay_id: int) -> Optional[Stay]:
        return await self.get(session, stay_id)

    async def set_rewarded(
        self, session: AsyncSession, stay_id: int, timestamp: datetime
    ) -> bool:
        """
        Mark a stay as rewarded, only if it is not already.

        Compare-and-swap on `rewarded_at IS NULL`: when two transactions race,
        the database lets exactly one of them change the row.

        Args:
            session: Session of the caller's transaction
            stay_id: Stay to mark
            timestamp: Value written to rewarded_at

        Returns:
            True if this call changed the row, False if it was already set
            (or the stay does not exist)
        """
        stmt = (
            update(Stay)
            .where(Stay.id == stay_id, Stay.rewarded_at.is_(None))
            .values(rewarded_at=timestamp)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        changed = result.rowcount == 1  # type: ignore[attr-defined]

        self.log.debug(
            "Repository.set_rewarded: Stay",
            extra={"model": "Stay", "id": stay_id, "changed": changed},
        )

        return changed
