"""
Repositories for seating suggestions and introduction pairings.

Both are insert-only and grouped by ``batch_id``.
"""

from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.introduction import IntroductionPairing
from app.models.seating import SeatingSuggestion


class SeatingSuggestionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_batch(self, rows: Iterable[SeatingSuggestion]) -> List[SeatingSuggestion]:
        items = list(rows)
        self.db.add_all(items)
        await self.db.flush()
        return items

    async def list_batch(self, workspace_id: UUID, event_id: UUID, batch_id: UUID) -> List[SeatingSuggestion]:
        result = await self.db.execute(
            select(SeatingSuggestion)
            .where(
                SeatingSuggestion.workspace_id == workspace_id,
                SeatingSuggestion.event_id == event_id,
                SeatingSuggestion.batch_id == batch_id,
            )
            .order_by(
                SeatingSuggestion.table_number.asc(),
                SeatingSuggestion.seat_number.asc().nulls_last(),
                SeatingSuggestion.created_at.asc(),
            )
        )
        return list(result.scalars().all())

    async def latest_batch_id(self, workspace_id: UUID, event_id: UUID) -> Optional[UUID]:
        result = await self.db.execute(
            select(SeatingSuggestion.batch_id)
            .where(
                SeatingSuggestion.workspace_id == workspace_id,
                SeatingSuggestion.event_id == event_id,
            )
            .order_by(SeatingSuggestion.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()


class IntroductionPairingRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_batch(self, rows: Iterable[IntroductionPairing]) -> List[IntroductionPairing]:
        items = list(rows)
        self.db.add_all(items)
        await self.db.flush()
        return items

    async def list_for_event(
        self,
        workspace_id: UUID,
        event_id: UUID,
        batch_id: Optional[UUID] = None,
    ) -> List[IntroductionPairing]:
        query = select(IntroductionPairing).where(
            IntroductionPairing.workspace_id == workspace_id,
            IntroductionPairing.event_id == event_id,
        )
        if batch_id is not None:
            query = query.where(IntroductionPairing.batch_id == batch_id)
        query = query.order_by(IntroductionPairing.priority.asc(), IntroductionPairing.created_at.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())
