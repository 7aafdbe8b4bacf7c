"""
Repository for guest relevance scores.
"""

import uuid
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.guest_score import GuestScore
from app.utils.time import utc_now


class GuestScoreRepository:
    """Upsert and read scores keyed on (contact, event)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(GuestScore)
        if dialect == "sqlite":
            return sqlite.insert(GuestScore)
        raise NotImplementedError(f"guest score upsert not supported on {dialect}")

    async def upsert(
        self,
        workspace_id: UUID,
        contact_id: UUID,
        event_id: UUID,
        *,
        relevance_score: int,
        matched_objectives: list[dict],
        score_rationale: Optional[str],
        talking_points: list[str],
        model_version: Optional[str],
        scored_at: Optional[datetime] = None,
    ) -> GuestScore:
        """Insert the score, or overwrite every scored field of the existing row."""
        now = utc_now()
        scored_at = scored_at or now
        base_insert = self._insert().values(
            id=uuid.uuid4(),
            workspace_id=workspace_id,
            contact_id=contact_id,
            event_id=event_id,
            relevance_score=relevance_score,
            matched_objectives=matched_objectives,
            score_rationale=score_rationale,
            talking_points=talking_points,
            model_version=model_version,
            scored_at=scored_at,
            created_at=now,
            updated_at=now,
        )
        stmt = (
            base_insert.on_conflict_do_update(
                index_elements=["contact_id", "event_id"],
                set_={
                    "relevance_score": base_insert.excluded.relevance_score,
                    "matched_objectives": base_insert.excluded.matched_objectives,
                    "score_rationale": base_insert.excluded.score_rationale,
                    "talking_points": base_insert.excluded.talking_points,
                    "model_version": base_insert.excluded.model_version,
                    "scored_at": base_insert.excluded.scored_at,
                    "updated_at": now,
                },
            )
            .returning(GuestScore)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        record = result.scalar_one()
        await self.db.flush()
        return record

    async def get(self, contact_id: UUID, event_id: UUID) -> Optional[GuestScore]:
        result = await self.db.execute(
            select(GuestScore).where(
                GuestScore.contact_id == contact_id,
                GuestScore.event_id == event_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_event(
        self,
        workspace_id: UUID,
        event_id: UUID,
        min_score: Optional[int] = None,
    ) -> List[GuestScore]:
        query = select(GuestScore).where(
            GuestScore.workspace_id == workspace_id,
            GuestScore.event_id == event_id,
        )
        if min_score is not None:
            query = query.where(GuestScore.relevance_score >= min_score)
        query = query.order_by(GuestScore.relevance_score.desc(), GuestScore.scored_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())
