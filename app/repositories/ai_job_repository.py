"""
Repository for AI job ledger rows.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.ai_job import AIJob, JobStatus


class AIJobRepository:
    """Create, poll and claim AI jobs."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        workspace_id: UUID,
        kind: str,
        target_ids: list[str],
        event_id: Optional[UUID] = None,
        config: Optional[dict] = None,
    ) -> AIJob:
        job = AIJob(
            workspace_id=workspace_id,
            kind=kind,
            status=JobStatus.PENDING,
            event_id=event_id,
            target_ids=list(target_ids),
            config=dict(config or {}),
            target_count=len(target_ids),
            completed_count=0,
            failed_count=0,
        )
        self.db.add(job)
        await self.db.flush()
        return job

    async def get(self, job_id: UUID) -> Optional[AIJob]:
        return await self.db.get(AIJob, job_id)

    async def get_for_workspace(self, workspace_id: UUID, job_id: UUID) -> Optional[AIJob]:
        result = await self.db.execute(
            select(AIJob).where(AIJob.id == job_id, AIJob.workspace_id == workspace_id)
        )
        return result.scalar_one_or_none()

    async def list_for_workspace(
        self,
        workspace_id: UUID,
        kind: Optional[str] = None,
        limit: int = 50,
    ) -> List[AIJob]:
        query = select(AIJob).where(AIJob.workspace_id == workspace_id)
        if kind:
            query = query.where(AIJob.kind == kind)
        query = query.order_by(AIJob.created_at.desc()).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def claim_next_pending(self) -> Optional[AIJob]:
        """
        Oldest PENDING job, row-locked on PostgreSQL so parallel runners skip it.

        The caller must move it out of PENDING and commit to release the lock.
        """
        query = (
            select(AIJob)
            .where(AIJob.status == JobStatus.PENDING)
            .order_by(AIJob.created_at.asc())
            .limit(1)
        )
        if self.db.get_bind().dialect.name == "postgresql":
            query = query.with_for_update(skip_locked=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
