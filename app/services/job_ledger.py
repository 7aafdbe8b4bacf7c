"""
Job ledger service.

Owns the lifecycle of an ``AIJob`` row: PENDING -> IN_PROGRESS -> COMPLETED
or FAILED. Every write commits immediately so pollers see live progress.

Counters are overwritten, not incremented. A job id is expected to have a
single running orchestrator; if two ever run the same job the last writer's
counts win.
"""

import logging
from typing import Awaitable, Callable, Optional, Sequence
from uuid import UUID

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import JobLedgerError
from app.models.ai_job import AIJob, JobKind, JobStatus
from app.repositories.ai_job_repository import AIJobRepository
from app.utils.background import fire_and_forget
from app.utils.time import utc_now

logger = logging.getLogger(__name__)

FinishedHook = Callable[[AIJob], Awaitable[None]]


def terminal_status(target_count: int, failed: int) -> str:
    """FAILED only when there was work and every item failed; partial success still COMPLETES."""
    if target_count > 0 and failed == target_count:
        return JobStatus.FAILED
    return JobStatus.COMPLETED


class JobLedger:
    """Persisted progress record for one batch pipeline run."""

    def __init__(self, db: AsyncSession, on_finished: Optional[FinishedHook] = None):
        self.db = db
        self.repo = AIJobRepository(db)
        self.on_finished = on_finished

    async def create_job(
        self,
        workspace_id: UUID,
        kind: str,
        target_ids: Sequence,
        event_id: Optional[UUID] = None,
        config: Optional[dict] = None,
    ) -> AIJob:
        if kind not in JobKind.ALL:
            raise JobLedgerError(f"Unknown job kind: {kind}")
        job = await self.repo.create(
            workspace_id=workspace_id,
            kind=kind,
            target_ids=[str(target_id) for target_id in target_ids],
            event_id=event_id,
            config=config,
        )
        await self.db.commit()
        logger.info(
            "Created AI job %s kind=%s",
            job.id,
            kind,
            extra={"job_id": str(job.id), "kind": kind, "target_count": job.target_count},
        )
        return job

    async def get_job(self, workspace_id: UUID, job_id: UUID) -> Optional[AIJob]:
        return await self.repo.get_for_workspace(workspace_id, job_id)

    async def load(self, job_id: UUID) -> AIJob:
        job = await self.repo.get(job_id)
        if job is None:
            raise JobLedgerError(f"Job {job_id} not found")
        return job

    async def _ensure_loaded(self, job: AIJob) -> None:
        # A rollback in the caller expires the row; reload instead of lazy-loading
        if inspect(job).expired_attributes:
            await self.db.refresh(job)

    def _ensure_writable(self, job: AIJob) -> None:
        if job.status in JobStatus.TERMINAL:
            raise JobLedgerError(f"Job {job.id} is already {job.status}")

    def _check_counts(self, job: AIJob, completed: int, failed: int) -> None:
        if completed < 0 or failed < 0:
            raise JobLedgerError("Job counters cannot be negative")
        if completed + failed > job.target_count:
            raise JobLedgerError(
                f"Job {job.id} counters exceed target: {completed} + {failed} > {job.target_count}"
            )

    async def start(self, job: AIJob, target_count: Optional[int] = None) -> AIJob:
        """Mark IN_PROGRESS and stamp the start time; optionally reset the target size."""
        await self._ensure_loaded(job)
        self._ensure_writable(job)
        job.status = JobStatus.IN_PROGRESS
        job.started_at = utc_now()
        job.error_message = None
        job.completed_count = 0
        job.failed_count = 0
        if target_count is not None:
            job.target_count = target_count
        await self.db.commit()
        logger.info("Job %s started target_count=%d", job.id, job.target_count, extra={"job_id": str(job.id), "kind": job.kind})
        return job

    async def set_target_count(self, job: AIJob, target_count: int) -> AIJob:
        await self._ensure_loaded(job)
        self._ensure_writable(job)
        if target_count < job.completed_count + job.failed_count:
            raise JobLedgerError(f"Job {job.id} target_count below recorded progress")
        job.target_count = target_count
        await self.db.commit()
        return job

    async def annotate(self, job: AIJob, **values) -> AIJob:
        """Merge result references (e.g. ``batch_id``) into the job's config."""
        await self._ensure_loaded(job)
        self._ensure_writable(job)
        job.config = {**(job.config or {}), **values}
        await self.db.commit()
        return job

    async def record_progress(self, job: AIJob, completed: int, failed: int) -> AIJob:
        await self._ensure_loaded(job)
        self._ensure_writable(job)
        self._check_counts(job, completed, failed)
        job.completed_count = completed
        job.failed_count = failed
        await self.db.commit()
        return job

    async def finish(self, job: AIJob, completed: int, failed: int) -> AIJob:
        """Write final counts and the terminal status derived from them."""
        await self._ensure_loaded(job)
        self._ensure_writable(job)
        self._check_counts(job, completed, failed)
        if completed + failed != job.target_count:
            raise JobLedgerError(
                f"Job {job.id} finished with {completed + failed} of {job.target_count} items accounted for"
            )
        job.completed_count = completed
        job.failed_count = failed
        job.status = terminal_status(job.target_count, failed)
        job.completed_at = utc_now()
        await self.db.commit()
        logger.info(
            "Job %s finished status=%s completed=%d failed=%d",
            job.id,
            job.status,
            completed,
            failed,
            extra={"job_id": str(job.id), "kind": job.kind},
        )
        self._notify(job)
        return job

    async def fail(
        self,
        job: AIJob,
        error_message: str,
        completed: int = 0,
        failed: Optional[int] = None,
    ) -> AIJob:
        """
        Abort the job with a descriptive error (precondition failures, provider outages).

        Items not reported as completed count as failed unless ``failed`` is
        given, so the counters still add up to ``target_count``.
        """
        await self._ensure_loaded(job)
        self._ensure_writable(job)
        if failed is None:
            failed = job.target_count - completed
        self._check_counts(job, completed, failed)
        job.completed_count = completed
        job.failed_count = failed
        job.status = JobStatus.FAILED
        job.error_message = error_message
        job.completed_at = utc_now()
        await self.db.commit()
        logger.warning(
            "Job %s failed: %s",
            job.id,
            error_message,
            extra={"job_id": str(job.id), "kind": job.kind},
        )
        self._notify(job)
        return job

    def _notify(self, job: AIJob) -> None:
        if self.on_finished is None:
            return
        # Detached: hook errors are logged by the task wrapper, never raised here
        fire_and_forget(self.on_finished(job), label=f"ai_job.on_finished:{job.id}")
