"""
AI job endpoints: trigger enrichment, list recent jobs and poll any job.

Triggers only create a PENDING job; the AI job runner picks it up.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_workspace_id
from app.errors import raise_app_error
from app.models.ai_job import JobKind
from app.repositories.ai_job_repository import AIJobRepository
from app.schemas.ai_job import AIJobRead, EnrichmentJobCreate
from app.services.job_ledger import JobLedger

router = APIRouter(prefix="/ai-jobs", tags=["AI Jobs"])


@router.post("/enrichment", response_model=AIJobRead, status_code=status.HTTP_201_CREATED)
async def create_enrichment_job(
    payload: EnrichmentJobCreate,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """Queue enrichment for up to the configured number of contacts."""
    ledger = JobLedger(db)
    return await ledger.create_job(workspace_id, JobKind.ENRICHMENT, payload.contact_ids)


@router.get("", response_model=List[AIJobRead])
async def list_ai_jobs(
    kind: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """Most recent jobs first."""
    if kind is not None and kind not in JobKind.ALL:
        raise_app_error(422, "invalid_kind", "Unknown AI job kind", {"kind": kind})
    return await AIJobRepository(db).list_for_workspace(workspace_id, kind=kind, limit=limit)


@router.get("/{job_id}", response_model=AIJobRead)
async def get_ai_job(
    job_id: UUID,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """Poll a job. Check ``failed_count`` as well as ``status``."""
    job = await JobLedger(db).get_job(workspace_id, job_id)
    if not job:
        raise_app_error(404, "job_not_found", "AI job not found", {"job_id": str(job_id)})
    return job
