"""
Event-scoped AI endpoints: scoring, seating and introduction jobs, plus the
score, seating and introduction read side.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_workspace_id
from app.errors import EventNotFoundError, raise_app_error
from app.models.ai_job import JobKind
from app.repositories.event_repository import EventRepository
from app.repositories.guest_score_repository import GuestScoreRepository
from app.repositories.seating_repository import IntroductionPairingRepository, SeatingSuggestionRepository
from app.schemas.ai_job import AIJobRead, IntroductionJobCreate, ScoringJobCreate, SeatingJobCreate
from app.schemas.guest_score import GuestScoreRead
from app.schemas.seating import (
    IntroductionPairingRead,
    SeatingApplyRequest,
    SeatingApplyResult,
    SeatingAssignmentRead,
    SeatingSuggestionRead,
)
from app.services.job_ledger import JobLedger
from app.services.seating import SeatingOptimizer

router = APIRouter(prefix="/events/{event_id}", tags=["Event AI"])


async def _require_event(db: AsyncSession, workspace_id: UUID, event_id: UUID) -> None:
    if await EventRepository(db).get(workspace_id, event_id) is None:
        raise_app_error(404, "event_not_found", "Event not found", {"event_id": str(event_id)})


@router.post("/ai-jobs/scoring", response_model=AIJobRead, status_code=status.HTTP_201_CREATED)
async def create_scoring_job(
    event_id: UUID,
    payload: ScoringJobCreate,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    await _require_event(db, workspace_id, event_id)
    all_contacts = payload.contact_ids is None
    return await JobLedger(db).create_job(
        workspace_id,
        JobKind.SCORING,
        payload.contact_ids or [],
        event_id=event_id,
        config={"all_contacts": all_contacts},
    )


@router.post("/ai-jobs/seating", response_model=AIJobRead, status_code=status.HTTP_201_CREATED)
async def create_seating_job(
    event_id: UUID,
    payload: SeatingJobCreate,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    await _require_event(db, workspace_id, event_id)
    return await JobLedger(db).create_job(
        workspace_id,
        JobKind.SEATING,
        [],
        event_id=event_id,
        config={"strategy": payload.strategy, "max_per_table": payload.max_per_table},
    )


@router.post("/ai-jobs/introductions", response_model=AIJobRead, status_code=status.HTTP_201_CREATED)
async def create_introductions_job(
    event_id: UUID,
    payload: IntroductionJobCreate,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    await _require_event(db, workspace_id, event_id)
    return await JobLedger(db).create_job(
        workspace_id,
        JobKind.INTRODUCTIONS,
        [],
        event_id=event_id,
        config={"max_pairings": payload.max_pairings},
    )


@router.get("/scores", response_model=list[GuestScoreRead])
async def list_event_scores(
    event_id: UUID,
    min_score: Optional[int] = Query(default=None, ge=0, le=100),
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """Scores for the event, highest relevance first."""
    await _require_event(db, workspace_id, event_id)
    return await GuestScoreRepository(db).list_for_event(workspace_id, event_id, min_score=min_score)


@router.get("/seating", response_model=list[SeatingAssignmentRead])
async def get_event_seating(
    event_id: UUID,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await SeatingOptimizer(db).get_seating_assignments(event_id, workspace_id)
    except EventNotFoundError:
        raise_app_error(404, "event_not_found", "Event not found", {"event_id": str(event_id)})


@router.post("/seating/apply", response_model=SeatingApplyResult)
async def apply_event_seating(
    event_id: UUID,
    payload: SeatingApplyRequest,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """Copy a suggestion batch onto the guest list, or place one guest by hand."""
    optimizer = SeatingOptimizer(db)
    try:
        if payload.batch_id is not None:
            applied = await optimizer.apply_suggestion_batch(event_id, workspace_id, payload.batch_id)
        else:
            updated = await optimizer.apply_seating_assignment(
                event_id,
                workspace_id,
                payload.contact_id,
                payload.table_number,
                payload.seat_number,
            )
            applied = 1 if updated else 0
    except EventNotFoundError:
        raise_app_error(404, "event_not_found", "Event not found", {"event_id": str(event_id)})
    return SeatingApplyResult(applied=applied)


@router.get("/seating/suggestions", response_model=list[SeatingSuggestionRead])
async def list_seating_suggestions(
    event_id: UUID,
    batch_id: Optional[UUID] = Query(default=None),
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """One stored suggestion batch; the most recent when ``batch_id`` is omitted."""
    await _require_event(db, workspace_id, event_id)
    suggestions = SeatingSuggestionRepository(db)
    if batch_id is None:
        batch_id = await suggestions.latest_batch_id(workspace_id, event_id)
        if batch_id is None:
            return []
    return await suggestions.list_batch(workspace_id, event_id, batch_id)


@router.get("/introductions", response_model=list[IntroductionPairingRead])
async def list_introductions(
    event_id: UUID,
    batch_id: Optional[UUID] = Query(default=None),
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """Introduction pairings for the event, highest priority first."""
    await _require_event(db, workspace_id, event_id)
    return await IntroductionPairingRepository(db).list_for_event(workspace_id, event_id, batch_id=batch_id)
