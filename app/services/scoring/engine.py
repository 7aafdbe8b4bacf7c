"""
Scoring engine: score one contact for an event and persist the result.
"""

import logging
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contact import PeopleContact
from app.models.event import EventObjective
from app.models.guest_score import GuestScore
from app.repositories.guest_score_repository import GuestScoreRepository
from app.services.scoring.provider import ScoringProvider
from app.services.scoring.types import (
    ContactForScoring,
    ObjectiveForScoring,
    ScoringInput,
    ScoringOutcome,
    ScoringResult,
)

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TITLE = "Event"


def to_scoring_contact(contact: PeopleContact) -> ContactForScoring:
    return ContactForScoring(
        id=contact.id,
        full_name=contact.full_name,
        company=contact.company,
        title=contact.title,
        industry=contact.industry,
        role_seniority=contact.role_seniority,
        ai_summary=contact.ai_summary,
        tags=list(contact.tags or []),
    )


def to_scoring_objectives(rows: Sequence[EventObjective]) -> list[ObjectiveForScoring]:
    return [
        ObjectiveForScoring(id=row.id, objective_text=row.objective_text, weight=row.weight)
        for row in rows
    ]


class ScoringEngine:
    """Single-contact scoring plus the guest score read side."""

    def __init__(self, db: AsyncSession, provider: ScoringProvider):
        self.db = db
        self.provider = provider
        self.scores = GuestScoreRepository(db)

    async def score_contact(
        self,
        contact: ContactForScoring,
        objectives: Sequence[ObjectiveForScoring],
        event_title: Optional[str] = None,
    ) -> ScoringOutcome:
        return await self.provider.score(
            ScoringInput(
                contact=contact,
                objectives=list(objectives),
                event_title=event_title or DEFAULT_EVENT_TITLE,
            )
        )

    async def save_scoring_result(
        self,
        workspace_id: UUID,
        contact_id: UUID,
        event_id: UUID,
        result: ScoringResult,
        model_version: Optional[str] = None,
    ) -> GuestScore:
        """Upsert on (contact, event); a re-score replaces every scored field."""
        return await self.scores.upsert(
            workspace_id,
            contact_id,
            event_id,
            relevance_score=result.relevance_score,
            matched_objectives=[item.to_json() for item in result.matched_objectives],
            score_rationale=result.score_rationale,
            talking_points=list(result.talking_points),
            model_version=model_version,
        )

    async def list_scores_for_event(
        self,
        workspace_id: UUID,
        event_id: UUID,
        min_score: Optional[int] = None,
    ) -> List[GuestScore]:
        return await self.scores.list_for_event(workspace_id, event_id, min_score=min_score)
