"""
Seating optimizer and introduction pairing.

Both run as one batched provider call per job. Suggestions are stored as
rows sharing a ``batch_id``; nothing is applied to the guest list until
``apply_suggestion_batch`` or ``apply_seating_assignment`` is called.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.errors import EventNotFoundError
from app.models.ai_job import AIJob
from app.models.introduction import IntroductionPairing
from app.models.seating import SeatingSuggestion
from app.repositories.event_repository import EventRepository, GuestRow
from app.repositories.seating_repository import IntroductionPairingRepository, SeatingSuggestionRepository
from app.services.job_ledger import JobLedger
from app.services.seating.layout import resolve_tables
from app.services.seating.provider import SeatingProvider
from app.services.seating.types import (
    IntroductionInput,
    IntroductionSuggestion,
    SeatingAssignment,
    SeatingGuest,
    SeatingInput,
    SeatingStrategy,
)

logger = logging.getLogger(__name__)

EVENT_NOT_FOUND_ERROR = "Event not found"
DEFAULT_EVENT_TITLE = "Event"


@dataclass
class SeatingRun:
    job: AIJob
    batch_id: UUID
    assignments: list[SeatingAssignment] = field(default_factory=list)
    used_fallback: bool = False


@dataclass
class IntroductionRun:
    job: AIJob
    batch_id: UUID
    pairings: list[IntroductionSuggestion] = field(default_factory=list)


def to_seating_guest(row: GuestRow) -> SeatingGuest:
    _, contact, score = row
    return SeatingGuest(
        contact_id=contact.id,
        full_name=contact.full_name,
        company=contact.company,
        title=contact.title,
        industry=contact.industry,
        tags=list(contact.tags or []),
        relevance_score=score.relevance_score if score is not None else None,
        score_rationale=score.score_rationale if score is not None else None,
        talking_points=list(score.talking_points or []) if score is not None else [],
    )


class SeatingOptimizer:
    """Seating plans and introductions for an event's accepted guests."""

    def __init__(self, db: AsyncSession, provider: Optional[SeatingProvider] = None, ledger: Optional[JobLedger] = None):
        self.db = db
        self.provider = provider
        self.ledger = ledger or JobLedger(db)
        self.events = EventRepository(db)
        self.suggestions = SeatingSuggestionRepository(db)
        self.pairings = IntroductionPairingRepository(db)

    def _require_provider(self) -> SeatingProvider:
        if self.provider is None:
            raise RuntimeError("SeatingOptimizer needs a provider to generate suggestions")
        return self.provider

    async def generate_seating_plan(
        self,
        job_id: UUID,
        event_id: UUID,
        workspace_id: UUID,
        strategy: str = SeatingStrategy.DEFAULT,
        max_per_table: Optional[int] = None,
    ) -> SeatingRun:
        provider = self._require_provider()
        batch_id = uuid.uuid4()
        job = await self.ledger.load(job_id)
        await self.ledger.start(job)

        event = await self.events.get(workspace_id, event_id)
        if event is None:
            await self.ledger.fail(job, EVENT_NOT_FOUND_ERROR)
            return SeatingRun(job=job, batch_id=batch_id)

        if strategy not in SeatingStrategy.ALL:
            strategy = SeatingStrategy.DEFAULT
        tables = resolve_tables(
            event.tables_config,
            event.capacity,
            max_per_table,
            default_capacity=settings.SEATING_DEFAULT_CAPACITY,
            default_seats=settings.SEATING_DEFAULT_SEATS_PER_TABLE,
        )
        guests = [to_seating_guest(row) for row in await self.events.list_accepted_guests(workspace_id, event_id)]
        event_title = event.name or DEFAULT_EVENT_TITLE
        await self.ledger.set_target_count(job, len(guests))

        if not guests:
            await self.ledger.finish(job, 0, 0)
            return SeatingRun(job=job, batch_id=batch_id)

        log_ctx = {"job_id": str(job_id), "event_id": str(event_id)}
        try:
            outcome = await provider.suggest_seating(
                SeatingInput(guests=guests, tables=tables, event_title=event_title, strategy=strategy)
            )
            if not outcome.success or outcome.payload is None:
                logger.error("Seating generation failed for event %s: %s", event_id, outcome.error, extra=log_ctx)
                await self.ledger.fail(job, outcome.error or "Seating generation failed", failed=len(guests))
                return SeatingRun(job=job, batch_id=batch_id)

            assignments = outcome.payload.assignments
            await self.suggestions.add_batch(
                SeatingSuggestion(
                    workspace_id=workspace_id,
                    event_id=event_id,
                    contact_id=assignment.contact_id,
                    batch_id=batch_id,
                    table_number=assignment.table_number,
                    seat_number=assignment.seat_number,
                    rationale=assignment.rationale,
                    confidence=assignment.confidence,
                    strategy=strategy,
                    model_version=outcome.model,
                )
                for assignment in assignments
            )
            await self.db.commit()
        except Exception as exc:  # noqa: BLE001
            await self.db.rollback()
            logger.exception("Seating generation error for event %s", event_id, extra=log_ctx)
            await self.ledger.fail(job, f"Seating generation error: {exc}", failed=len(guests))
            return SeatingRun(job=job, batch_id=batch_id)

        if outcome.used_fallback:
            logger.warning("Seating reply for event %s was unparseable; used round-robin fallback", event_id, extra=log_ctx)

        seated = {assignment.contact_id for assignment in assignments}
        completed = len(seated)
        await self.ledger.annotate(job, batch_id=str(batch_id), used_fallback=outcome.used_fallback)
        await self.ledger.finish(job, completed, len(guests) - completed)
        return SeatingRun(job=job, batch_id=batch_id, assignments=assignments, used_fallback=outcome.used_fallback)

    async def generate_introduction_pairings(
        self,
        job_id: UUID,
        event_id: UUID,
        workspace_id: UUID,
        max_pairings: int = 20,
    ) -> IntroductionRun:
        """
        Pairings are inserted as a new batch every time. Earlier batches for the
        event are not consulted, so a repeat run may suggest the same pair again.
        """
        provider = self._require_provider()
        batch_id = uuid.uuid4()
        job = await self.ledger.load(job_id)
        await self.ledger.start(job)

        event = await self.events.get(workspace_id, event_id)
        if event is None:
            await self.ledger.fail(job, EVENT_NOT_FOUND_ERROR)
            return IntroductionRun(job=job, batch_id=batch_id)

        objectives = sorted(
            await self.events.list_objectives(workspace_id, event_id),
            key=lambda objective: objective.weight,
            reverse=True,
        )
        rows = await self.events.list_accepted_guests(
            workspace_id, event_id, limit=settings.INTRODUCTION_MAX_GUESTS
        )
        guests = [to_seating_guest(row) for row in rows]
        await self.ledger.set_target_count(job, len(guests))

        if len(guests) < 2:
            await self.ledger.finish(job, len(guests), 0)
            return IntroductionRun(job=job, batch_id=batch_id)

        log_ctx = {"job_id": str(job_id), "event_id": str(event_id)}
        try:
            outcome = await provider.suggest_introductions(
                IntroductionInput(
                    guests=guests,
                    objectives=[objective.objective_text for objective in objectives],
                    event_title=event.name or DEFAULT_EVENT_TITLE,
                    max_pairings=max_pairings,
                )
            )
            if not outcome.success or outcome.payload is None:
                logger.error("Introduction generation failed for event %s: %s", event_id, outcome.error, extra=log_ctx)
                await self.ledger.fail(job, outcome.error or "Introduction generation failed", failed=len(guests))
                return IntroductionRun(job=job, batch_id=batch_id)

            pairings = outcome.payload.pairings
            await self.pairings.add_batch(
                IntroductionPairing(
                    workspace_id=workspace_id,
                    event_id=event_id,
                    contact_a_id=pairing.contact_a_id,
                    contact_b_id=pairing.contact_b_id,
                    batch_id=batch_id,
                    reason=pairing.reason,
                    mutual_interest=pairing.mutual_interest,
                    priority=pairing.priority,
                    model_version=outcome.model,
                )
                for pairing in pairings
            )
            await self.db.commit()
        except Exception as exc:  # noqa: BLE001
            await self.db.rollback()
            logger.exception("Introduction generation error for event %s", event_id, extra=log_ctx)
            await self.ledger.fail(job, f"Introduction generation error: {exc}", failed=len(guests))
            return IntroductionRun(job=job, batch_id=batch_id)

        if outcome.used_fallback:
            logger.warning("Introduction reply for event %s was unparseable; no pairings stored", event_id, extra=log_ctx)

        await self.ledger.annotate(job, batch_id=str(batch_id), pairing_count=len(pairings))
        await self.ledger.finish(job, len(guests), 0)
        return IntroductionRun(job=job, batch_id=batch_id, pairings=pairings)

    async def _require_event(self, workspace_id: UUID, event_id: UUID) -> None:
        if await self.events.get(workspace_id, event_id) is None:
            raise EventNotFoundError(event_id)

    async def apply_seating_assignment(
        self,
        event_id: UUID,
        workspace_id: UUID,
        contact_id: UUID,
        table_number: int,
        seat_number: Optional[int] = None,
    ) -> bool:
        """Write one placement onto the guest's invitation. False when the guest is not invited."""
        await self._require_event(workspace_id, event_id)
        updated = await self.events.set_seat(workspace_id, event_id, contact_id, table_number, seat_number or None)
        await self.db.commit()
        return updated > 0

    async def apply_suggestion_batch(self, event_id: UUID, workspace_id: UUID, batch_id: UUID) -> int:
        """Copy a stored suggestion batch onto the invitations; returns how many were applied."""
        await self._require_event(workspace_id, event_id)
        applied = 0
        for suggestion in await self.suggestions.list_batch(workspace_id, event_id, batch_id):
            applied += await self.events.set_seat(
                workspace_id,
                event_id,
                suggestion.contact_id,
                suggestion.table_number,
                suggestion.seat_number,
            )
        await self.db.commit()
        logger.info("Applied %d seating suggestions from batch %s", applied, batch_id)
        return applied

    async def get_seating_assignments(self, event_id: UUID, workspace_id: UUID) -> list[dict[str, Any]]:
        await self._require_event(workspace_id, event_id)
        rows = await self.events.list_seating_assignments(workspace_id, event_id)
        return [
            {
                "invitation_id": invitation.id,
                "contact_id": contact.id,
                "full_name": contact.full_name,
                "company": contact.company,
                "title": contact.title,
                "table_assignment": invitation.table_assignment,
                "seat_assignment": invitation.seat_assignment,
                "status": invitation.status,
                "relevance_score": score.relevance_score if score is not None else None,
            }
            for invitation, contact, score in rows
        ]
