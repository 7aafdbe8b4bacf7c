"""
Batch scoring of contacts for an event, tracked on the job ledger.
"""

import logging
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.ai_job import AIJob
from app.repositories.contact_repository import PeopleContactRepository
from app.repositories.event_repository import EventRepository
from app.services.job_ledger import JobLedger
from app.services.scoring.engine import DEFAULT_EVENT_TITLE, ScoringEngine, to_scoring_contact, to_scoring_objectives
from app.services.scoring.provider import ScoringProvider

logger = logging.getLogger(__name__)

NO_OBJECTIVES_ERROR = "No objectives defined for this event"
EVENT_NOT_FOUND_ERROR = "Event not found"


class ScoringBatch:
    """Scores every target contact against the event's objectives, one at a time."""

    def __init__(self, db: AsyncSession, provider: ScoringProvider, ledger: Optional[JobLedger] = None):
        self.db = db
        self.engine = ScoringEngine(db, provider)
        self.ledger = ledger or JobLedger(db)
        self.events = EventRepository(db)
        self.contacts = PeopleContactRepository(db)

    async def score_batch_for_event(
        self,
        job_id: UUID,
        event_id: UUID,
        workspace_id: UUID,
        contact_ids: Optional[Sequence[UUID]] = None,
    ) -> AIJob:
        job = await self.ledger.load(job_id)
        await self.ledger.start(job)

        event = await self.events.get(workspace_id, event_id)
        if event is None:
            return await self.ledger.fail(job, EVENT_NOT_FOUND_ERROR)

        objectives = to_scoring_objectives(await self.events.list_objectives(workspace_id, event_id))
        if not objectives:
            return await self.ledger.fail(job, NO_OBJECTIVES_ERROR)

        rows = await self.contacts.list_for_scoring(workspace_id, event_id, contact_ids)
        contacts = [to_scoring_contact(row) for row in rows]
        event_title = event.name or DEFAULT_EVENT_TITLE
        await self.ledger.set_target_count(job, len(contacts))

        completed = 0
        failed = 0
        for contact in contacts:
            log_ctx = {"job_id": str(job_id), "contact_id": str(contact.id), "event_id": str(event_id)}
            try:
                outcome = await self.engine.score_contact(contact, objectives, event_title)
                if outcome.success and outcome.payload is not None:
                    await self.engine.save_scoring_result(
                        workspace_id,
                        contact.id,
                        event_id,
                        outcome.payload,
                        model_version=outcome.model,
                    )
                    await self.db.commit()
                    completed += 1
                    if outcome.used_fallback:
                        logger.warning("Scoring reply for contact %s was unparseable; stored fallback", contact.id, extra=log_ctx)
                else:
                    failed += 1
                    logger.error("Scoring failed for contact %s: %s", contact.id, outcome.error or "Unknown", extra=log_ctx)
            except Exception:  # noqa: BLE001
                await self.db.rollback()
                failed += 1
                logger.exception("Scoring failed for contact %s", contact.id, extra=log_ctx)

            await self.ledger.record_progress(job, completed, failed)

        return await self.ledger.finish(job, completed, failed)
