"""
Route a claimed AI job to the orchestrator for its kind.

The completion client is passed in by the caller (built per run from
settings), and each orchestrator gets its own provider instance around it.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, settings as default_settings
from app.models.ai_job import AIJob, JobKind
from app.services.completion import CompletionClient
from app.services.enrichment import EnrichmentPipeline, LlmEnrichmentProvider
from app.services.job_ledger import JobLedger
from app.services.scoring import LlmScoringProvider, ScoringBatch
from app.services.seating import LlmSeatingProvider, SeatingOptimizer, SeatingStrategy

logger = logging.getLogger(__name__)


def _uuid_list(values) -> list[UUID]:
    ids = []
    for value in values or []:
        try:
            ids.append(UUID(str(value)))
        except ValueError:
            logger.warning("Ignoring malformed target id %r", value)
    return ids


async def dispatch_job(
    db: AsyncSession,
    job: AIJob,
    client: CompletionClient,
    config: Optional[Settings] = None,
    ledger: Optional[JobLedger] = None,
) -> AIJob:
    config = config or default_settings
    ledger = ledger or JobLedger(db)
    options = dict(job.config or {})
    kind = job.kind
    job_id = job.id
    workspace_id = job.workspace_id

    if kind == JobKind.ENRICHMENT:
        provider = LlmEnrichmentProvider.from_settings(client, config)
        return await EnrichmentPipeline(db, provider, ledger).run(job_id, workspace_id, list(job.target_ids or []))

    if job.event_id is None and kind in (JobKind.SCORING, JobKind.SEATING, JobKind.INTRODUCTIONS):
        return await ledger.fail(job, "Event not found")

    if kind == JobKind.SCORING:
        provider = LlmScoringProvider.from_settings(client, config)
        contact_ids = None if options.get("all_contacts") else _uuid_list(job.target_ids)
        return await ScoringBatch(db, provider, ledger).score_batch_for_event(
            job_id, job.event_id, workspace_id, contact_ids
        )

    if kind == JobKind.SEATING:
        provider = LlmSeatingProvider.from_settings(client, config)
        run = await SeatingOptimizer(db, provider, ledger).generate_seating_plan(
            job_id,
            job.event_id,
            workspace_id,
            strategy=options.get("strategy") or SeatingStrategy.DEFAULT,
            max_per_table=options.get("max_per_table"),
        )
        return run.job

    if kind == JobKind.INTRODUCTIONS:
        provider = LlmSeatingProvider.from_settings(client, config)
        run = await SeatingOptimizer(db, provider, ledger).generate_introduction_pairings(
            job_id,
            job.event_id,
            workspace_id,
            max_pairings=int(options.get("max_pairings") or config.INTRODUCTION_MAX_PAIRINGS),
        )
        return run.job

    return await ledger.fail(job, f"Unknown job kind: {kind}")
