"""
Contact enrichment pipeline.

Runs one enrichment job: every target contact is sent to the provider in
order, merged back into the contact, and counted on the job ledger. A
failing contact never stops the batch.
"""

import logging
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.ai_job import AIJob
from app.models.contact import EnrichmentStatus, PeopleContact
from app.repositories.contact_repository import PeopleContactRepository
from app.services.enrichment.provider import EnrichmentProvider
from app.services.enrichment.types import EnrichedFields, EnrichmentInput
from app.services.job_ledger import JobLedger
from app.utils.time import utc_now

logger = logging.getLogger(__name__)

MERGED_FIELDS = ("ai_summary", "title", "company", "industry", "role_seniority")


def _as_uuid(value) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


def merge_tags(existing: Sequence[str], new: Sequence[str]) -> list[str]:
    """Union keeping existing order first, de-duplicated case-insensitively."""
    merged: list[str] = []
    seen: set[str] = set()
    for tag in list(existing or []) + list(new or []):
        key = tag.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        merged.append(tag.strip())
    return merged


def merge_enriched_fields(contact: PeopleContact, fields: EnrichedFields) -> list[str]:
    """
    Apply provider output to the contact. A None value never clears what is
    already there; a non-empty value replaces it. Returns the changed field names.
    """
    changed = []
    for name in MERGED_FIELDS:
        value = getattr(fields, name)
        if value is not None and value != getattr(contact, name):
            setattr(contact, name, value)
            changed.append(name)

    tags = merge_tags(contact.tags or [], fields.tags)
    if tags != list(contact.tags or []):
        contact.tags = tags
        changed.append("tags")
    return changed


def build_enrichment_input(contact: PeopleContact) -> EnrichmentInput:
    emails = []
    for entry in contact.emails or []:
        email = entry.get("email") if isinstance(entry, dict) else entry
        if isinstance(email, str) and email.strip():
            emails.append(email.strip())
    return EnrichmentInput(
        contact_id=contact.id,
        full_name=contact.full_name,
        emails=emails,
        company=contact.company,
        title=contact.title,
        linkedin_url=contact.linkedin_url,
    )


class EnrichmentPipeline:
    """Sequential enrichment orchestrator with per-item progress."""

    def __init__(self, db: AsyncSession, provider: EnrichmentProvider, ledger: Optional[JobLedger] = None):
        self.db = db
        self.provider = provider
        self.ledger = ledger or JobLedger(db)
        self.contacts = PeopleContactRepository(db)

    async def run(self, job_id: UUID, workspace_id: UUID, contact_ids: Sequence) -> AIJob:
        job = await self.ledger.load(job_id)
        await self.ledger.start(job, target_count=len(contact_ids))

        completed = 0
        failed = 0
        for raw_id in contact_ids:
            if await self._enrich_one(job_id, workspace_id, raw_id):
                completed += 1
            else:
                failed += 1
            await self.ledger.record_progress(job, completed, failed)

        return await self.ledger.finish(job, completed, failed)

    async def _enrich_one(self, job_id: UUID, workspace_id: UUID, raw_id) -> bool:
        contact_id = _as_uuid(raw_id)
        log_ctx = {"job_id": str(job_id), "contact_id": str(raw_id)}
        if contact_id is None:
            logger.warning("Skipping malformed contact id %s", raw_id, extra=log_ctx)
            return False

        try:
            contact = await self.contacts.get_by_id(workspace_id, contact_id)
            if contact is None:
                logger.warning("Contact %s not found in workspace", contact_id, extra=log_ctx)
                return False

            contact.enrichment_status = EnrichmentStatus.IN_PROGRESS
            await self.db.commit()

            result = await self.provider.enrich(build_enrichment_input(contact))

            if not result.success or result.payload is None:
                contact.enrichment_status = EnrichmentStatus.FAILED
                await self.db.commit()
                logger.error(
                    "Enrichment failed for contact %s: %s",
                    contact_id,
                    result.error or "Unknown",
                    extra=log_ctx,
                )
                return False

            merge_enriched_fields(contact, result.payload)
            contact.enrichment_data = result.payload.raw_data or {}
            contact.enrichment_cost_cents = (contact.enrichment_cost_cents or 0) + (result.cost_cents or 0)
            contact.enrichment_status = EnrichmentStatus.COMPLETED
            contact.enriched_at = utc_now()
            await self.db.commit()
            if result.used_fallback:
                logger.info("Enrichment reply for contact %s was not JSON; stored as summary", contact_id, extra=log_ctx)
            return True
        except Exception:  # noqa: BLE001
            await self.db.rollback()
            logger.exception("Enrichment pipeline error for contact %s", contact_id, extra=log_ctx)
            await self._mark_failed(workspace_id, contact_id, log_ctx)
            return False

    async def _mark_failed(self, workspace_id: UUID, contact_id: UUID, log_ctx: dict) -> None:
        try:
            await self.contacts.set_enrichment_status(workspace_id, contact_id, EnrichmentStatus.FAILED)
            await self.db.commit()
        except Exception:  # noqa: BLE001
            await self.db.rollback()
            logger.exception("Could not mark contact %s as FAILED", contact_id, extra=log_ctx)
