import json
import uuid

import pytest
from sqlalchemy import select

from app.errors import CompletionError
from app.models.ai_job import JobKind, JobStatus
from app.models.contact import EnrichmentStatus, PeopleContact
from app.services.enrichment import EnrichmentPipeline, LlmEnrichmentProvider
from app.services.job_ledger import JobLedger
from tests.helpers import FakeCompletionClient, create_contact

pytestmark = pytest.mark.unit


def _reply(**fields):
    return json.dumps(fields)


async def _run(db, workspace_id, client, contact_ids, **provider_kwargs):
    ledger = JobLedger(db)
    job = await ledger.create_job(workspace_id, JobKind.ENRICHMENT, contact_ids)
    provider = LlmEnrichmentProvider(client, **provider_kwargs)
    return await EnrichmentPipeline(db, provider, ledger).run(job.id, workspace_id, contact_ids)


async def _fresh_contact(session_factory, contact_id):
    async with session_factory() as session:
        return (await session.execute(select(PeopleContact).where(PeopleContact.id == contact_id))).scalar_one()


@pytest.mark.asyncio
async def test_empty_contact_list_completes_without_calling_provider(db, workspace_id):
    client = FakeCompletionClient()
    job = await _run(db, workspace_id, client, [])

    assert job.status == JobStatus.COMPLETED
    assert (job.target_count, job.completed_count, job.failed_count) == (0, 0, 0)
    assert client.calls == 0


@pytest.mark.asyncio
async def test_enrichment_merges_fields_and_tracks_cost(db, session_factory, workspace_id):
    contact = await create_contact(
        db,
        workspace_id,
        "Jane Doe",
        emails=[{"email": "jane@example.com"}],
        company="Acme",
        industry="Manufacturing",
        tags=["speaker"],
        enrichment_cost_cents=2,
    )
    client = FakeCompletionClient(
        [
            _reply(
                ai_summary="Operations leader.",
                title="COO",
                company=None,
                industry=None,
                role_seniority="c-suite",
                tags=["Operations", "SPEAKER"],
            )
        ]
    )
    job = await _run(db, workspace_id, client, [contact.id], input_cents_per_mtok=3000, output_cents_per_mtok=15000)

    assert job.status == JobStatus.COMPLETED
    assert (job.completed_count, job.failed_count) == (1, 0)
    assert "jane@example.com" in client.prompts[0]

    stored = await _fresh_contact(session_factory, contact.id)
    assert stored.enrichment_status == EnrichmentStatus.COMPLETED
    assert stored.title == "COO"
    assert stored.company == "Acme"
    assert stored.industry == "Manufacturing"
    assert stored.role_seniority == "C-Suite"
    assert stored.tags == ["speaker", "Operations"]
    assert stored.enrichment_data["ai_summary"] == "Operations leader."
    assert stored.enriched_at is not None
    # 2 already spent, plus 1000 input tokens at 3000c/Mtok and 500 output tokens at 15000c/Mtok
    assert stored.enrichment_cost_cents == 12


@pytest.mark.asyncio
async def test_non_json_reply_is_stored_as_summary(db, session_factory, workspace_id):
    contact = await create_contact(db, workspace_id, "Sam Lee", title="Engineer")
    client = FakeCompletionClient(["Sam Lee is a backend engineer who writes about Postgres."])
    job = await _run(db, workspace_id, client, [contact.id])

    assert job.status == JobStatus.COMPLETED
    stored = await _fresh_contact(session_factory, contact.id)
    assert stored.ai_summary == "Sam Lee is a backend engineer who writes about Postgres."
    assert stored.title == "Engineer"
    assert stored.enrichment_status == EnrichmentStatus.COMPLETED


@pytest.mark.asyncio
async def test_one_failure_does_not_stop_the_batch(db, session_factory, workspace_id):
    first = await create_contact(db, workspace_id, "First Person")
    second = await create_contact(db, workspace_id, "Second Person")
    third = await create_contact(db, workspace_id, "Third Person")
    client = FakeCompletionClient(
        [
            _reply(title="CTO"),
            CompletionError("anthropic returned 500", status_code=500),
            _reply(title="CFO"),
        ]
    )
    job = await _run(db, workspace_id, client, [first.id, second.id, third.id])

    assert job.status == JobStatus.COMPLETED
    assert (job.target_count, job.completed_count, job.failed_count) == (3, 2, 1)
    assert (await _fresh_contact(session_factory, second.id)).enrichment_status == EnrichmentStatus.FAILED
    assert (await _fresh_contact(session_factory, third.id)).title == "CFO"


@pytest.mark.asyncio
async def test_missing_and_malformed_ids_count_as_failed(db, workspace_id):
    other_workspace_contact = await create_contact(db, uuid.uuid4(), "Elsewhere")
    client = FakeCompletionClient()
    job = await _run(db, workspace_id, client, ["not-a-uuid", str(uuid.uuid4()), other_workspace_contact.id])

    assert job.status == JobStatus.FAILED
    assert (job.completed_count, job.failed_count) == (0, 3)
    assert client.calls == 0


@pytest.mark.asyncio
async def test_unexpected_provider_crash_marks_contact_failed(db, session_factory, workspace_id):
    contact = await create_contact(db, workspace_id, "Crash Case")

    class ExplodingProvider:
        key = "exploding"

        async def enrich(self, data):
            raise ValueError("boom")

    ledger = JobLedger(db)
    job = await ledger.create_job(workspace_id, JobKind.ENRICHMENT, [contact.id])
    job = await EnrichmentPipeline(db, ExplodingProvider(), ledger).run(job.id, workspace_id, [contact.id])

    assert job.status == JobStatus.FAILED
    assert job.failed_count == 1
    assert (await _fresh_contact(session_factory, contact.id)).enrichment_status == EnrichmentStatus.FAILED
