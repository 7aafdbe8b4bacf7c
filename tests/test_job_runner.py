import json

import pytest

from app.errors import ProviderConfigError
from app.models.ai_job import JobKind, JobStatus
from app.services.job_ledger import JobLedger
from app.workers.ai_job_runner import AIJobRunner
from tests.helpers import FakeCompletionClient, create_contact, create_event, invite

pytestmark = pytest.mark.unit


def _runner(session_factory, client=None, client_factory=None):
    return AIJobRunner(
        session_factory=session_factory,
        client_factory=client_factory or (lambda: client),
        worker_id="test-worker",
        poll_interval=0,
    )


async def _job(session_factory, job_id):
    async with session_factory() as session:
        return await JobLedger(session).load(job_id)


@pytest.mark.asyncio
async def test_run_once_with_empty_queue_returns_false(session_factory):
    assert await _runner(session_factory, FakeCompletionClient()).run_once() is False


@pytest.mark.asyncio
async def test_runner_dispatches_enrichment_job(db, session_factory, workspace_id):
    contact = await create_contact(db, workspace_id, "Queue Person")
    job = await JobLedger(db).create_job(workspace_id, JobKind.ENRICHMENT, [contact.id])
    client = FakeCompletionClient([json.dumps({"title": "Founder", "role_seniority": "founder"})])

    assert await _runner(session_factory, client).run_once() is True

    finished = await _job(session_factory, job.id)
    assert finished.status == JobStatus.COMPLETED
    assert finished.completed_count == 1
    assert client.calls == 1


@pytest.mark.asyncio
async def test_runner_claims_oldest_pending_first(db, session_factory, workspace_id):
    ledger = JobLedger(db)
    first = await ledger.create_job(workspace_id, JobKind.ENRICHMENT, [])
    second = await ledger.create_job(workspace_id, JobKind.ENRICHMENT, [])
    runner = _runner(session_factory, FakeCompletionClient())

    await runner.run_once()
    assert (await _job(session_factory, first.id)).status == JobStatus.COMPLETED
    assert (await _job(session_factory, second.id)).status == JobStatus.PENDING

    await runner.run_once()
    assert (await _job(session_factory, second.id)).status == JobStatus.COMPLETED
    assert await runner.run_once() is False


@pytest.mark.asyncio
async def test_runner_dispatches_scoring_for_all_contacts(db, session_factory, workspace_id):
    event = await create_event(db, workspace_id, objectives=[("Meet investors", 1.0)])
    await create_contact(db, workspace_id, "One")
    await create_contact(db, workspace_id, "Two")
    job = await JobLedger(db).create_job(
        workspace_id, JobKind.SCORING, [], event_id=event.id, config={"all_contacts": True}
    )
    client = FakeCompletionClient(lambda prompt: json.dumps({"relevance_score": 70}))

    await _runner(session_factory, client).run_once()

    finished = await _job(session_factory, job.id)
    assert finished.status == JobStatus.COMPLETED
    assert (finished.target_count, finished.completed_count) == (2, 2)


@pytest.mark.asyncio
async def test_runner_dispatches_introductions_with_configured_limit(db, session_factory, workspace_id):
    event = await create_event(db, workspace_id)
    for name in ("A", "B", "C"):
        await invite(db, workspace_id, event, await create_contact(db, workspace_id, name))
    job = await JobLedger(db).create_job(
        workspace_id, JobKind.INTRODUCTIONS, [], event_id=event.id, config={"max_pairings": 1}
    )
    reply = json.dumps(
        {"pairings": [{"guest_a_index": 0, "guest_b_index": 1}, {"guest_a_index": 1, "guest_b_index": 2}]}
    )
    client = FakeCompletionClient([reply])

    await _runner(session_factory, client).run_once()

    finished = await _job(session_factory, job.id)
    assert finished.status == JobStatus.COMPLETED
    assert finished.config["pairing_count"] == 1
    assert "up to 1 " in client.prompts[0]


@pytest.mark.asyncio
async def test_event_job_without_event_fails(db, session_factory, workspace_id):
    job = await JobLedger(db).create_job(workspace_id, JobKind.SEATING, [])

    await _runner(session_factory, FakeCompletionClient()).run_once()

    finished = await _job(session_factory, job.id)
    assert finished.status == JobStatus.FAILED
    assert finished.error_message == "Event not found"


@pytest.mark.asyncio
async def test_missing_provider_configuration_fails_job(db, session_factory, workspace_id):
    job = await JobLedger(db).create_job(workspace_id, JobKind.ENRICHMENT, ["x"])

    def no_provider():
        raise ProviderConfigError("No completion provider configured")

    await _runner(session_factory, client_factory=no_provider).run_once()

    finished = await _job(session_factory, job.id)
    assert finished.status == JobStatus.FAILED
    assert finished.error_message == "No completion provider configured"
    assert (finished.target_count, finished.failed_count) == (1, 1)


@pytest.mark.asyncio
async def test_crash_inside_orchestrator_fails_job(db, session_factory, workspace_id, monkeypatch):
    job = await JobLedger(db).create_job(workspace_id, JobKind.ENRICHMENT, ["x", "y"])

    async def exploding_dispatch(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr("app.workers.ai_job_runner.dispatch_job", exploding_dispatch)
    await _runner(session_factory, FakeCompletionClient()).run_once()

    finished = await _job(session_factory, job.id)
    assert finished.status == JobStatus.FAILED
    assert "database went away" in finished.error_message
    assert (finished.target_count, finished.failed_count) == (2, 2)


@pytest.mark.asyncio
async def test_run_forever_returns_once_stop_is_requested(db, session_factory, workspace_id):
    job = await JobLedger(db).create_job(workspace_id, JobKind.ENRICHMENT, [])
    runner = _runner(session_factory, FakeCompletionClient())
    runner.request_stop()

    await runner.run_forever()

    assert (await _job(session_factory, job.id)).status == JobStatus.PENDING
