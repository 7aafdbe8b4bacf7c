import uuid

import httpx
import pytest
import pytest_asyncio

from app.db.session import get_db
from app.main import app
from app.models.ai_job import JobKind, JobStatus
from app.services.job_ledger import JobLedger
from app.services.seating import LlmSeatingProvider, SeatingOptimizer
from tests.helpers import FakeCompletionClient, create_contact, create_event, invite

pytestmark = pytest.mark.unit


@pytest_asyncio.fixture
async def api(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


def _headers(workspace_id):
    return {"X-Workspace-Id": str(workspace_id)}


@pytest.mark.asyncio
async def test_create_and_poll_enrichment_job(api, workspace_id):
    contact_ids = [str(uuid.uuid4()), str(uuid.uuid4())]
    response = await api.post("/ai-jobs/enrichment", json={"contact_ids": contact_ids}, headers=_headers(workspace_id))

    assert response.status_code == 201
    job = response.json()
    assert job["kind"] == JobKind.ENRICHMENT
    assert job["status"] == JobStatus.PENDING
    assert job["target_count"] == 2

    polled = await api.get(f"/ai-jobs/{job['id']}", headers=_headers(workspace_id))
    assert polled.status_code == 200
    assert polled.json()["id"] == job["id"]


@pytest.mark.asyncio
async def test_jobs_are_isolated_per_workspace(api, workspace_id):
    created = (await api.post("/ai-jobs/enrichment", json={"contact_ids": []}, headers=_headers(workspace_id))).json()

    response = await api.get(f"/ai-jobs/{created['id']}", headers=_headers(uuid.uuid4()))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "job_not_found"


@pytest.mark.asyncio
async def test_workspace_header_is_validated(api):
    missing = await api.post("/ai-jobs/enrichment", json={"contact_ids": []})
    assert missing.status_code == 422

    invalid = await api.post("/ai-jobs/enrichment", json={"contact_ids": []}, headers={"X-Workspace-Id": "acme"})
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "invalid_workspace"


@pytest.mark.asyncio
async def test_enrichment_request_size_is_capped(api, workspace_id):
    contact_ids = [str(uuid.uuid4()) for _ in range(101)]
    response = await api.post("/ai-jobs/enrichment", json={"contact_ids": contact_ids}, headers=_headers(workspace_id))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_event_jobs_require_existing_event(api, workspace_id):
    response = await api.post(f"/events/{uuid.uuid4()}/ai-jobs/scoring", json={}, headers=_headers(workspace_id))
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "event_not_found"


@pytest.mark.asyncio
async def test_event_job_triggers_store_their_config(api, db, workspace_id):
    event = await create_event(db, workspace_id, objectives=[("Meet investors", 1.0)])
    headers = _headers(workspace_id)

    scoring = (await api.post(f"/events/{event.id}/ai-jobs/scoring", json={}, headers=headers)).json()
    assert scoring["config"] == {"all_contacts": True}
    assert scoring["event_id"] == str(event.id)

    seating = await api.post(
        f"/events/{event.id}/ai-jobs/seating",
        json={"strategy": "similar_interests", "max_per_table": 6},
        headers=headers,
    )
    assert seating.status_code == 201
    assert seating.json()["config"] == {"strategy": "SIMILAR_INTERESTS", "max_per_table": 6}

    bad_strategy = await api.post(f"/events/{event.id}/ai-jobs/seating", json={"strategy": "random"}, headers=headers)
    assert bad_strategy.status_code == 422

    intros = (await api.post(f"/events/{event.id}/ai-jobs/introductions", json={"max_pairings": 5}, headers=headers)).json()
    assert intros["kind"] == JobKind.INTRODUCTIONS
    assert intros["config"] == {"max_pairings": 5}


@pytest.mark.asyncio
async def test_seating_read_and_apply_endpoints(api, db, workspace_id):
    event = await create_event(db, workspace_id, tables_config={"tables": [{"number": 1, "seats": 4}]})
    for name in ("Ann", "Ben"):
        await invite(db, workspace_id, event, await create_contact(db, workspace_id, name))
    job = await JobLedger(db).create_job(workspace_id, JobKind.SEATING, [], event_id=event.id)
    run = await SeatingOptimizer(db, LlmSeatingProvider(FakeCompletionClient(["nope"]))).generate_seating_plan(
        job.id, event.id, workspace_id
    )
    headers = _headers(workspace_id)

    suggestions = (await api.get(f"/events/{event.id}/seating/suggestions", headers=headers)).json()
    assert {row["batch_id"] for row in suggestions} == {str(run.batch_id)}
    assert len(suggestions) == 2

    applied = await api.post(f"/events/{event.id}/seating/apply", json={"batch_id": str(run.batch_id)}, headers=headers)
    assert applied.json() == {"applied": 2}

    seating = (await api.get(f"/events/{event.id}/seating", headers=headers)).json()
    assert [(row["full_name"], row["table_assignment"], row["seat_assignment"]) for row in seating] == [
        ("Ann", 1, 1),
        ("Ben", 1, 2),
    ]

    incomplete = await api.post(f"/events/{event.id}/seating/apply", json={"table_number": 2}, headers=headers)
    assert incomplete.status_code == 422

    missing = await api.get(f"/events/{uuid.uuid4()}/seating", headers=headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_scores_and_introductions_empty_for_new_event(api, db, workspace_id):
    event = await create_event(db, workspace_id)
    headers = _headers(workspace_id)

    scores = await api.get(f"/events/{event.id}/scores", params={"min_score": 50}, headers=headers)
    assert scores.status_code == 200
    assert scores.json() == []

    intros = await api.get(f"/events/{event.id}/introductions", headers=headers)
    assert intros.json() == []

    suggestions = await api.get(f"/events/{event.id}/seating/suggestions", headers=headers)
    assert suggestions.json() == []


@pytest.mark.asyncio
async def test_list_jobs_filters_by_kind_and_workspace(api, db, workspace_id):
    event = await create_event(db, workspace_id, objectives=[("Meet investors", 1.0)])
    headers = _headers(workspace_id)
    enrichment = (await api.post("/ai-jobs/enrichment", json={"contact_ids": []}, headers=headers)).json()
    scoring = (await api.post(f"/events/{event.id}/ai-jobs/scoring", json={}, headers=headers)).json()
    await api.post("/ai-jobs/enrichment", json={"contact_ids": []}, headers=_headers(uuid.uuid4()))

    listed = await api.get("/ai-jobs", headers=headers)
    assert listed.status_code == 200
    assert {job["id"] for job in listed.json()} == {enrichment["id"], scoring["id"]}

    only_scoring = await api.get("/ai-jobs", params={"kind": JobKind.SCORING}, headers=headers)
    assert [job["id"] for job in only_scoring.json()] == [scoring["id"]]

    limited = await api.get("/ai-jobs", params={"limit": 1}, headers=headers)
    assert len(limited.json()) == 1

    unknown = await api.get("/ai-jobs", params={"kind": "translation"}, headers=headers)
    assert unknown.status_code == 422
    assert unknown.json()["error"]["code"] == "invalid_kind"


@pytest.mark.asyncio
async def test_health_reports_database_and_schema(api):
    response = await api.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["api_ok"] is True
    assert body["db_ok"] is True
    # Test databases are built with create_all, not migrations
    assert body["schema_revision"] is None
    assert isinstance(body["ai_provider_configured"], bool)
