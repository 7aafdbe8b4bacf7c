import json
import uuid
from collections import Counter

import pytest
from sqlalchemy import select

from app.errors import CompletionError, EventNotFoundError
from app.models.ai_job import JobKind, JobStatus
from app.models.event import InvitationStatus
from app.models.introduction import IntroductionPairing
from app.models.seating import SeatingSuggestion
from app.repositories.guest_score_repository import GuestScoreRepository
from app.services.job_ledger import JobLedger
from app.services.seating import LlmSeatingProvider, SeatingOptimizer, SeatingStrategy
from app.services.seating.fallback import FALLBACK_RATIONALE
from tests.helpers import FakeCompletionClient, create_contact, create_event, invite

pytestmark = pytest.mark.unit


async def _seed_guests(db, workspace_id, event, names, status=InvitationStatus.ACCEPTED):
    contacts = []
    for name in names:
        contact = await create_contact(db, workspace_id, name)
        await invite(db, workspace_id, event, contact, status=status)
        contacts.append(contact)
    return contacts


async def _new_job(db, workspace_id, kind, event_id, config=None):
    return await JobLedger(db).create_job(workspace_id, kind, [], event_id=event_id, config=config)


async def _rows(session_factory, model, batch_id):
    async with session_factory() as session:
        result = await session.execute(select(model).where(model.batch_id == batch_id))
        return list(result.scalars().all())


@pytest.mark.asyncio
async def test_unparseable_reply_falls_back_to_round_robin_within_capacity(db, session_factory, workspace_id):
    event = await create_event(
        db,
        workspace_id,
        tables_config={"tables": [{"number": 1, "seats": 2}, {"number": 2, "seats": 3}]},
    )
    await _seed_guests(db, workspace_id, event, ["A", "B", "C", "D", "E"])
    job = await _new_job(db, workspace_id, JobKind.SEATING, event.id)
    client = FakeCompletionClient(["I am unable to produce a seating chart."])

    run = await SeatingOptimizer(db, LlmSeatingProvider(client)).generate_seating_plan(job.id, event.id, workspace_id)

    assert run.used_fallback is True
    assert run.job.status == JobStatus.COMPLETED
    assert (run.job.completed_count, run.job.failed_count) == (5, 0)
    assert run.job.config["batch_id"] == str(run.batch_id)

    stored = await _rows(session_factory, SeatingSuggestion, run.batch_id)
    assert Counter(s.table_number for s in stored) == {1: 2, 2: 3}
    assert all(s.rationale == FALLBACK_RATIONALE for s in stored)
    assert all(s.strategy == SeatingStrategy.MIXED_INTERESTS for s in stored)


@pytest.mark.asyncio
async def test_model_assignments_are_stored_as_a_batch(db, session_factory, workspace_id):
    event = await create_event(db, workspace_id, capacity=16)
    guests = await _seed_guests(db, workspace_id, event, ["Ann", "Ben", "Cat"])
    await _seed_guests(db, workspace_id, event, ["Declined Dan"], status=InvitationStatus.DECLINED)
    job = await _new_job(db, workspace_id, JobKind.SEATING, event.id)

    def reply(prompt):
        assert "Declined Dan" not in prompt
        assert "Table 2: 8 seats" in prompt
        return json.dumps(
            {
                "assignments": [
                    {"guest_index": 0, "table_number": 1, "rationale": "host", "confidence": 0.9},
                    {"guest_index": 1, "table_number": 2, "rationale": "investor", "confidence": 0.8},
                ]
            }
        )

    run = await SeatingOptimizer(db, LlmSeatingProvider(FakeCompletionClient(reply))).generate_seating_plan(
        job.id, event.id, workspace_id, strategy=SeatingStrategy.SCORE_BALANCED
    )

    assert run.used_fallback is False
    # Cat was left out by the model
    assert (run.job.target_count, run.job.completed_count, run.job.failed_count) == (3, 2, 1)
    assert run.job.status == JobStatus.COMPLETED

    stored = await _rows(session_factory, SeatingSuggestion, run.batch_id)
    by_contact = {s.contact_id: s for s in stored}
    assert set(by_contact) == {guests[0].id, guests[1].id}
    assert by_contact[guests[1].id].table_number == 2
    assert by_contact[guests[0].id].strategy == SeatingStrategy.SCORE_BALANCED


@pytest.mark.asyncio
async def test_oversized_table_number_only_loses_that_guest(db, session_factory, workspace_id):
    event = await create_event(db, workspace_id, capacity=16)
    guests = await _seed_guests(db, workspace_id, event, ["Ann", "Ben"])
    job = await _new_job(db, workspace_id, JobKind.SEATING, event.id)
    reply = json.dumps(
        {
            "assignments": [
                {"guest_index": 0, "table_number": 1e20, "confidence": 0.9},
                {"guest_index": 1, "table_number": 1, "confidence": 0.7},
            ]
        }
    )

    run = await SeatingOptimizer(db, LlmSeatingProvider(FakeCompletionClient([reply]))).generate_seating_plan(
        job.id, event.id, workspace_id
    )

    assert run.job.status == JobStatus.COMPLETED
    assert (run.job.completed_count, run.job.failed_count) == (1, 1)
    stored = await _rows(session_factory, SeatingSuggestion, run.batch_id)
    assert [(s.contact_id, s.table_number) for s in stored] == [(guests[1].id, 1)]


@pytest.mark.asyncio
async def test_guests_are_offered_best_score_first(db, workspace_id):
    event = await create_event(db, workspace_id)
    low, high = await _seed_guests(db, workspace_id, event, ["Low Score", "High Score"])
    scores = GuestScoreRepository(db)
    for contact, value in ((low, 20), (high, 95)):
        await scores.upsert(
            workspace_id,
            contact.id,
            event.id,
            relevance_score=value,
            matched_objectives=[],
            score_rationale=None,
            talking_points=[],
            model_version=None,
        )
    await db.commit()
    job = await _new_job(db, workspace_id, JobKind.SEATING, event.id)
    client = FakeCompletionClient(["no"])

    run = await SeatingOptimizer(db, LlmSeatingProvider(client)).generate_seating_plan(job.id, event.id, workspace_id)

    assert client.prompts[0].index("0: High Score") < client.prompts[0].index("1: Low Score")
    assert [a.contact_id for a in run.assignments] == [high.id, low.id]


@pytest.mark.asyncio
async def test_no_accepted_guests_completes_without_provider_call(db, workspace_id):
    event = await create_event(db, workspace_id)
    job = await _new_job(db, workspace_id, JobKind.SEATING, event.id)
    client = FakeCompletionClient()

    run = await SeatingOptimizer(db, LlmSeatingProvider(client)).generate_seating_plan(job.id, event.id, workspace_id)

    assert run.job.status == JobStatus.COMPLETED
    assert run.job.target_count == 0
    assert client.calls == 0


@pytest.mark.asyncio
async def test_provider_failure_fails_seating_job(db, workspace_id):
    event = await create_event(db, workspace_id)
    await _seed_guests(db, workspace_id, event, ["A", "B"])
    job = await _new_job(db, workspace_id, JobKind.SEATING, event.id)
    client = FakeCompletionClient([CompletionError("anthropic returned 503", status_code=503)])

    run = await SeatingOptimizer(db, LlmSeatingProvider(client)).generate_seating_plan(job.id, event.id, workspace_id)

    assert run.job.status == JobStatus.FAILED
    assert run.job.failed_count == 2
    assert "503" in run.job.error_message


@pytest.mark.asyncio
async def test_missing_event_fails_seating_job(db, workspace_id):
    event_id = uuid.uuid4()
    job = await _new_job(db, workspace_id, JobKind.SEATING, event_id)

    run = await SeatingOptimizer(db, LlmSeatingProvider(FakeCompletionClient())).generate_seating_plan(
        job.id, event_id, workspace_id
    )

    assert run.job.status == JobStatus.FAILED
    assert run.job.error_message == "Event not found"


@pytest.mark.asyncio
async def test_apply_batch_and_single_assignment(db, session_factory, workspace_id):
    event = await create_event(db, workspace_id, tables_config={"tables": [{"number": 1, "seats": 1}, {"number": 2, "seats": 4}]})
    first, second = await _seed_guests(db, workspace_id, event, ["First", "Second"])
    job = await _new_job(db, workspace_id, JobKind.SEATING, event.id)
    run = await SeatingOptimizer(db, LlmSeatingProvider(FakeCompletionClient(["not json"]))).generate_seating_plan(
        job.id, event.id, workspace_id
    )

    optimizer = SeatingOptimizer(db)
    before = await optimizer.get_seating_assignments(event.id, workspace_id)
    assert all(row["table_assignment"] is None for row in before)

    assert await optimizer.apply_suggestion_batch(event.id, workspace_id, run.batch_id) == 2
    async with session_factory() as session:
        rows = await SeatingOptimizer(session).get_seating_assignments(event.id, workspace_id)
    assert {row["full_name"]: (row["table_assignment"], row["seat_assignment"]) for row in rows} == {
        "First": (1, 1),
        "Second": (2, 1),
    }

    assert await optimizer.apply_seating_assignment(event.id, workspace_id, second.id, 1, 2) is True
    assert await optimizer.apply_seating_assignment(event.id, workspace_id, uuid.uuid4(), 1) is False
    async with session_factory() as session:
        rows = await SeatingOptimizer(session).get_seating_assignments(event.id, workspace_id)
    assert {row["full_name"]: row["table_assignment"] for row in rows} == {"First": 1, "Second": 1}


@pytest.mark.asyncio
async def test_seating_reads_and_writes_require_event(db, workspace_id):
    optimizer = SeatingOptimizer(db)
    with pytest.raises(EventNotFoundError):
        await optimizer.get_seating_assignments(uuid.uuid4(), workspace_id)
    with pytest.raises(EventNotFoundError):
        await optimizer.apply_seating_assignment(uuid.uuid4(), workspace_id, uuid.uuid4(), 1)


# Introductions


@pytest.mark.asyncio
async def test_two_guests_get_at_most_one_pairing(db, session_factory, workspace_id):
    event = await create_event(db, workspace_id, objectives=[("Close a seed round", 1.0), ("Find a CTO", 3.0)])
    a, b = await _seed_guests(db, workspace_id, event, ["Alice", "Bob"])
    job = await _new_job(db, workspace_id, JobKind.INTRODUCTIONS, event.id, config={"max_pairings": 20})
    reply = json.dumps(
        {
            "pairings": [
                {"guest_a_index": 0, "guest_b_index": 1, "reason": "Alice is hiring", "priority": 1},
                {"guest_a_index": 1, "guest_b_index": 0, "reason": "Same pair again"},
                {"guest_a_index": 1, "guest_b_index": 1, "reason": "Self"},
            ]
        }
    )
    client = FakeCompletionClient([reply])

    run = await SeatingOptimizer(db, LlmSeatingProvider(client)).generate_introduction_pairings(
        job.id, event.id, workspace_id, max_pairings=20
    )

    prompt = client.prompts[0]
    assert prompt.index("Find a CTO") < prompt.index("Close a seed round")
    assert len(run.pairings) == 1
    assert run.job.status == JobStatus.COMPLETED
    assert (run.job.completed_count, run.job.failed_count) == (2, 0)
    assert run.job.config["pairing_count"] == 1

    stored = await _rows(session_factory, IntroductionPairing, run.batch_id)
    assert len(stored) == 1
    assert {stored[0].contact_a_id, stored[0].contact_b_id} == {a.id, b.id}
    assert stored[0].priority == 1


@pytest.mark.asyncio
async def test_fewer_than_two_guests_skips_provider(db, workspace_id):
    event = await create_event(db, workspace_id)
    await _seed_guests(db, workspace_id, event, ["Solo"])
    job = await _new_job(db, workspace_id, JobKind.INTRODUCTIONS, event.id)
    client = FakeCompletionClient()

    run = await SeatingOptimizer(db, LlmSeatingProvider(client)).generate_introduction_pairings(job.id, event.id, workspace_id)

    assert run.pairings == []
    assert run.job.status == JobStatus.COMPLETED
    assert client.calls == 0


@pytest.mark.asyncio
async def test_repeat_runs_create_separate_batches(db, session_factory, workspace_id):
    event = await create_event(db, workspace_id)
    await _seed_guests(db, workspace_id, event, ["A", "B", "C"])
    reply = json.dumps({"pairings": [{"guest_a_index": 0, "guest_b_index": 2, "priority": 2}]})
    optimizer = SeatingOptimizer(db, LlmSeatingProvider(FakeCompletionClient([reply, reply])))

    first_job = await _new_job(db, workspace_id, JobKind.INTRODUCTIONS, event.id)
    first = await optimizer.generate_introduction_pairings(first_job.id, event.id, workspace_id)
    second_job = await _new_job(db, workspace_id, JobKind.INTRODUCTIONS, event.id)
    second = await optimizer.generate_introduction_pairings(second_job.id, event.id, workspace_id)

    assert first.batch_id != second.batch_id
    assert len(await _rows(session_factory, IntroductionPairing, first.batch_id)) == 1
    assert len(await _rows(session_factory, IntroductionPairing, second.batch_id)) == 1


@pytest.mark.asyncio
async def test_unparseable_introduction_reply_stores_nothing(db, workspace_id):
    event = await create_event(db, workspace_id)
    await _seed_guests(db, workspace_id, event, ["A", "B"])
    job = await _new_job(db, workspace_id, JobKind.INTRODUCTIONS, event.id)
    client = FakeCompletionClient(["Everyone should meet everyone!"])

    run = await SeatingOptimizer(db, LlmSeatingProvider(client)).generate_introduction_pairings(job.id, event.id, workspace_id)

    assert run.pairings == []
    assert run.job.status == JobStatus.COMPLETED
    assert run.job.config["pairing_count"] == 0
