"""
Seating and introduction reply parsers.

Indexes that do not point into the supplied guest list are dropped, as are
self-pairings and table numbers too large to store. The model's seating is
NOT checked against table capacity; only the deterministic fallback
guarantees that.
"""

from typing import Optional, Sequence

from pydantic import ValidationError

from app.schemas.ai_reply import IntroductionReply, SeatingReply
from app.services.ai_json import extract_first_json_object
from app.services.seating.fallback import fallback_seating
from app.services.seating.layout import DEFAULT_SEATS_PER_TABLE
from app.services.seating.types import (
    IntroductionPlan,
    IntroductionSuggestion,
    SeatingAssignment,
    SeatingGuest,
    SeatingPlan,
    TableConfig,
)


def _in_range(index: Optional[int], guest_count: int) -> bool:
    return index is not None and 0 <= index < guest_count


def parse_seating_response(
    text: Optional[str],
    guests: Sequence[SeatingGuest],
    tables: Sequence[TableConfig],
    default_seats: int = DEFAULT_SEATS_PER_TABLE,
) -> SeatingPlan:
    parsed = extract_first_json_object(text)
    try:
        reply = SeatingReply.model_validate(parsed or {})
    except ValidationError:
        return SeatingPlan(assignments=fallback_seating(guests, tables, default_seats), is_fallback=True)

    assignments: list[SeatingAssignment] = []
    for entry in reply.assignments:
        if not _in_range(entry.guest_index, len(guests)) or entry.table_number is None:
            continue
        assignments.append(
            SeatingAssignment(
                contact_id=guests[entry.guest_index].contact_id,
                table_number=entry.table_number,
                seat_number=None,
                rationale=entry.rationale,
                confidence=entry.confidence,
            )
        )
    return SeatingPlan(assignments=assignments)


def parse_introduction_response(
    text: Optional[str],
    guests: Sequence[SeatingGuest],
    max_pairings: int,
) -> IntroductionPlan:
    """
    At most ``max_pairings`` pairings. A pair repeated within one reply (in
    either order) is kept once. Unparseable replies yield no pairings.
    """
    parsed = extract_first_json_object(text)
    try:
        reply = IntroductionReply.model_validate(parsed or {})
    except ValidationError:
        return IntroductionPlan(pairings=[], is_fallback=True)

    pairings: list[IntroductionSuggestion] = []
    seen: set[frozenset] = set()
    for entry in reply.pairings:
        if len(pairings) >= max_pairings:
            break
        a, b = entry.guest_a_index, entry.guest_b_index
        if not _in_range(a, len(guests)) or not _in_range(b, len(guests)) or a == b:
            continue
        contact_a = guests[a].contact_id
        contact_b = guests[b].contact_id
        key = frozenset((contact_a, contact_b))
        if contact_a == contact_b or key in seen:
            continue
        seen.add(key)
        pairings.append(
            IntroductionSuggestion(
                contact_a_id=contact_a,
                contact_b_id=contact_b,
                reason=entry.reason,
                mutual_interest=entry.mutual_interest,
                priority=entry.priority,
            )
        )
    return IntroductionPlan(pairings=pairings)
