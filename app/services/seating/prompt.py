"""Seating and introduction prompts."""

from typing import Sequence

from app.services.seating.types import IntroductionInput, SeatingGuest, SeatingInput, SeatingStrategy

STRATEGY_DESCRIPTIONS = {
    SeatingStrategy.MIXED_INTERESTS: (
        "Mix guests from different industries and backgrounds at each table for diverse conversation."
    ),
    SeatingStrategy.SIMILAR_INTERESTS: (
        "Group guests with similar industries or roles together for deep-dive discussions."
    ),
    SeatingStrategy.SCORE_BALANCED: (
        "Distribute high-scoring guests evenly across tables, ensuring each table has at least "
        "one high-value connection."
    ),
}


def _seating_guest_line(index: int, guest: SeatingGuest) -> str:
    parts = [f"{index}: {guest.full_name}"]
    if guest.company:
        parts.append(f"({guest.company})")
    if guest.title:
        parts.append(f"- {guest.title}")
    if guest.industry:
        parts.append(f"[{guest.industry}]")
    if guest.relevance_score is not None:
        parts.append(f"Score: {guest.relevance_score}")
    if guest.tags:
        parts.append(f"Tags: {', '.join(guest.tags)}")
    return " ".join(parts)


def _introduction_guest_line(index: int, guest: SeatingGuest) -> str:
    parts = [f"{index}: {guest.full_name}"]
    if guest.company:
        parts.append(f"({guest.company})")
    if guest.title:
        parts.append(f"- {guest.title}")
    if guest.industry:
        parts.append(f"[{guest.industry}]")
    if guest.score_rationale:
        parts.append(f"Context: {guest.score_rationale}")
    if guest.talking_points:
        parts.append(f"Interests: {'; '.join(guest.talking_points)}")
    return " ".join(parts)


def _numbered(guests: Sequence[SeatingGuest], formatter) -> str:
    return "\n".join(formatter(index, guest) for index, guest in enumerate(guests))


def build_seating_prompt(data: SeatingInput) -> str:
    strategy = STRATEGY_DESCRIPTIONS.get(data.strategy, STRATEGY_DESCRIPTIONS[SeatingStrategy.DEFAULT])
    table_list = "\n".join(f"Table {table.number}: {table.seats} seats" for table in data.tables)
    guest_list = _numbered(data.guests, _seating_guest_line)

    return f"""Assign guests to tables for the event "{data.event_title}".

## Strategy
{strategy}

## Tables
{table_list}

## Guests (index: name details)
{guest_list}

Respond in this exact JSON format (no markdown, just raw JSON):
{{
  "assignments": [
    {{ "guest_index": 0, "table_number": 1, "rationale": "Brief reason", "confidence": 0.85 }}
  ]
}}

Rules:
- Every guest must be assigned to exactly one table
- Do not exceed the seat limit for any table
- Provide a brief rationale for each placement
- Confidence is 0-1 indicating how well-suited the placement is
- Do not invent guests or tables that are not listed above"""


def build_introduction_prompt(data: IntroductionInput) -> str:
    guest_list = _numbered(data.guests, _introduction_guest_line)
    objective_block = ""
    if data.objectives:
        objective_lines = "\n".join(f"- {objective}" for objective in data.objectives)
        objective_block = f"\n## Event Objectives\n{objective_lines}\n"

    return f"""Suggest up to {data.max_pairings} guest introduction pairings for "{data.event_title}".
These are "these two should meet" recommendations.
{objective_block}
## Guests
{guest_list}

Respond in this exact JSON format (no markdown, just raw JSON):
{{
  "pairings": [
    {{
      "guest_a_index": 0,
      "guest_b_index": 3,
      "reason": "Why they should meet",
      "mutual_interest": "What they have in common or could collaborate on",
      "priority": 1
    }}
  ]
}}

Priority: 1 = highest (must-meet), 2 = high, 3 = nice-to-have.
Focus on pairings that create the most business or networking value.
Only use guest indexes from the list above and never pair a guest with themselves."""
