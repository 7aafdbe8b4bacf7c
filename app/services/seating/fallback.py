"""
Deterministic seating used when the model's reply cannot be parsed.

Guests arrive best score first. Each table is filled to its seat count before
moving to the next, so every guest gets exactly one table and no table goes
over capacity. When there are more guests than configured seats, the rest
go onto overflow tables numbered after the highest configured table.
"""

from typing import Iterator, Sequence

from app.services.seating.layout import DEFAULT_SEATS_PER_TABLE
from app.services.seating.types import SeatingAssignment, SeatingGuest, TableConfig

FALLBACK_RATIONALE = "Auto-assigned (round-robin)"
FALLBACK_CONFIDENCE = 0.3


def _table_sequence(tables: Sequence[TableConfig], default_seats: int) -> Iterator[TableConfig]:
    # Overflow tables are not part of the configured layout; they only exist so
    # extra guests never wrap onto a full table
    usable = [table for table in tables if table.seats > 0]
    yield from usable

    overflow_seats = max((table.seats for table in usable), default=default_seats)
    next_number = max((table.number for table in tables), default=0) + 1
    while True:
        yield TableConfig(number=next_number, seats=overflow_seats)
        next_number += 1


def fallback_seating(
    guests: Sequence[SeatingGuest],
    tables: Sequence[TableConfig],
    default_seats: int = DEFAULT_SEATS_PER_TABLE,
) -> list[SeatingAssignment]:
    assignments: list[SeatingAssignment] = []
    if not guests:
        return assignments

    sequence = _table_sequence(tables, max(1, default_seats))
    current = next(sequence)
    filled = 0
    for guest in guests:
        while filled >= current.seats:
            current = next(sequence)
            filled = 0
        filled += 1
        assignments.append(
            SeatingAssignment(
                contact_id=guest.contact_id,
                table_number=current.number,
                seat_number=filled,
                rationale=FALLBACK_RATIONALE,
                confidence=FALLBACK_CONFIDENCE,
            )
        )
    return assignments
