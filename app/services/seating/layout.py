"""Table layout for an event."""

import math
from typing import Any, Optional

from app.services.ai_json import as_index
from app.services.seating.types import TableConfig

DEFAULT_CAPACITY = 50
DEFAULT_SEATS_PER_TABLE = 8


def parse_tables_config(tables_config: Optional[dict]) -> list[TableConfig]:
    """
    Tables from ``{"tables": [{"number": 1, "seats": 8}, ...]}``.

    Entries without a positive integer number and seat count are ignored; a
    repeated table number keeps its first entry.
    """
    if not isinstance(tables_config, dict):
        return []
    entries = tables_config.get("tables")
    if not isinstance(entries, list):
        return []

    tables: list[TableConfig] = []
    seen: set[int] = set()
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        number = as_index(entry.get("number"))
        seats = as_index(entry.get("seats"))
        if number is None or seats is None or number < 1 or seats < 1 or number in seen:
            continue
        seen.add(number)
        tables.append(TableConfig(number=number, seats=seats))
    return tables


def generate_tables(capacity: Optional[int], seats_per_table: Optional[int]) -> list[TableConfig]:
    capacity = capacity if capacity and capacity > 0 else DEFAULT_CAPACITY
    seats = seats_per_table if seats_per_table and seats_per_table > 0 else DEFAULT_SEATS_PER_TABLE
    count = math.ceil(capacity / seats)
    return [TableConfig(number=index + 1, seats=seats) for index in range(count)]


def resolve_tables(
    tables_config: Optional[dict[str, Any]],
    capacity: Optional[int],
    max_per_table: Optional[int] = None,
    default_capacity: int = DEFAULT_CAPACITY,
    default_seats: int = DEFAULT_SEATS_PER_TABLE,
) -> list[TableConfig]:
    """Configured tables, or ``ceil(capacity / seats)`` generated ones."""
    tables = parse_tables_config(tables_config)
    if tables:
        return tables
    if max_per_table is None and isinstance(tables_config, dict):
        max_per_table = as_index(tables_config.get("max_per_table"))
    return generate_tables(capacity or default_capacity, max_per_table or default_seats)
