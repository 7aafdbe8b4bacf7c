"""
Seating plans and introduction pairings for an event's guest list.
"""

from app.services.seating.fallback import fallback_seating
from app.services.seating.optimizer import IntroductionRun, SeatingOptimizer, SeatingRun
from app.services.seating.provider import LlmSeatingProvider, SeatingProvider
from app.services.seating.types import (
    IntroductionInput,
    IntroductionOutcome,
    SeatingGuest,
    SeatingInput,
    SeatingOutcome,
    SeatingStrategy,
    TableConfig,
)

__all__ = [
    "IntroductionInput",
    "IntroductionOutcome",
    "IntroductionRun",
    "LlmSeatingProvider",
    "SeatingGuest",
    "SeatingInput",
    "SeatingOptimizer",
    "SeatingOutcome",
    "SeatingProvider",
    "SeatingRun",
    "SeatingStrategy",
    "TableConfig",
    "fallback_seating",
]
