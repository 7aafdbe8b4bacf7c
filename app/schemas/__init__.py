"""
Schemas package.

Pydantic request/response models for the HTTP API.
"""

from app.schemas.ai_job import (
    AIJobRead,
    EnrichmentJobCreate,
    IntroductionJobCreate,
    ScoringJobCreate,
    SeatingJobCreate,
)
from app.schemas.guest_score import GuestScoreRead
from app.schemas.seating import (
    IntroductionPairingRead,
    SeatingApplyRequest,
    SeatingApplyResult,
    SeatingAssignmentRead,
    SeatingSuggestionRead,
)

__all__ = [
    "AIJobRead",
    "EnrichmentJobCreate",
    "GuestScoreRead",
    "IntroductionPairingRead",
    "IntroductionJobCreate",
    "ScoringJobCreate",
    "SeatingApplyRequest",
    "SeatingApplyResult",
    "SeatingAssignmentRead",
    "SeatingSuggestionRead",
    "SeatingJobCreate",
]
