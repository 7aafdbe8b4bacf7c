"""Typed inputs and outputs of the seating and introduction providers."""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from app.services.llm_provider import ProviderResult


class SeatingStrategy:
    MIXED_INTERESTS = "MIXED_INTERESTS"
    SIMILAR_INTERESTS = "SIMILAR_INTERESTS"
    SCORE_BALANCED = "SCORE_BALANCED"

    ALL = (MIXED_INTERESTS, SIMILAR_INTERESTS, SCORE_BALANCED)
    DEFAULT = MIXED_INTERESTS


@dataclass(frozen=True)
class TableConfig:
    number: int
    seats: int


@dataclass
class SeatingGuest:
    contact_id: UUID
    full_name: str
    company: Optional[str] = None
    title: Optional[str] = None
    industry: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    relevance_score: Optional[int] = None
    score_rationale: Optional[str] = None
    talking_points: list[str] = field(default_factory=list)


@dataclass
class SeatingAssignment:
    contact_id: UUID
    table_number: int
    seat_number: Optional[int]
    rationale: str
    confidence: float


@dataclass
class IntroductionSuggestion:
    contact_a_id: UUID
    contact_b_id: UUID
    reason: str
    mutual_interest: str
    priority: int


@dataclass
class SeatingInput:
    guests: list[SeatingGuest]
    tables: list[TableConfig]
    event_title: str = "Event"
    strategy: str = SeatingStrategy.DEFAULT


@dataclass
class IntroductionInput:
    guests: list[SeatingGuest]
    objectives: list[str] = field(default_factory=list)
    event_title: str = "Event"
    max_pairings: int = 20


@dataclass
class SeatingPlan:
    assignments: list[SeatingAssignment]
    is_fallback: bool = False


@dataclass
class IntroductionPlan:
    pairings: list[IntroductionSuggestion]
    is_fallback: bool = False


class SeatingOutcome(ProviderResult[SeatingPlan]):
    """Outcome of one batched seating request."""


class IntroductionOutcome(ProviderResult[IntroductionPlan]):
    """Outcome of one batched introduction request."""
