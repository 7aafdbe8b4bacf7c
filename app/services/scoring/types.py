"""Typed inputs and outputs of the relevance scoring provider."""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from app.services.llm_provider import ProviderResult

FALLBACK_SCORE = 50
FALLBACK_EXPLANATION = "insufficient data"
FALLBACK_RATIONALE = "Could not generate detailed scoring due to parsing error. Manual review recommended."


@dataclass
class ObjectiveForScoring:
    id: Optional[UUID]
    objective_text: str
    weight: float = 1.0


@dataclass
class ContactForScoring:
    full_name: str
    id: Optional[UUID] = None
    company: Optional[str] = None
    title: Optional[str] = None
    industry: Optional[str] = None
    role_seniority: Optional[str] = None
    ai_summary: Optional[str] = None
    tags: list[str] = field(default_factory=list)


@dataclass
class ScoringInput:
    contact: ContactForScoring
    objectives: list[ObjectiveForScoring]
    event_title: str = "Event"


@dataclass
class MatchedObjective:
    objective_id: Optional[UUID]
    objective_text: str
    match_score: int
    explanation: str

    def to_json(self) -> dict:
        return {
            "objective_id": str(self.objective_id) if self.objective_id else None,
            "objective_text": self.objective_text,
            "match_score": self.match_score,
            "explanation": self.explanation,
        }


@dataclass
class ScoringResult:
    relevance_score: int
    matched_objectives: list[MatchedObjective]
    score_rationale: str
    talking_points: list[str]
    is_fallback: bool = False


class ScoringOutcome(ProviderResult[ScoringResult]):
    """Outcome of scoring one contact against an event."""
