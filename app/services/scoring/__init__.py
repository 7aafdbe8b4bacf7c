"""
Relevance scoring of contacts against weighted event objectives.
"""

from app.services.scoring.batch import ScoringBatch
from app.services.scoring.engine import ScoringEngine
from app.services.scoring.provider import LlmScoringProvider, ScoringProvider
from app.services.scoring.types import (
    ContactForScoring,
    MatchedObjective,
    ObjectiveForScoring,
    ScoringInput,
    ScoringOutcome,
    ScoringResult,
)

__all__ = [
    "ContactForScoring",
    "LlmScoringProvider",
    "MatchedObjective",
    "ObjectiveForScoring",
    "ScoringBatch",
    "ScoringEngine",
    "ScoringInput",
    "ScoringOutcome",
    "ScoringProvider",
    "ScoringResult",
]
