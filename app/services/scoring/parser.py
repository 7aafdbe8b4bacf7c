"""
Scoring reply parser.

Whatever the model sends back, the result satisfies: relevance_score and
every match_score in [0, 100], at most five talking points, and matched
objectives that point at real objectives. Unparseable replies produce the
fallback result, which is flagged so it is never mistaken for a real 50.
"""

from typing import Optional, Sequence

from pydantic import ValidationError

from app.schemas.ai_reply import MatchedObjectiveReply, ScoringReply
from app.services.ai_json import extract_first_json_object
from app.services.scoring.types import (
    FALLBACK_EXPLANATION,
    FALLBACK_RATIONALE,
    FALLBACK_SCORE,
    MatchedObjective,
    ObjectiveForScoring,
    ScoringResult,
)


def fallback_scoring_result(objectives: Sequence[ObjectiveForScoring]) -> ScoringResult:
    return ScoringResult(
        relevance_score=FALLBACK_SCORE,
        matched_objectives=[
            MatchedObjective(
                objective_id=objective.id,
                objective_text=objective.objective_text,
                match_score=FALLBACK_SCORE,
                explanation=FALLBACK_EXPLANATION,
            )
            for objective in objectives
        ],
        score_rationale=FALLBACK_RATIONALE,
        talking_points=[],
        is_fallback=True,
    )


def _map_matched_objectives(
    entries: Sequence[MatchedObjectiveReply],
    objectives: Sequence[ObjectiveForScoring],
) -> list[MatchedObjective]:
    matched = []
    for position, entry in enumerate(entries):
        index = position if entry.objective_index is None else entry.objective_index
        if index < 0 or index >= len(objectives):
            continue
        objective = objectives[index]
        matched.append(
            MatchedObjective(
                objective_id=objective.id,
                objective_text=objective.objective_text,
                match_score=entry.match_score,
                explanation=entry.explanation,
            )
        )
    # Stable: ties keep the model's order
    matched.sort(key=lambda item: item.match_score, reverse=True)
    return matched


def parse_scoring_response(text: Optional[str], objectives: Sequence[ObjectiveForScoring]) -> ScoringResult:
    parsed = extract_first_json_object(text)
    if parsed is None:
        return fallback_scoring_result(objectives)
    try:
        reply = ScoringReply.model_validate(parsed)
    except ValidationError:
        return fallback_scoring_result(objectives)

    return ScoringResult(
        relevance_score=reply.relevance_score,
        matched_objectives=_map_matched_objectives(reply.matched_objectives, objectives),
        score_rationale=reply.score_rationale,
        talking_points=reply.talking_points,
    )
