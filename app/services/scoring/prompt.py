"""Relevance scoring prompt."""

import json

from app.services.scoring.types import ScoringInput

RESPONSE_SHAPE = {
    "relevance_score": "number 0-100",
    "matched_objectives": [
        {
            "objective_index": 0,
            "match_score": "number 0-100",
            "explanation": "Why this contact matches/doesn't match this objective",
        }
    ],
    "score_rationale": "2-3 sentence overall assessment",
    "talking_points": ["Point 1", "Point 2", "Point 3"],
}


def _format_weight(weight: float) -> str:
    return str(int(weight)) if float(weight).is_integer() else str(weight)


def build_scoring_prompt(data: ScoringInput) -> str:
    contact = data.contact
    lines = [
        f'Score this contact\'s relevance to the event "{data.event_title}".',
        "",
        "## Contact Profile",
        f"Name: {contact.full_name}",
    ]
    if contact.company:
        lines.append(f"Company: {contact.company}")
    if contact.title:
        lines.append(f"Title: {contact.title}")
    if contact.industry:
        lines.append(f"Industry: {contact.industry}")
    if contact.role_seniority:
        lines.append(f"Seniority: {contact.role_seniority}")
    if contact.ai_summary:
        lines.append(f"Summary: {contact.ai_summary}")
    if contact.tags:
        lines.append(f"Tags: {', '.join(contact.tags)}")

    lines.append("")
    lines.append("## Event Objectives (weighted, by index)")
    for index, objective in enumerate(data.objectives):
        lines.append(f"{index}. [Weight {_format_weight(objective.weight)}] {objective.objective_text}")

    lines.append("")
    lines.append("Respond in this exact JSON format (no markdown, just raw JSON):")
    lines.append(json.dumps(RESPONSE_SHAPE))
    lines.append("")
    lines.append(
        "Score guidelines: 80-100 = strong match, 60-79 = good match, 40-59 = moderate, "
        "20-39 = weak, 0-19 = poor match."
    )
    lines.append(
        "If you lack information about the contact, score conservatively (30-50) and note the "
        "data gap in rationale. Do not fabricate facts; use null for anything unknown."
    )
    return "\n".join(lines)
