"""Enrichment prompt."""

import json

from app.schemas.ai_reply import ROLE_SENIORITY_VALUES
from app.services.enrichment.types import EnrichmentInput

RESPONSE_SHAPE = {
    "ai_summary": "A 2-3 sentence professional summary of this person",
    "title": "Current job title",
    "company": "Current company",
    "industry": "Their industry",
    "role_seniority": " | ".join(ROLE_SENIORITY_VALUES),
    "company_info": "Brief about their company",
    "notable_facts": ["Fact 1", "Fact 2"],
    "tags": ["Short topical tag"],
}


def build_enrichment_prompt(data: EnrichmentInput) -> str:
    lines = ["Analyze this professional contact and provide enrichment data."]
    lines.append(f"Name: {data.full_name}")
    if data.emails:
        lines.append(f"Email: {data.emails[0]}")
    if data.company:
        lines.append(f"Company: {data.company}")
    if data.title:
        lines.append(f"Title: {data.title}")
    if data.linkedin_url:
        lines.append(f"LinkedIn: {data.linkedin_url}")

    lines.append("")
    lines.append("Respond in this exact JSON format (no markdown, just raw JSON):")
    lines.append(json.dumps(RESPONSE_SHAPE))
    lines.append("")
    lines.append(
        "If you cannot find reliable information for a field, use null. "
        "Only include information you are reasonably confident about. Do not fabricate details."
    )
    return "\n".join(lines)
