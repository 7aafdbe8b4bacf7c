"""
Enrichment reply parser.

An unparseable reply is not an error: the trimmed text becomes the summary
and every other field stays unknown.
"""

from typing import Optional

from pydantic import ValidationError

from app.schemas.ai_reply import EnrichmentReply
from app.services.ai_json import clean_str, extract_first_json_object
from app.services.enrichment.types import EnrichedFields


def fallback_enrichment(text: Optional[str]) -> EnrichedFields:
    return EnrichedFields(ai_summary=clean_str(text))


def parse_enrichment_response(text: Optional[str]) -> tuple[EnrichedFields, bool]:
    """Return (fields, used_fallback)."""
    parsed = extract_first_json_object(text)
    if parsed is None:
        return fallback_enrichment(text), True
    try:
        reply = EnrichmentReply.model_validate(parsed)
    except ValidationError:
        return fallback_enrichment(text), True

    return EnrichedFields(**reply.model_dump(), raw_data=parsed), False
