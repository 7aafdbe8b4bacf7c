"""
Contact enrichment.

Providers implement ``EnrichmentProvider``; ``EnrichmentPipeline`` runs a job.
"""

from app.services.enrichment.pipeline import EnrichmentPipeline
from app.services.enrichment.provider import EnrichmentProvider, LlmEnrichmentProvider
from app.services.enrichment.types import EnrichedFields, EnrichmentInput, EnrichmentResult

__all__ = [
    "EnrichedFields",
    "EnrichmentInput",
    "EnrichmentPipeline",
    "EnrichmentProvider",
    "EnrichmentResult",
    "LlmEnrichmentProvider",
]
