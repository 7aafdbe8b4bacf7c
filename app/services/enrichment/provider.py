"""
Enrichment providers.

``EnrichmentProvider`` is the contract the pipeline depends on; the LLM
implementation synthesizes a profile from the model's own knowledge.
"""

from typing import Protocol

from app.services.enrichment.parser import parse_enrichment_response
from app.services.enrichment.prompt import build_enrichment_prompt
from app.services.enrichment.types import EnrichmentInput, EnrichmentResult
from app.services.llm_provider import LlmProvider


class EnrichmentProvider(Protocol):
    key: str

    async def enrich(self, data: EnrichmentInput) -> EnrichmentResult:
        ...


class LlmEnrichmentProvider(LlmProvider):
    """Profile enrichment from a single completion call."""

    key = "llm_enrichment"
    max_tokens_setting = "ENRICHMENT_MAX_TOKENS"

    async def enrich(self, data: EnrichmentInput) -> EnrichmentResult:
        response, error = await self._complete(build_enrichment_prompt(data))
        if response is None:
            return EnrichmentResult.failure(error or "Enrichment failed", provider=self.key, model=self.model)

        fields, used_fallback = parse_enrichment_response(response.text)
        return EnrichmentResult.ok(
            fields,
            provider=self.key,
            raw_payload=response.text,
            cost_cents=self._cost(response),
            model=response.model,
            used_fallback=used_fallback,
        )
