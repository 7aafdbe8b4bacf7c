"""Scoring providers."""

from typing import Protocol

from app.services.llm_provider import LlmProvider
from app.services.scoring.parser import parse_scoring_response
from app.services.scoring.prompt import build_scoring_prompt
from app.services.scoring.types import ScoringInput, ScoringOutcome


class ScoringProvider(Protocol):
    key: str

    async def score(self, data: ScoringInput) -> ScoringOutcome:
        ...


class LlmScoringProvider(LlmProvider):
    """One completion call per contact; parse fallbacks still count as success."""

    key = "llm_scoring"
    max_tokens_setting = "SCORING_MAX_TOKENS"

    async def score(self, data: ScoringInput) -> ScoringOutcome:
        response, error = await self._complete(build_scoring_prompt(data))
        if response is None:
            return ScoringOutcome.failure(error or "Scoring failed", provider=self.key, model=self.model)

        result = parse_scoring_response(response.text, data.objectives)
        return ScoringOutcome.ok(
            result,
            provider=self.key,
            raw_payload=response.text,
            cost_cents=self._cost(response),
            model=response.model,
            used_fallback=result.is_fallback,
        )
