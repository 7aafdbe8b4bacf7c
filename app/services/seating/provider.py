"""Seating and introduction providers (one batched completion call each)."""

from typing import Protocol

from app.services.llm_provider import LlmProvider
from app.services.seating.parser import parse_introduction_response, parse_seating_response
from app.services.seating.prompt import build_introduction_prompt, build_seating_prompt
from app.services.seating.types import IntroductionInput, IntroductionOutcome, SeatingInput, SeatingOutcome


class SeatingProvider(Protocol):
    key: str

    async def suggest_seating(self, data: SeatingInput) -> SeatingOutcome:
        ...

    async def suggest_introductions(self, data: IntroductionInput) -> IntroductionOutcome:
        ...


class LlmSeatingProvider(LlmProvider):
    key = "llm_seating"
    max_tokens_setting = "SEATING_MAX_TOKENS"

    async def suggest_seating(self, data: SeatingInput) -> SeatingOutcome:
        response, error = await self._complete(build_seating_prompt(data))
        if response is None:
            return SeatingOutcome.failure(error or "Seating generation failed", provider=self.key, model=self.model)

        plan = parse_seating_response(response.text, data.guests, data.tables)
        return SeatingOutcome.ok(
            plan,
            provider=self.key,
            raw_payload=response.text,
            cost_cents=self._cost(response),
            model=response.model,
            used_fallback=plan.is_fallback,
        )

    async def suggest_introductions(self, data: IntroductionInput) -> IntroductionOutcome:
        response, error = await self._complete(build_introduction_prompt(data))
        if response is None:
            return IntroductionOutcome.failure(
                error or "Introduction generation failed", provider=self.key, model=self.model
            )

        plan = parse_introduction_response(response.text, data.guests, data.max_pairings)
        return IntroductionOutcome.ok(
            plan,
            provider=self.key,
            raw_payload=response.text,
            cost_cents=self._cost(response),
            model=response.model,
            used_fallback=plan.is_fallback,
        )
