"""
Provider result type and the shared LLM provider base.

Providers wrap one completion call per input (or per batch). They never
raise for expected failures: transport errors, rate limits and missing
replies come back as ``result.success is False`` with ``error`` set.
"""

import logging
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from app.core.config import Settings, settings as default_settings
from app.errors import CompletionError
from app.services.completion import CompletionClient, CompletionResponse, estimate_cost_cents

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT")


@dataclass
class ProviderResult(Generic[PayloadT]):
    """Success payload or structured failure returned by a provider."""

    success: bool
    provider: str
    payload: Optional[PayloadT] = None
    raw_payload: Optional[str] = None
    cost_cents: int = 0
    model: Optional[str] = None
    used_fallback: bool = False
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(
        cls,
        payload: PayloadT,
        *,
        provider: str,
        raw_payload: Optional[str] = None,
        cost_cents: int = 0,
        model: Optional[str] = None,
        used_fallback: bool = False,
    ):
        return cls(
            success=True,
            provider=provider,
            payload=payload,
            raw_payload=raw_payload,
            cost_cents=cost_cents,
            model=model,
            used_fallback=used_fallback,
        )

    @classmethod
    def failure(
        cls,
        error: str,
        *,
        provider: str,
        code: str = "provider_error",
        model: Optional[str] = None,
        raw_payload: Optional[str] = None,
    ):
        return cls(
            success=False,
            provider=provider,
            error=error,
            error_code=code,
            model=model,
            raw_payload=raw_payload,
        )


class LlmProvider:
    """Base for providers backed by a ``CompletionClient``."""

    key: str = "llm"
    # Settings attribute holding this provider's output token budget
    max_tokens_setting: str = "ENRICHMENT_MAX_TOKENS"

    def __init__(
        self,
        client: CompletionClient,
        *,
        max_tokens: int = 1024,
        input_cents_per_mtok: float = 0.0,
        output_cents_per_mtok: float = 0.0,
    ):
        self.client = client
        self.max_tokens = max_tokens
        self.input_cents_per_mtok = input_cents_per_mtok
        self.output_cents_per_mtok = output_cents_per_mtok

    @property
    def model(self) -> Optional[str]:
        return getattr(self.client, "model", None)

    async def _complete(self, prompt: str) -> tuple[Optional[CompletionResponse], Optional[str]]:
        """Run one completion; returns (response, None) or (None, error message)."""
        try:
            response = await self.client.complete(prompt, self.max_tokens)
        except CompletionError as exc:
            logger.warning("Completion failed provider=%s error=%s", self.key, exc)
            return None, str(exc) or "Completion failed"
        return response, None

    def _cost(self, response: CompletionResponse) -> int:
        return estimate_cost_cents(response, self.input_cents_per_mtok, self.output_cents_per_mtok)

    @classmethod
    def from_settings(cls, client: CompletionClient, config: Optional[Settings] = None):
        """Build the provider with token budget and pricing from ``settings``."""
        config = config or default_settings
        return cls(
            client,
            max_tokens=getattr(config, cls.max_tokens_setting),
            input_cents_per_mtok=config.AI_INPUT_COST_CENTS_PER_MTOK,
            output_cents_per_mtok=config.AI_OUTPUT_COST_CENTS_PER_MTOK,
        )
