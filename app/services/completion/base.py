"""
Completion client contract and the shared HTTP retry loop.

A completion client sends one prompt to a hosted language model and returns
the reply text plus token usage. Clients raise ``CompletionError`` on
failure; providers one level up turn that into a failure result.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol

import httpx

from app.errors import CompletionError, CompletionRateLimitError
from app.services.ai_json import coerce_number

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504, 529}


@dataclass
class CompletionResponse:
    """Reply text and usage for one completion call."""

    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0


class CompletionClient(Protocol):
    """Anything that can turn a prompt into reply text."""

    model: str

    async def complete(self, prompt: str, max_tokens: int) -> CompletionResponse:
        ...


def estimate_cost_cents(
    response: CompletionResponse,
    input_cents_per_mtok: float,
    output_cents_per_mtok: float,
) -> int:
    """Whole cents for a call at the configured per-million-token rates."""
    cost = (
        response.input_tokens * input_cents_per_mtok / 1_000_000
        + response.output_tokens * output_cents_per_mtok / 1_000_000
    )
    return int(round(cost))


def token_count(value: Any) -> int:
    """Usage figure from a reply envelope; unreadable or negative counts read as 0."""
    return max(0, int(coerce_number(value)))


class HttpCompletionClient:
    """
    Base class for JSON-over-HTTP completion APIs.

    Subclasses build the request body and read the reply envelope; this class
    owns transport, retries on 429/5xx with linear backoff, and timing.
    """

    provider_key: str = "http"

    def __init__(
        self,
        *,
        model: str,
        timeout: float = 60.0,
        max_retries: int = 2,
        backoff_seconds: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleeper: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        self.model = model
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.backoff_seconds = backoff_seconds
        self.transport = transport
        self.sleeper = sleeper or asyncio.sleep

    def _endpoint(self) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def _headers(self) -> dict[str, str]:  # pragma: no cover - interface
        raise NotImplementedError

    def _build_body(self, prompt: str, max_tokens: int) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    def _parse_body(self, data: dict[str, Any]) -> CompletionResponse:  # pragma: no cover - interface
        raise NotImplementedError

    def _retry_delay(self, response: httpx.Response, attempt: int) -> float:
        retry_after = response.headers.get("Retry-After")
        try:
            base = float(retry_after) if retry_after else self.backoff_seconds
        except ValueError:
            base = self.backoff_seconds
        return base * (attempt + 1)

    async def complete(self, prompt: str, max_tokens: int) -> CompletionResponse:
        body = self._build_body(prompt, max_tokens)
        started = time.monotonic()

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    response = await client.post(self._endpoint(), json=body, headers=self._headers())
                except httpx.RequestError as exc:
                    raise CompletionError(
                        f"{self.provider_key} request failed (timeout or connection error): {exc}"
                    ) from exc

                if response.status_code in RETRYABLE_STATUS and attempt < self.max_retries:
                    delay = self._retry_delay(response, attempt)
                    logger.warning(
                        "Completion call returned %s, retrying in %.1fs (attempt %d/%d)",
                        response.status_code,
                        delay,
                        attempt + 1,
                        self.max_retries,
                    )
                    await self.sleeper(delay)
                    continue

                if response.status_code == 429:
                    raise CompletionRateLimitError(
                        f"{self.provider_key} rate limited the request",
                        status_code=429,
                    )
                if response.status_code >= 400:
                    logger.warning(
                        "Completion API error %s: %s",
                        response.status_code,
                        (response.text or "")[:500],
                    )
                    raise CompletionError(
                        f"{self.provider_key} returned {response.status_code}",
                        status_code=response.status_code,
                    )

                try:
                    data = response.json()
                except ValueError as exc:
                    raise CompletionError(f"{self.provider_key} returned a non-JSON body") from exc

                try:
                    result = self._parse_body(data)
                except (KeyError, TypeError, IndexError, AttributeError, ValueError) as exc:
                    raise CompletionError(f"{self.provider_key} returned an unexpected response format") from exc

                result.latency_ms = int((time.monotonic() - started) * 1000)
                logger.info(
                    "Completion ok provider=%s model=%s latency_ms=%d input_tokens=%d output_tokens=%d",
                    self.provider_key,
                    result.model,
                    result.latency_ms,
                    result.input_tokens,
                    result.output_tokens,
                )
                return result

        # Unreachable: the final attempt either returns or raises
        raise CompletionError(f"{self.provider_key} exhausted retries")
