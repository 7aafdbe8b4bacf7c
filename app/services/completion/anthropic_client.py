"""Anthropic Messages API client."""

from typing import Any

from app.services.completion.base import CompletionResponse, HttpCompletionClient, token_count

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicCompletionClient(HttpCompletionClient):
    """Single-turn Messages API call; every text block of the reply is concatenated."""

    provider_key = "anthropic"

    def __init__(self, *, api_key: str, api_url: str = "https://api.anthropic.com/v1/messages", **kwargs: Any):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.api_url = api_url

    def _endpoint(self) -> str:
        return self.api_url

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def _build_body(self, prompt: str, max_tokens: int) -> dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _parse_body(self, data: dict[str, Any]) -> CompletionResponse:
        text = "".join(
            block.get("text", "")
            for block in data.get("content") or []
            if block.get("type") == "text"
        )
        usage = data.get("usage") or {}
        return CompletionResponse(
            text=text,
            model=data.get("model") or self.model,
            input_tokens=token_count(usage.get("input_tokens")),
            output_tokens=token_count(usage.get("output_tokens")),
        )
