"""OpenAI-compatible chat completions client (OpenAI, vLLM, Groq, ...)."""

from typing import Any, Optional

from app.services.completion.base import CompletionResponse, HttpCompletionClient, token_count

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAICompatibleCompletionClient(HttpCompletionClient):
    """Chat completions with a single user message; reads ``choices[0].message.content``."""

    provider_key = "openai"

    def __init__(self, *, api_key: Optional[str], base_url: Optional[str] = None, temperature: float = 0.2, **kwargs: Any):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        if not self.base_url.endswith("/v1"):
            self.base_url = f"{self.base_url}/v1"
        self.temperature = temperature

    def _endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _build_body(self, prompt: str, max_tokens: int) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": self.temperature,
        }

    def _parse_body(self, data: dict[str, Any]) -> CompletionResponse:
        choices = data.get("choices") or []
        content = choices[0]["message"].get("content") if choices else None
        usage = data.get("usage") or {}
        return CompletionResponse(
            text=content if isinstance(content, str) else "",
            model=data.get("model") or self.model,
            input_tokens=token_count(usage.get("prompt_tokens")),
            output_tokens=token_count(usage.get("completion_tokens")),
        )
