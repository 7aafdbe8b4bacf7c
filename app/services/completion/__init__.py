"""
Completion clients for hosted language models.

Use ``build_completion_client`` to get a client for the configured provider.
A new client is built per orchestrator run; nothing is cached process-wide.
"""

from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.errors import ProviderConfigError
from app.services.completion.anthropic_client import AnthropicCompletionClient
from app.services.completion.base import (
    CompletionClient,
    CompletionResponse,
    HttpCompletionClient,
    estimate_cost_cents,
)
from app.services.completion.openai_compatible import OpenAICompatibleCompletionClient

__all__ = [
    "AnthropicCompletionClient",
    "CompletionClient",
    "CompletionResponse",
    "HttpCompletionClient",
    "OpenAICompatibleCompletionClient",
    "build_completion_client",
    "estimate_cost_cents",
]


def build_completion_client(config: Optional[Settings] = None, **client_kwargs) -> CompletionClient:
    """
    Build the completion client selected by ``AI_PROVIDER``.

    ``auto`` prefers Anthropic when its key is set, then any OpenAI-compatible
    endpoint. Raises ProviderConfigError when nothing usable is configured.
    """
    config = config or default_settings
    provider = (config.AI_PROVIDER or "auto").strip().lower()
    common = {
        "timeout": config.AI_TIMEOUT_SECONDS,
        "max_retries": config.AI_MAX_RETRIES,
        **client_kwargs,
    }

    if provider == "auto":
        if config.ANTHROPIC_API_KEY:
            provider = "anthropic"
        elif config.OPENAI_API_KEY or config.CHAT_API_BASE_URL:
            provider = "openai"
        else:
            raise ProviderConfigError(
                "No completion provider configured: set ANTHROPIC_API_KEY, OPENAI_API_KEY or CHAT_API_BASE_URL"
            )

    if provider == "anthropic":
        if not config.ANTHROPIC_API_KEY:
            raise ProviderConfigError("ANTHROPIC_API_KEY is required for AI_PROVIDER=anthropic")
        return AnthropicCompletionClient(
            api_key=config.ANTHROPIC_API_KEY,
            api_url=config.ANTHROPIC_API_URL,
            model=config.ANTHROPIC_MODEL,
            **common,
        )

    if provider == "openai":
        if not (config.OPENAI_API_KEY or config.CHAT_API_BASE_URL):
            raise ProviderConfigError("OPENAI_API_KEY or CHAT_API_BASE_URL is required for AI_PROVIDER=openai")
        return OpenAICompatibleCompletionClient(
            api_key=config.OPENAI_API_KEY,
            base_url=config.CHAT_API_BASE_URL,
            model=config.CHAT_MODEL or "gpt-4o-mini",
            **common,
        )

    raise ProviderConfigError(f"Unknown AI_PROVIDER: {config.AI_PROVIDER}")
