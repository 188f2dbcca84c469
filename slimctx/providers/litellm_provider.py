"""LiteLLM-backed chat model for summarization."""

import os
from typing import Any

import litellm
from litellm import acompletion
from loguru import logger

from slimctx.compaction.types import Message
from slimctx.providers.base import ModelResponse


class LiteLLMChatModel:
    """
    Chat model using LiteLLM for multi-provider support.

    Works with OpenAI, Anthropic, OpenRouter, Gemini and any other provider
    LiteLLM understands. Errors from the provider are raised to the caller.
    """

    def __init__(
        self,
        model: str = "openai/gpt-4o-mini",
        api_key: str | None = None,
        api_base: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.2,
    ):
        self.model = model
        self.api_key = api_key or None
        self.api_base = api_base
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.request_timeout_seconds = float(
            os.getenv("SLIMCTX_LLM_TIMEOUT_SECONDS", "45")
        )

        # Detect OpenRouter by api_key prefix or explicit api_base
        self.is_openrouter = bool(
            (api_key and api_key.startswith("sk-or-"))
            or (api_base and "openrouter" in api_base)
        )

        # Disable LiteLLM logging noise
        litellm.suppress_debug_info = True

    def _resolve_model(self) -> str:
        model = self.model
        if self.is_openrouter and not model.startswith("openrouter/"):
            model = f"openrouter/{model}"
        return model

    async def invoke(self, messages: list[Message]) -> ModelResponse:
        """
        Send a chat completion request via LiteLLM.

        Args:
            messages: Prompt messages. Only role and content are sent.

        Returns:
            ModelResponse with the generated text.
        """
        kwargs: dict[str, Any] = {
            "model": self._resolve_model(),
            "messages": [
                {"role": "user" if m.role == "human" else m.role, "content": m.content}
                for m in messages
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "timeout": self.request_timeout_seconds,
        }

        # Pass api_base and api_key directly rather than via os.environ
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if self.api_key:
            kwargs["api_key"] = self.api_key

        logger.debug(f"Summarization request to {kwargs['model']}")
        response = await acompletion(**kwargs)
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> ModelResponse:
        """Pull the generated text out of a LiteLLM response."""
        message = response.choices[0].message
        return ModelResponse(content=message.content or "")
