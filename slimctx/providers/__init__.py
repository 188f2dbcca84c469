"""Chat model capability and implementations."""

from slimctx.providers.base import ChatModel, ModelResponse
from slimctx.providers.litellm_provider import LiteLLMChatModel

__all__ = ["ChatModel", "ModelResponse", "LiteLLMChatModel"]
