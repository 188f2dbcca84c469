"""Text-generation capability consumed by the summarizer."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from slimctx.compaction.types import Message


@dataclass
class ModelResponse:
    """Response from a chat model. Only ``content`` is read."""

    content: str


@runtime_checkable
class ChatModel(Protocol):
    """Anything that turns a list of messages into generated text."""

    async def invoke(self, messages: list[Message]) -> ModelResponse:
        ...
