"""Compaction service for compressing OpenAI-style chat histories."""

import inspect
from typing import Any

from loguru import logger

from slimctx.adapters.openai import from_messages, to_messages
from slimctx.compaction.estimator import estimate_messages_tokens, tiktoken_estimator
from slimctx.compaction.pruning import TrimCompressor
from slimctx.compaction.summarizer import SummarizeCompressor
from slimctx.compaction.types import (
    CompactionResult,
    SummarizeConfig,
    TokenEstimator,
    TrimConfig,
)
from slimctx.config.schema import CompactionConfig, ProviderConfig
from slimctx.providers.base import ChatModel
from slimctx.providers.litellm_provider import LiteLLMChatModel

Compressor = TrimCompressor | SummarizeCompressor


def build_estimator(config: CompactionConfig) -> TokenEstimator | None:
    """Pick the token estimator named in the config. None means the heuristic."""
    if config.estimator == "tiktoken":
        return tiktoken_estimator(config.encoding)
    return None


def build_compressor(
    config: CompactionConfig,
    model: ChatModel | None = None,
    provider: ProviderConfig | None = None,
) -> Compressor:
    """
    Build the compressor for the configured strategy.

    Args:
        config: Compaction configuration.
        model: Chat model for summarization. Built from ``provider`` if omitted.
        provider: Provider settings used when no model is given.

    Returns:
        A TrimCompressor or SummarizeCompressor.
    """
    budget = {
        "max_model_tokens": config.max_model_tokens,
        "threshold_percent": config.threshold_percent,
        "estimate_tokens": build_estimator(config),
        "min_recent_messages": config.min_recent_messages,
    }

    if config.strategy == "trim":
        return TrimCompressor(TrimConfig(**budget))

    if model is None:
        provider = provider or ProviderConfig()
        model = LiteLLMChatModel(
            model=provider.model,
            api_key=provider.api_key,
            api_base=provider.api_base,
            max_tokens=provider.max_tokens,
            temperature=provider.temperature,
        )
    return SummarizeCompressor(SummarizeConfig(model=model, prompt=config.prompt, **budget))


class CompactionService:
    """
    Runs a compressor over OpenAI-style message dicts.

    Converts to canonical messages, compresses, converts back and reports
    what changed.
    """

    def __init__(
        self,
        config: CompactionConfig | None = None,
        model: ChatModel | None = None,
        compressor: Compressor | None = None,
        provider: ProviderConfig | None = None,
    ):
        """
        Initialize the compaction service.

        Args:
            config: Compaction configuration.
            model: Chat model for the summarize strategy.
            compressor: Ready-made compressor. Overrides ``config`` and ``model``.
            provider: Provider settings for building a default chat model.
        """
        self.config = config or CompactionConfig()
        self.compressor = compressor or build_compressor(self.config, model, provider)

    @property
    def strategy(self) -> str:
        if isinstance(self.compressor, TrimCompressor):
            return "trim"
        return "summarize"

    async def compact(self, raw_messages: list[dict[str, Any]]) -> CompactionResult:
        """
        Compact a message history.

        Args:
            raw_messages: OpenAI-style message dicts, oldest first.

        Returns:
            CompactionResult with the new messages and statistics.
        """
        messages = to_messages(raw_messages)
        estimate = self.compressor.budget.estimate_tokens
        tokens_before = estimate_messages_tokens(messages, estimate)

        compressed = self.compressor.compress(messages)
        if inspect.isawaitable(compressed):
            compressed = await compressed

        if compressed is messages or compressed == messages:
            return CompactionResult(
                messages=raw_messages,
                strategy=self.strategy,
                tokens_before=tokens_before,
                tokens_after=tokens_before,
                messages_removed=0,
            )

        tokens_after = estimate_messages_tokens(compressed, estimate)
        logger.info(
            f"Compacted context ({self.strategy}): "
            f"{len(messages)} -> {len(compressed)} messages, "
            f"~{tokens_before} -> ~{tokens_after} tokens"
        )

        return CompactionResult(
            messages=from_messages(compressed),
            strategy=self.strategy,
            tokens_before=tokens_before,
            tokens_after=tokens_after,
            messages_removed=max(0, len(messages) - len(compressed)),
            compressed=True,
        )

    async def compress_history(
        self, raw_messages: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Compact a message history and return only the messages."""
        result = await self.compact(raw_messages)
        return result.messages
