"""Tests for CompactionService and compressor construction."""

import pytest

from slimctx.compaction.pruning import TrimCompressor
from slimctx.compaction.service import CompactionService, build_compressor, build_estimator
from slimctx.compaction.summarizer import SummarizeCompressor
from slimctx.compaction.types import Message
from slimctx.config.schema import CompactionConfig, ProviderConfig
from slimctx.providers.base import ModelResponse
from slimctx.providers.litellm_provider import LiteLLMChatModel


class FakeModel:
    def __init__(self, text: str = "fake summary"):
        self.text = text
        self.calls = 0

    async def invoke(self, messages: list[Message]) -> ModelResponse:
        self.calls += 1
        return ModelResponse(content=self.text)


def long_history(turns: int = 10) -> list[dict]:
    history = [{"role": "system", "content": "You are helpful."}]
    for i in range(turns):
        history.append({"role": "user", "content": f"question {i} " + "x" * 400})
        history.append({"role": "assistant", "content": f"answer {i} " + "y" * 400})
    history.append({"role": "user", "content": "latest question"})
    return history


# ── build_compressor ────────────────────────────────────────────────


class TestBuildCompressor:
    def test_trim(self):
        compressor = build_compressor(CompactionConfig(strategy="trim", min_recent_messages=3))
        assert isinstance(compressor, TrimCompressor)
        assert compressor.budget.min_recent_messages == 3

    def test_trim_strategy_default(self):
        compressor = build_compressor(CompactionConfig(strategy="trim"))
        assert compressor.budget.min_recent_messages == 2

    def test_summarize_with_model(self):
        model = FakeModel()
        compressor = build_compressor(CompactionConfig(prompt="custom"), model=model)
        assert isinstance(compressor, SummarizeCompressor)
        assert compressor.model is model
        assert compressor.summary_prompt == "custom"
        assert compressor.budget.min_recent_messages == 4

    def test_summarize_builds_litellm_model(self):
        provider = ProviderConfig(model="anthropic/claude-3-haiku", api_key="sk-test")
        compressor = build_compressor(CompactionConfig(), provider=provider)
        assert isinstance(compressor.model, LiteLLMChatModel)
        assert compressor.model.model == "anthropic/claude-3-haiku"
        assert compressor.model.api_key == "sk-test"

    def test_budget_from_config(self):
        compressor = build_compressor(
            CompactionConfig(strategy="trim", max_model_tokens=1000, threshold_percent=0.25)
        )
        assert compressor.budget.threshold_tokens == 250


class TestBuildEstimator:
    def test_heuristic_is_default(self):
        assert build_estimator(CompactionConfig()) is None

    def test_tiktoken(self):
        assert callable(build_estimator(CompactionConfig(estimator="tiktoken")))


# ── CompactionService ───────────────────────────────────────────────


class TestCompactionService:
    @pytest.mark.asyncio
    async def test_trim(self):
        service = CompactionService(CompactionConfig(strategy="trim", max_model_tokens=2000))
        history = long_history()
        result = await service.compact(history)

        assert result.compressed is True
        assert result.strategy == "trim"
        assert result.messages[0] == history[0]
        assert result.messages[-1] == history[-1]
        assert result.tokens_after < result.tokens_before
        assert result.tokens_after <= 1400
        assert result.messages_removed == len(history) - len(result.messages)

    @pytest.mark.asyncio
    async def test_summarize(self):
        model = FakeModel("the gist")
        service = CompactionService(CompactionConfig(max_model_tokens=2000), model=model)
        history = long_history()
        result = await service.compact(history)

        assert model.calls == 1
        assert result.strategy == "summarize"
        assert len(result.messages) == 6
        assert result.messages[0] == history[0]
        assert result.messages[1]["role"] == "system"
        assert result.messages[1]["content"].endswith("the gist")
        assert result.messages[2:] == history[-4:]

    @pytest.mark.asyncio
    async def test_no_op_returns_input(self):
        service = CompactionService(CompactionConfig(strategy="trim"))
        history = [{"role": "user", "content": "hi"}]
        result = await service.compact(history)
        assert result.compressed is False
        assert result.messages is history
        assert result.messages_removed == 0
        assert result.tokens_before == result.tokens_after

    @pytest.mark.asyncio
    async def test_tail_covering_history_is_not_compaction(self):
        service = CompactionService(
            CompactionConfig(strategy="trim", max_model_tokens=10, min_recent_messages=50)
        )
        history = [{"role": "user", "content": "x" * 400}, {"role": "user", "content": "y" * 400}]
        result = await service.compact(history)
        assert result.compressed is False
        assert result.messages is history
        assert result.messages_removed == 0

    @pytest.mark.asyncio
    async def test_equal_copy_is_not_compaction(self):
        class CopyingCompressor(TrimCompressor):
            def compress(self, messages):
                return list(messages)

        service = CompactionService(compressor=CopyingCompressor())
        history = [{"role": "user", "content": "hi"}]
        result = await service.compact(history)
        assert result.compressed is False
        assert result.messages is history

    @pytest.mark.asyncio
    async def test_gate_blocks_mid_tool_use(self):
        service = CompactionService(CompactionConfig(strategy="trim", max_model_tokens=100))
        history = long_history() + [{
            "role": "assistant",
            "content": None,
            "tool_calls": [{"id": "c1", "type": "function", "function": {"name": "f", "arguments": "{}"}}],
        }]
        assert await service.compress_history(history) is history

    @pytest.mark.asyncio
    async def test_tool_metadata_survives(self):
        history = [
            {"role": "user", "content": "x" * 400},
            {"role": "assistant", "content": "y" * 400},
            {
                "role": "assistant",
                "content": None,
                "tool_calls": [{"id": "c1", "type": "function", "function": {"name": "f", "arguments": "{}"}}],
            },
            {"role": "tool", "content": "42", "tool_call_id": "c1"},
            {"role": "user", "content": "thanks"},
        ]
        service = CompactionService(
            CompactionConfig(strategy="trim", max_model_tokens=100, min_recent_messages=3)
        )
        messages = await service.compress_history(history)
        assert messages == history[2:]

    @pytest.mark.asyncio
    async def test_custom_compressor(self):
        compressor = TrimCompressor()
        service = CompactionService(compressor=compressor)
        assert service.compressor is compressor
        assert service.strategy == "trim"
