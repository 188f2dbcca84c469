"""Compaction engine for conversation history."""

from slimctx.compaction.budget import (
    compute_threshold_tokens,
    normalize_budget_config,
    should_allow_compression,
)
from slimctx.compaction.estimator import (
    estimate_message_tokens,
    estimate_messages_tokens,
    tiktoken_estimator,
)
from slimctx.compaction.pruning import TrimCompressor
from slimctx.compaction.summarizer import DEFAULT_SUMMARY_PROMPT, SummarizeCompressor
from slimctx.compaction.types import (
    BudgetConfig,
    CompactionResult,
    Message,
    NormalizedBudgetConfig,
    Role,
    SummarizeConfig,
    TokenEstimator,
    TrimConfig,
)

__all__ = [
    # Estimator
    "estimate_message_tokens",
    "estimate_messages_tokens",
    "tiktoken_estimator",
    # Budget
    "normalize_budget_config",
    "compute_threshold_tokens",
    "should_allow_compression",
    # Strategies
    "TrimCompressor",
    "SummarizeCompressor",
    "DEFAULT_SUMMARY_PROMPT",
    # Types
    "Message",
    "Role",
    "TokenEstimator",
    "BudgetConfig",
    "TrimConfig",
    "SummarizeConfig",
    "NormalizedBudgetConfig",
    "CompactionResult",
]
