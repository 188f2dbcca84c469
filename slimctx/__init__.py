"""
slimctx - token-budgeted compaction for chat histories.
"""

__version__ = "0.1.0"

from slimctx.compaction import (
    BudgetConfig,
    Message,
    SummarizeCompressor,
    SummarizeConfig,
    TrimCompressor,
    TrimConfig,
    should_allow_compression,
)
from slimctx.providers import ChatModel, LiteLLMChatModel, ModelResponse
from slimctx.compaction.service import CompactionService

__all__ = [
    "__version__",
    "Message",
    "BudgetConfig",
    "TrimConfig",
    "SummarizeConfig",
    "TrimCompressor",
    "SummarizeCompressor",
    "should_allow_compression",
    "ChatModel",
    "ModelResponse",
    "LiteLLMChatModel",
    "CompactionService",
]
