"""Types for the compaction engine."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from slimctx.providers.base import ChatModel


Role = Literal["system", "user", "human", "assistant", "tool"]

USER_ROLES: frozenset[str] = frozenset({"user", "human"})


@dataclass(frozen=True)
class Message:
    """Canonical chat message.

    ``metadata`` is an opaque bag owned by whichever adapter produced the
    message. The engine copies it through untouched.
    """

    role: Role
    content: str
    metadata: Mapping[str, Any] | None = None


TokenEstimator = Callable[[Message], int]


@dataclass(frozen=True, kw_only=True)
class BudgetConfig:
    """Token budget shared by all strategies. ``None`` means use the default."""

    # Model's maximum context window
    max_model_tokens: int | None = None

    # Share of the window (0-1) above which compaction triggers
    threshold_percent: float | None = None

    # Per-message token estimator
    estimate_tokens: TokenEstimator | None = None

    # Messages at the end of the history that are always kept
    min_recent_messages: int | None = None


@dataclass(frozen=True, kw_only=True)
class TrimConfig(BudgetConfig):
    """Configuration for the trimming strategy."""


@dataclass(frozen=True, kw_only=True)
class SummarizeConfig(BudgetConfig):
    """Configuration for the summarizing strategy."""

    model: ChatModel
    prompt: str | None = None


def compute_threshold_tokens(max_model_tokens: int, threshold_percent: float) -> int:
    """Token count above which compaction triggers."""
    return math.floor(max_model_tokens * threshold_percent)


@dataclass(frozen=True)
class NormalizedBudgetConfig:
    """Budget with every default resolved."""

    max_model_tokens: int
    threshold_percent: float
    estimate_tokens: TokenEstimator
    min_recent_messages: int

    @property
    def threshold_tokens(self) -> int:
        """Token count above which compaction triggers."""
        return compute_threshold_tokens(self.max_model_tokens, self.threshold_percent)


@dataclass
class CompactionResult:
    """Result of a compaction run through the service layer."""

    messages: list[dict[str, Any]]
    strategy: str
    tokens_before: int
    tokens_after: int
    messages_removed: int
    compressed: bool = field(default=False)


# Defaults
DEFAULT_MAX_MODEL_TOKENS = 8192
DEFAULT_THRESHOLD_PERCENT = 0.7
DEFAULT_MIN_RECENT_MESSAGES = 10  # used only when a strategy gives no default
DEFAULT_ESTIMATOR_TOKEN_BIAS = 2

TRIM_MIN_RECENT_DEFAULT = 2
SUMMARIZE_MIN_RECENT_DEFAULT = 4

SUMMARY_PREFIX = (
    "[Context from a summarized portion of the conversation between you and the user]: "
)
TRANSCRIPT_SEPARATOR = "\n---\n"
