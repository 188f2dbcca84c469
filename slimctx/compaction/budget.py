"""Token budget normalization and the compression gate."""

from slimctx.compaction.estimator import estimate_message_tokens
from slimctx.compaction.types import (
    DEFAULT_MAX_MODEL_TOKENS,
    DEFAULT_MIN_RECENT_MESSAGES,
    DEFAULT_THRESHOLD_PERCENT,
    USER_ROLES,
    BudgetConfig,
    Message,
    NormalizedBudgetConfig,
    compute_threshold_tokens,
)


def normalize_budget_config(
    config: BudgetConfig | None = None,
    min_recent_default: int | None = None,
) -> NormalizedBudgetConfig:
    """
    Fill unset budget fields with their defaults.

    Values are not validated. A ``threshold_percent`` outside [0, 1] is kept
    as given; only ``min_recent_messages`` is clamped to zero.

    Args:
        config: Partially specified budget.
        min_recent_default: Strategy-specific default for ``min_recent_messages``.

    Returns:
        Fully populated budget.
    """
    config = config or BudgetConfig()
    if min_recent_default is None:
        min_recent_default = DEFAULT_MIN_RECENT_MESSAGES

    min_recent = config.min_recent_messages
    if min_recent is None:
        min_recent = min_recent_default

    return NormalizedBudgetConfig(
        max_model_tokens=(
            config.max_model_tokens
            if config.max_model_tokens is not None
            else DEFAULT_MAX_MODEL_TOKENS
        ),
        threshold_percent=(
            config.threshold_percent
            if config.threshold_percent is not None
            else DEFAULT_THRESHOLD_PERCENT
        ),
        estimate_tokens=config.estimate_tokens or estimate_message_tokens,
        min_recent_messages=max(0, min_recent),
    )


def should_allow_compression(messages: list[Message]) -> bool:
    """
    Check whether history may be compacted at this point.

    Only compact when the latest message is a user turn. An assistant or
    tool message last means a tool-use cycle may still be in flight.

    Args:
        messages: Conversation history.

    Returns:
        True if compaction is allowed.
    """
    if not messages:
        return False
    return messages[-1].role in USER_ROLES
