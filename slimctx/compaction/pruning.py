"""Trimming strategy: drop the oldest messages until the history fits."""

from loguru import logger

from slimctx.compaction.budget import normalize_budget_config, should_allow_compression
from slimctx.compaction.types import (
    TRIM_MIN_RECENT_DEFAULT,
    Message,
    NormalizedBudgetConfig,
    TrimConfig,
)


class TrimCompressor:
    """
    Drops oldest messages until the estimated total fits the threshold.

    System messages are never dropped, nor are the last
    ``min_recent_messages`` messages. If those alone exceed the budget the
    result stays over threshold.
    """

    def __init__(self, config: TrimConfig | None = None):
        self._budget = normalize_budget_config(
            config or TrimConfig(),
            min_recent_default=TRIM_MIN_RECENT_DEFAULT,
        )

    @property
    def budget(self) -> NormalizedBudgetConfig:
        return self._budget

    def compress(self, messages: list[Message]) -> list[Message]:
        """
        Trim the history to the token threshold.

        Args:
            messages: Conversation history, oldest first.

        Returns:
            The surviving messages in original order, or ``messages`` itself
            when compaction is not allowed or not needed.
        """
        if not should_allow_compression(messages):
            logger.debug("Trim skipped: last message is not a user turn")
            return messages

        budget = self._budget
        threshold = budget.threshold_tokens
        estimates = [budget.estimate_tokens(msg) for msg in messages]
        total = sum(estimates)

        if total <= threshold:
            return messages

        preserve_from = max(0, len(messages) - budget.min_recent_messages)
        dropped: set[int] = set()

        for i in range(preserve_from):
            if total <= threshold:
                break
            if messages[i].role == "system":
                continue
            dropped.add(i)
            total -= estimates[i]

        # The protected tail alone can exceed the budget
        if total > threshold:
            for i in range(preserve_from):
                if total <= threshold:
                    break
                if i in dropped or messages[i].role == "system":
                    continue
                dropped.add(i)
                total -= estimates[i]

        if not dropped:
            logger.debug("Trim found nothing droppable outside the protected tail")
            return messages

        logger.debug(
            f"Trimmed {len(dropped)} message(s), "
            f"~{total} tokens left (threshold {threshold})"
        )
        return [msg for i, msg in enumerate(messages) if i not in dropped]
