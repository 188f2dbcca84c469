"""Summarizing strategy: replace the middle of the history with a summary."""

from loguru import logger

from slimctx.compaction.budget import normalize_budget_config, should_allow_compression
from slimctx.compaction.types import (
    SUMMARIZE_MIN_RECENT_DEFAULT,
    SUMMARY_PREFIX,
    TRANSCRIPT_SEPARATOR,
    Message,
    NormalizedBudgetConfig,
    SummarizeConfig,
)


DEFAULT_SUMMARY_PROMPT = """You are an expert conversation summarizer. You'll receive an excerpt of a chat transcript to condense.

Goals:
- Be concise while retaining key facts, entities, user intent, decisions, follow-ups, and resolutions.
- Preserve important numbers, dates, IDs (truncate if long), and constraints.

When tool messages are present (role: tool or similar):
- Briefly note which tool(s) were called, why (the user/assistant intent), and the high-level outcome.
- Do NOT copy raw JSON, logs, or code. Extract only salient fields (status, counts, top IDs, amounts, dates, error messages).
- If outputs are very long, compress them to 1-2 sentences. Truncate long IDs (e.g. abc...123) and omit secrets.
- If several tools were called for the same purpose, summarize them together.
- If a tool failed or contradicted earlier assumptions, note the discrepancy.

Output format:
- Output only the summary as a single concise paragraph (2-5 sentences). No preface, no headings.

Example input:
user: Please find docs about OAuth token errors in our KB
assistant: I will search the knowledge base
assistant: calling search_kb with query "OAuth token expired"
tool: { "results": [ { "title": "Token expired", "fix": "Refresh or sync clock" }, { "title": "Clock skew", "fix": "NTP sync" } ] }
assistant: The docs suggest refreshing tokens and checking clock skew

Example summary:
User requested guidance on OAuth token errors. Assistant searched the KB; the tool returned articles about token expiration and clock skew. Assistant advised refreshing tokens and ensuring time sync."""


def format_transcript(messages: list[Message]) -> str:
    """Render messages as ``role: content`` lines for the summarizer."""
    return TRANSCRIPT_SEPARATOR.join(f"{msg.role}: {msg.content}" for msg in messages)


class SummarizeCompressor:
    """
    Summarizes the middle of the conversation once it exceeds the threshold.

    Keeps a leading system message, inserts one synthetic system message
    holding the summary, then the last ``min_recent_messages`` messages.
    The tail is a fixed count from the end; turn order is protected by the
    compression gate, which requires the last message to be a user turn.
    """

    def __init__(self, config: SummarizeConfig):
        self.model = config.model
        self.summary_prompt = config.prompt or DEFAULT_SUMMARY_PROMPT
        self._budget = normalize_budget_config(
            config,
            min_recent_default=SUMMARIZE_MIN_RECENT_DEFAULT,
        )

    @property
    def budget(self) -> NormalizedBudgetConfig:
        return self._budget

    async def compress(self, messages: list[Message]) -> list[Message]:
        """
        Summarize the history down to the token threshold.

        Errors raised by the model propagate unchanged.

        Args:
            messages: Conversation history, oldest first.

        Returns:
            ``[system?, summary, *recent]``, or ``messages`` itself when
            compaction is not allowed, not needed, or there is nothing to
            summarize.
        """
        if not should_allow_compression(messages):
            logger.debug("Summarize skipped: last message is not a user turn")
            return messages

        budget = self._budget
        threshold = budget.threshold_tokens
        total = sum(budget.estimate_tokens(msg) for msg in messages)

        if total <= threshold:
            return messages

        has_leading_system = messages[0].role == "system"
        keep_tail_start = max(0, len(messages) - budget.min_recent_messages)
        summarize_start = 1 if has_leading_system else 0
        to_summarize = messages[summarize_start:keep_tail_start]

        if not to_summarize:
            logger.debug("Summarize skipped: nothing between system prompt and recent tail")
            return messages

        response = await self.model.invoke([
            Message(role="system", content=self.summary_prompt),
            Message(role="user", content=format_transcript(to_summarize)),
        ])
        summary = Message(role="system", content=f"{SUMMARY_PREFIX}{response.content}")

        logger.debug(
            f"Summarized {len(to_summarize)} message(s), "
            f"kept {len(messages) - keep_tail_start} recent"
        )

        head = [messages[0]] if has_leading_system else []
        return [*head, summary, *messages[keep_tail_start:]]
