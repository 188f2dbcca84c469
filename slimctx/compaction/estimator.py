"""Token estimation for messages."""

import math

import tiktoken

from slimctx.compaction.types import (
    DEFAULT_ESTIMATOR_TOKEN_BIAS,
    Message,
    TokenEstimator,
)

# Cache encoders by name
_encoders: dict[str, tiktoken.Encoding] = {}


def _get_encoder(encoding_name: str) -> tiktoken.Encoding:
    """Get or create the tiktoken encoder."""
    encoder = _encoders.get(encoding_name)
    if encoder is None:
        encoder = tiktoken.get_encoding(encoding_name)
        _encoders[encoding_name] = encoder
    return encoder


def estimate_message_tokens(message: Message) -> int:
    """
    Estimate tokens for a single message with the length heuristic.

    Roughly four characters per token, plus a small per-message bias for
    role and formatting overhead.

    Args:
        message: Message to estimate.

    Returns:
        Estimated token count.
    """
    return math.ceil(len(message.content) / 4) + DEFAULT_ESTIMATOR_TOKEN_BIAS


def estimate_messages_tokens(
    messages: list[Message],
    estimate_tokens: TokenEstimator | None = None,
) -> int:
    """
    Estimate total tokens for a list of messages.

    Args:
        messages: Messages to estimate.
        estimate_tokens: Per-message estimator. Defaults to the heuristic.

    Returns:
        Total estimated token count.
    """
    if not messages:
        return 0
    estimate = estimate_tokens or estimate_message_tokens
    return sum(estimate(msg) for msg in messages)


def tiktoken_estimator(encoding_name: str = "cl100k_base") -> TokenEstimator:
    """
    Build an estimator that counts content tokens with tiktoken.

    The encoder is loaded on first use, not when the estimator is built.

    Args:
        encoding_name: tiktoken encoding to use.

    Returns:
        A per-message token estimator.
    """

    def estimate(message: Message) -> int:
        if not message.content:
            return DEFAULT_ESTIMATOR_TOKEN_BIAS
        encoder = _get_encoder(encoding_name)
        return len(encoder.encode(message.content)) + DEFAULT_ESTIMATOR_TOKEN_BIAS

    return estimate
