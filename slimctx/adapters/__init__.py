"""Adapters between foreign message formats and canonical messages."""

from slimctx.adapters.openai import (
    extract_content,
    from_message,
    from_messages,
    role_from_openai,
    to_message,
    to_messages,
)

__all__ = [
    "extract_content",
    "role_from_openai",
    "to_message",
    "to_messages",
    "from_message",
    "from_messages",
]
