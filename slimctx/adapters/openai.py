"""Conversion between OpenAI-style message dicts and canonical messages.

The chat-completions format (also used by LiteLLM) carries fields the
compaction engine has no use for: tool calls, tool call ids, names and
multi-part content. They ride along in ``Message.metadata`` so a history
can be converted, compacted and converted back without loss.
"""

from typing import Any

from slimctx.compaction.types import Message, Role

ORIGINAL_CONTENT_KEY = "original_content"
ORIGINAL_ROLE_KEY = "original_role"
CONTENT_ABSENT_KEY = "content_absent"


def extract_content(content: Any) -> str:
    """
    Extract plain text from message content.

    Args:
        content: A string or a list of content parts.

    Returns:
        Text found in the content, or an empty string.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "\n".join(p for p in parts if p).strip()
    return ""


def role_from_openai(role: str | None) -> Role:
    """Map an OpenAI role onto a canonical role."""
    if role == "assistant":
        return "assistant"
    if role in ("system", "developer"):
        return "system"
    if role in ("tool", "function"):
        return "tool"
    return "user"


def to_message(raw: dict[str, Any]) -> Message:
    """
    Convert an OpenAI-style message dict to a canonical message.

    Args:
        raw: Message dict with ``role`` and ``content``.

    Returns:
        Canonical message. Every other key lands in ``metadata``.
    """
    content = raw.get("content")
    metadata = {k: v for k, v in raw.items() if k not in ("role", "content")}

    # Keep non-text content (None, image or tool call parts) for the way back
    if "content" in raw and not isinstance(content, str):
        metadata[ORIGINAL_CONTENT_KEY] = content
    elif "content" not in raw:
        metadata[CONTENT_ABSENT_KEY] = True

    role = role_from_openai(raw.get("role"))
    if raw.get("role") not in (role, None):
        metadata[ORIGINAL_ROLE_KEY] = raw["role"]

    return Message(
        role=role,
        content=extract_content(content),
        metadata=metadata or None,
    )


def from_message(message: Message) -> dict[str, Any]:
    """
    Convert a canonical message back to an OpenAI-style dict.

    Args:
        message: Canonical message.

    Returns:
        Message dict, with metadata fields restored.
    """
    metadata = dict(message.metadata or {})
    content = metadata.pop(ORIGINAL_CONTENT_KEY, message.content)
    role = metadata.pop(ORIGINAL_ROLE_KEY, None) or message.role
    if role == "human":
        role = "user"
    if metadata.pop(CONTENT_ABSENT_KEY, False):
        return {"role": role, **metadata}
    return {"role": role, "content": content, **metadata}


def to_messages(raw_messages: list[dict[str, Any]]) -> list[Message]:
    """Convert a list of OpenAI-style dicts."""
    return [to_message(m) for m in raw_messages]


def from_messages(messages: list[Message]) -> list[dict[str, Any]]:
    """Convert a list of canonical messages back to dicts."""
    return [from_message(m) for m in messages]
