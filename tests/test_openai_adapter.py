"""Tests for the OpenAI-style message adapter."""

import pytest

from slimctx.adapters.openai import (
    extract_content,
    from_message,
    from_messages,
    role_from_openai,
    to_message,
    to_messages,
)
from slimctx.compaction.types import Message


# ── extract_content ─────────────────────────────────────────────────


class TestExtractContent:
    def test_string(self):
        assert extract_content("hello world") == "hello world"

    def test_parts(self):
        content = [
            " world",
            {"type": "text", "text": "Hello"},
            {"type": "image_url", "image_url": {"url": "http://x/img.png"}},
        ]
        assert extract_content(content) == "world\nHello"

    @pytest.mark.parametrize("content", [None, 123, {}, [{"type": "image_url"}]])
    def test_unsupported(self, content):
        assert extract_content(content) == ""


class TestRoleFromOpenAI:
    @pytest.mark.parametrize(
        "role,expected",
        [
            ("assistant", "assistant"),
            ("system", "system"),
            ("developer", "system"),
            ("tool", "tool"),
            ("function", "tool"),
            ("user", "user"),
            ("human", "user"),
            ("generic", "user"),
            (None, "user"),
        ],
    )
    def test_mapping(self, role, expected):
        assert role_from_openai(role) == expected


# ── Conversion ──────────────────────────────────────────────────────


class TestToMessage:
    def test_simple(self):
        msg = to_message({"role": "user", "content": "Hello"})
        assert msg == Message("user", "Hello")
        assert msg.metadata is None

    def test_tool_result_keeps_call_id(self):
        msg = to_message({
            "role": "tool",
            "content": "Function result: 42",
            "tool_call_id": "call_123",
            "name": "calculator",
        })
        assert msg.role == "tool"
        assert msg.content == "Function result: 42"
        assert msg.metadata == {"tool_call_id": "call_123", "name": "calculator"}

    def test_assistant_tool_call_without_content(self):
        tool_calls = [{
            "id": "call_1",
            "type": "function",
            "function": {"name": "search", "arguments": '{"q": "oauth"}'},
        }]
        msg = to_message({"role": "assistant", "content": None, "tool_calls": tool_calls})
        assert msg.content == ""
        assert msg.metadata["tool_calls"] == tool_calls
        assert msg.metadata["original_content"] is None

    def test_missing_content_key_not_added(self):
        raw = {"role": "assistant", "tool_calls": [{"id": "c1"}]}
        msg = to_message(raw)
        assert msg.content == ""
        assert from_message(msg) == raw

    def test_developer_role_remembered(self):
        msg = to_message({"role": "developer", "content": "rules"})
        assert msg.role == "system"
        assert msg.metadata == {"original_role": "developer"}


class TestRoundTrip:
    @pytest.mark.parametrize(
        "raw",
        [
            {"role": "user", "content": "Simple question"},
            {"role": "system", "content": "  padded  "},
            {"role": "tool", "content": '{"result": 42}', "tool_call_id": "call_xyz", "name": "calc"},
            {
                "role": "assistant",
                "content": None,
                "tool_calls": [{"id": "c1", "type": "function", "function": {"name": "f", "arguments": "{}"}}],
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "What is in this image?"},
                    {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}},
                ],
            },
            {"role": "developer", "content": "Be brief."},
            {"role": "assistant", "content": "Hi", "name": "bot", "refusal": None},
        ],
    )
    def test_lossless(self, raw):
        assert from_message(to_message(raw)) == raw

    def test_human_becomes_user(self):
        assert from_message(Message("human", "hi")) == {"role": "user", "content": "hi"}

    def test_synthetic_message(self):
        assert from_message(Message("system", "summary")) == {"role": "system", "content": "summary"}

    def test_list_helpers(self):
        raw = [{"role": "system", "content": "s"}, {"role": "user", "content": "u"}]
        messages = to_messages(raw)
        assert [m.role for m in messages] == ["system", "user"]
        assert from_messages(messages) == raw
