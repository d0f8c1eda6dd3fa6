"""Tests for LM Studio chat messages → generated content conversion."""

import json

from lmstudio_provider.convert_content import convert_content
from lmstudio_provider.convert_messages import convert_to_lmstudio_messages
from lmstudio_provider.engine.types import (
    ChatMessageData,
    ChatMessagePartFileData,
    ChatMessagePartTextData,
)
from lmstudio_provider.protocol import (
    AssistantMessage,
    OtherWarning,
    SystemMessage,
    TextContent,
    TextPart,
    ToolCallContent,
    UserMessage,
)
from tests.utils.fake_engine import tool_call_part, tool_result_part


class TestTextContent:
    def test_text_round_trip(self) -> None:
        # given a prompt of text-only messages
        prompt = [
            SystemMessage(content="sys"),
            UserMessage(content=[TextPart(text="question")]),
            AssistantMessage(content=[TextPart(text="answer"), TextPart(text="more")]),
        ]

        # when converted inward and back outward
        messages, _ = convert_to_lmstudio_messages(prompt)
        content, warnings = convert_content(messages)

        # then the text parts come back in order
        assert content == [
            TextContent(text="sys"),
            TextContent(text="question"),
            TextContent(text="answer"),
            TextContent(text="more"),
        ]
        assert warnings == []


class TestToolCallContent:
    def test_tool_call_request_becomes_tool_call_content(self) -> None:
        # given
        message = ChatMessageData(
            role="assistant",
            content=[tool_call_part("calculator", {"a": 1, "b": 1}, call_id="call_42")],
        )

        # when
        content, warnings = convert_content([message])

        # then
        (call,) = content
        assert isinstance(call, ToolCallContent)
        assert call.tool_call_id == "call_42"
        assert call.tool_name == "calculator"
        assert json.loads(call.input) == {"a": 1, "b": 1}
        assert warnings == []

    def test_missing_id_is_synthesised(self) -> None:
        message = ChatMessageData(
            role="assistant", content=[tool_call_part("ping", None, call_id=None)]
        )

        content, _ = convert_content([message])

        assert content[0].tool_call_id.startswith("call_")
        assert content[0].input == "{}"

    def test_text_and_tool_calls_keep_message_order(self) -> None:
        # given
        message = ChatMessageData(
            role="assistant",
            content=[
                ChatMessagePartTextData(text="Checking."),
                tool_call_part("get_weather", {"city": "Tokyo"}, call_id="c1"),
                tool_call_part("get_weather", {"city": "Osaka"}, call_id="c2"),
            ],
        )

        # when
        content, _ = convert_content([message])

        # then
        assert [c.type for c in content] == ["text", "tool-call", "tool-call"]
        assert [c.tool_call_id for c in content[1:]] == ["c1", "c2"]


class TestSkippedContent:
    def test_tool_role_messages_are_not_output(self) -> None:
        # given the engine replayed a tool result within the run
        messages = [
            ChatMessageData(role="tool", content=[tool_result_part('{"sum": 2}')]),
            ChatMessageData(role="assistant", content=[ChatMessagePartTextData(text="2")]),
        ]

        # when
        content, warnings = convert_content(messages)

        # then
        assert content == [TextContent(text="2")]
        assert warnings == []

    def test_file_part_is_skipped_with_warning(self) -> None:
        message = ChatMessageData(
            role="user",
            content=[ChatMessagePartFileData(name="a.png", identifier="f1")],
        )

        content, warnings = convert_content([message])

        assert content == []
        assert warnings == [OtherWarning(message="Unsupported content type: file")]

    def test_tool_call_request_outside_assistant_is_skipped(self) -> None:
        message = ChatMessageData(role="user", content=[tool_call_part("calculator", {})])

        content, warnings = convert_content([message])

        assert content == []
        assert warnings == [OtherWarning(message="Unsupported content type: toolCallRequest")]
