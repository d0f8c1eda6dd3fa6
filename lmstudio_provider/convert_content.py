"""
LM Studio Chat Messages → Generated Content

Builds the generic output content from the messages the engine produced during
a run:

- user/system/assistant text parts → TextContent
- assistant toolCallRequest parts → ToolCallContent (id synthesised when the
  engine did not supply one, arguments JSON-encoded)
- tool-role messages are skipped: they carry tool results, and tool results
  are input to the model, never its output

Other part types are skipped with an "Unsupported content type" warning.
"""

import json
from collections.abc import Sequence

from loguru import logger

from .engine.types import (
    ChatMessageData,
    ChatMessagePartTextData,
    ChatMessagePartToolCallRequestData,
    FunctionToolCallRequest,
)
from .protocol.call_warnings import CallWarning, unsupported_content
from .protocol.message_types import Content, TextContent, ToolCallContent
from .utils import generate_id


def _to_tool_call_content(request: FunctionToolCallRequest) -> ToolCallContent:
    return ToolCallContent(
        tool_call_id=request.id or generate_id("call"),
        tool_name=request.name,
        input=json.dumps(request.arguments or {}, ensure_ascii=False),
    )


def convert_content(
    messages: Sequence[ChatMessageData],
) -> tuple[list[Content], list[CallWarning]]:
    """
    Convert engine messages into generic content.

    Returns:
        (content, warnings): content in message order, and a warning per skipped part
    """
    content: list[Content] = []
    warnings: list[CallWarning] = []

    for message in messages:
        if message.role == "tool":
            logger.debug(f"[CONTENT] Skipping tool message with {len(message.content)} results")
            continue

        for part in message.content:
            if isinstance(part, ChatMessagePartTextData):
                content.append(TextContent(text=part.text))
            elif message.role == "assistant" and isinstance(
                part, ChatMessagePartToolCallRequestData
            ):
                content.append(_to_tool_call_content(part.tool_call_request))
            else:
                warnings.append(unsupported_content(part.type))

    return content, warnings

